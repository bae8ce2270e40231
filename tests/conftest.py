import pytest

from weblog_analytics import LogAnalyticsPipeline, LogReader, LogRecord

SAMPLE_CSV = """ip,timestamp,url,status,user_agent
192.168.1.1,2024-01-15 10:00:01,/home,200,Mozilla/5.0
192.168.1.5,2024-01-15 10:00:45,/products,404,Mozilla/5.0
192.168.1.7,2024-01-15 10:01:12,/home,200,curl/7.68.0
192.168.1.10,2024-01-15 10:01:30,/checkout,500,Mozilla/5.0
192.168.1.15,2024-01-15 10:02:05,/products,404,Googlebot/2.1
"""


def make_record(ip="10.0.0.1", timestamp="2024-01-15 10:00:00", url="/", status=200,
                user_agent="Mozilla/5.0"):
    return LogRecord(ip=ip, timestamp=timestamp, url=url, status=status, user_agent=user_agent)


@pytest.fixture
def sample_records():
    return LogReader().read_lines(SAMPLE_CSV.splitlines()).records


@pytest.fixture
def pipeline():
    return LogAnalyticsPipeline()


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "access.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def attack_records():
    """One noisy client, one borderline client and some normal traffic"""
    records = []
    for second in range(5):
        records.append(make_record(ip="203.0.113.9", timestamp=f"2024-01-15 11:00:0{second}",
                                   url="/admin", status=404))
    for second in range(3):
        records.append(make_record(ip="198.51.100.4", timestamp=f"2024-01-15 11:01:0{second}",
                                   url="/login", status=500))
    records.append(make_record(ip="198.51.100.4", url="/login", status=403))
    records.append(make_record(ip="198.51.100.4", url="/", status=200))
    records.append(make_record(ip="192.0.2.1", url="/", status=200))
    return tuple(records)
