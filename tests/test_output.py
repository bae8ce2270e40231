import csv
import json

from rich.console import Console

from weblog_analytics import (
    REPORT_LABELS,
    LogAnalyticsPipeline,
    build_partition_index,
    export_partitions,
    labeled_rows,
    print_partitions,
    print_report,
    write_csv_report,
    write_json_report,
)


def test_labeled_rows(pipeline, sample_records):
    rows = list(labeled_rows(pipeline.run(sample_records)))
    assert rows[0] == ["Total Requests:", 5]
    assert ["Status Code Analysis:", 200, 2] in rows
    assert ["Most Visited Pages:", "/home", 2] in rows
    assert ["Traffic Trend:", "2024-01-15 10:02", 1] in rows
    assert not [row for row in rows if row[0] == REPORT_LABELS['suspicious_ips']]
    labels = {row[0] for row in rows}
    assert labels <= set(REPORT_LABELS.values())


def test_labeled_rows_skip_failed_analyses(pipeline, sample_records):
    report = pipeline.run(sample_records)
    report.errors['top_pages'] = "boom"
    rows = list(labeled_rows(report))
    assert not [row for row in rows if row[0] == "Most Visited Pages:"]


def test_write_csv_report(tmp_path, pipeline, sample_records):
    path = write_csv_report(pipeline.run(sample_records), tmp_path / "out" / "report.csv")
    with open(path, newline='', encoding='utf-8') as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Total Requests:", "5"]
    assert ["Status Code Analysis:", "404", "2"] in rows


def test_write_json_report(tmp_path, pipeline, sample_records):
    path = write_json_report(pipeline.run(sample_records, skipped=1), tmp_path / "report.json")
    data = json.loads(path.read_text(encoding='utf-8'))
    assert data['summary'] == {'total_requests': 5, 'skipped_rows': 1}
    assert data['status_codes'][0] == {'status': 200, 'count': 2}
    assert data['suspicious_ips'] == []


def test_export_partitions(tmp_path, sample_records):
    index = build_partition_index(sample_records)
    written = export_partitions(index, tmp_path)
    assert sorted(written) == [200, 404, 500]

    part = tmp_path / "status=404" / "part-00000.csv"
    assert written[404] == part
    with open(part, newline='', encoding='utf-8') as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["ip", "timestamp", "url", "status", "user_agent"]
    assert [row[0] for row in rows[1:]] == ["192.168.1.5", "192.168.1.15"]


def test_print_report_with_console(pipeline, sample_records):
    console = Console(record=True, width=120)
    print_report(pipeline.run(sample_records), console)
    text = console.export_text()
    assert "WEB LOG ANALYTICS REPORT" in text
    assert "STATUS CODE ANALYSIS" in text
    assert "/products" in text


def test_print_report_without_console(capsys, pipeline, sample_records):
    print_report(pipeline.run(sample_records))
    data = json.loads(capsys.readouterr().out)
    assert data['summary']['total_requests'] == 5


def test_print_partitions(sample_records):
    console = Console(record=True, width=80)
    print_partitions(build_partition_index(sample_records), console)
    assert "status=500" in console.export_text()


def test_json_trend_entries_use_bucket_key(pipeline, sample_records):
    report = LogAnalyticsPipeline(bucket_minutes=5).run(sample_records)
    assert report.to_dict()['traffic_trend'] == [{'bucket': '2024-01-15 10:00', 'count': 5}]
