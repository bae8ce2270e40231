"""Web Log Analytics - Data models"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import MalformedRecordError
from .patterns import TIMESTAMP_FORMAT, TIMESTAMP_PATTERN


def is_valid_timestamp(value) -> bool:
    """True for a real ``YYYY-MM-DD HH:MM:SS`` date and time"""
    if not isinstance(value, str) or not TIMESTAMP_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class LogRecord:
    """One web-server access event"""
    ip: str
    timestamp: str
    url: str
    status: int
    user_agent: str

    @property
    def is_well_formed(self) -> bool:
        return all((self.ip, self.url, self.user_agent)) \
            and is_valid_timestamp(self.timestamp) \
            and isinstance(self.status, int) and not isinstance(self.status, bool)

    def to_row(self) -> List:
        return [self.ip, self.timestamp, self.url, self.status, self.user_agent]

    def to_dict(self) -> Dict:
        return asdict(self)


class PartitionIndex:
    """Records grouped by HTTP status code, in input order within each bucket.

    Derived data: build it with ``build_partition_index`` and rebuild it
    whenever the source records change.
    """

    def __init__(self, partitions: Dict[int, Tuple[LogRecord, ...]]):
        self._partitions = {key: tuple(partitions[key]) for key in sorted(partitions)}

    def keys(self) -> List[int]:
        """Distinct partition keys, ascending"""
        return list(self._partitions)

    def partition(self, status: int) -> Tuple[LogRecord, ...]:
        """Records whose status equals ``status``; empty when absent"""
        return self._partitions.get(status, ())

    def items(self):
        return self._partitions.items()

    @property
    def record_count(self) -> int:
        return sum(len(records) for records in self._partitions.values())

    def __iter__(self) -> Iterator[Tuple[LogRecord, ...]]:
        return iter(self._partitions.values())

    def __len__(self) -> int:
        return len(self._partitions)

    def __contains__(self, status) -> bool:
        return status in self._partitions

    def __eq__(self, other) -> bool:
        if not isinstance(other, PartitionIndex):
            return NotImplemented
        return self._partitions == other._partitions

    def __repr__(self) -> str:
        sizes = ", ".join(f"{k}: {len(v)}" for k, v in self._partitions.items())
        return f"PartitionIndex({{{sizes}}})"


@dataclass
class IngestResult:
    """Outcome of reading one input source"""
    records: Tuple[LogRecord, ...]
    skipped: int = 0
    errors: List[MalformedRecordError] = field(default_factory=list)


@dataclass
class AnalysisReport:
    """Aggregate output of one pipeline run"""
    total_requests: Optional[int] = None
    status_codes: List[Tuple[int, int]] = field(default_factory=list)
    top_pages: List[Tuple[str, int]] = field(default_factory=list)
    traffic_sources: List[Tuple[str, int]] = field(default_factory=list)
    suspicious_ips: List[Tuple[str, int]] = field(default_factory=list)
    traffic_trend: List[Tuple[str, int]] = field(default_factory=list)
    skipped: int = 0
    errors: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'summary': {
                'total_requests': self.total_requests,
                'skipped_rows': self.skipped,
            },
            'status_codes': [{'status': s, 'count': c} for s, c in self.status_codes],
            'top_pages': [{'url': u, 'count': c} for u, c in self.top_pages],
            'traffic_sources': [{'user_agent': a, 'count': c} for a, c in self.traffic_sources],
            'suspicious_ips': [{'ip': ip, 'failed_requests': c} for ip, c in self.suspicious_ips],
            'traffic_trend': [{'bucket': b, 'count': c} for b, c in self.traffic_trend],
            'errors': dict(self.errors),
        }
