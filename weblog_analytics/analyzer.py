"""Web Log Analytics - Core analysis engine"""

import logging
import warnings
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import EmptyInputWarning, InvalidArgumentError
from .models import AnalysisReport, LogRecord, PartitionIndex
from .partition import build_partition_index
from .patterns import (
    ANALYSES,
    BUCKET_FORMAT,
    BUCKET_WIDTH,
    DEFAULT_BUCKET_MINUTES,
    DEFAULT_FAILED_STATUSES,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_SUSPICIOUS_THRESHOLD,
    TIMESTAMP_FORMAT,
)

logger = logging.getLogger(__name__)


def _check_count(name: str, value) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidArgumentError(f"{name} must not be negative, got {value}")
    return value


def _check_statuses(statuses) -> frozenset:
    statuses = frozenset(statuses)
    if not statuses:
        raise InvalidArgumentError("status set must not be empty")
    for status in statuses:
        _check_count("status", status)
    return statuses


def _check_bucket_minutes(value) -> int:
    _check_count("bucket_minutes", value)
    if value == 0:
        raise InvalidArgumentError("bucket_minutes must be positive")
    return value


def _ranked(counts: Counter) -> List[Tuple]:
    # count descending, then key ascending
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def _well_formed(records: Iterable[LogRecord]):
    return (r for r in records if r.is_well_formed)


def time_bucket(timestamp: str, bucket_minutes: int = DEFAULT_BUCKET_MINUTES) -> str:
    """Truncate a ``YYYY-MM-DD HH:MM:SS`` timestamp to its bucket label"""
    if bucket_minutes == 1:
        return timestamp[:BUCKET_WIDTH]
    ts = datetime.strptime(timestamp, TIMESTAMP_FORMAT)
    minute_of_day = ts.hour * 60 + ts.minute
    minute_of_day -= minute_of_day % bucket_minutes
    start = ts.replace(hour=minute_of_day // 60, minute=minute_of_day % 60, second=0)
    return start.strftime(BUCKET_FORMAT)


class LogAnalyticsPipeline:
    """Six read-only analyses over a snapshot of log records.

    Constructor arguments set the defaults used by ``run``; each analysis
    method also accepts its own override. Every method is pure.
    """

    def __init__(self, page_limit: int = DEFAULT_PAGE_LIMIT,
                 failed_statuses: Iterable[int] = DEFAULT_FAILED_STATUSES,
                 threshold: int = DEFAULT_SUSPICIOUS_THRESHOLD,
                 bucket_minutes: int = DEFAULT_BUCKET_MINUTES):
        self.page_limit = _check_count("limit", page_limit)
        self.failed_statuses = _check_statuses(failed_statuses)
        self.threshold = _check_count("threshold", threshold)
        self.bucket_minutes = _check_bucket_minutes(bucket_minutes)

    def total_requests(self, records: Iterable[LogRecord]) -> int:
        return sum(1 for _ in _well_formed(records))

    def status_code_analysis(self, records: Iterable[LogRecord]) -> List[Tuple[int, int]]:
        return _ranked(Counter(r.status for r in _well_formed(records)))

    def most_visited_pages(self, records: Iterable[LogRecord],
                           limit: Optional[int] = None) -> List[Tuple[str, int]]:
        limit = self.page_limit if limit is None else _check_count("limit", limit)
        return _ranked(Counter(r.url for r in _well_formed(records)))[:limit]

    def traffic_source_analysis(self, records: Iterable[LogRecord]) -> List[Tuple[str, int]]:
        return _ranked(Counter(r.user_agent for r in _well_formed(records)))

    def suspicious_ips(self, records: Iterable[LogRecord],
                       status_set: Optional[Iterable[int]] = None,
                       threshold: Optional[int] = None) -> List[Tuple[str, int]]:
        """Client addresses with more than ``threshold`` failed requests"""
        statuses = self.failed_statuses if status_set is None else _check_statuses(status_set)
        threshold = self.threshold if threshold is None else _check_count("threshold", threshold)

        failed = Counter(r.ip for r in _well_formed(records) if r.status in statuses)
        return [(ip, count) for ip, count in _ranked(failed) if count > threshold]

    def traffic_trend(self, records: Iterable[LogRecord],
                      bucket_minutes: Optional[int] = None) -> List[Tuple[str, int]]:
        """Requests per time bucket, oldest bucket first"""
        minutes = self.bucket_minutes if bucket_minutes is None else _check_bucket_minutes(bucket_minutes)
        buckets = Counter(time_bucket(r.timestamp, minutes) for r in _well_formed(records))
        return sorted(buckets.items())

    def build_partition_index(self, records: Iterable[LogRecord], strict: bool = False,
                              static_status: Optional[int] = None) -> PartitionIndex:
        return build_partition_index(records, strict=strict, static_status=static_status)

    def run(self, records: Sequence[LogRecord], analyses: Optional[Iterable[str]] = None,
            skipped: int = 0) -> AnalysisReport:
        """Run the requested analyses (all by default) over one snapshot.

        An analysis that raises is logged and recorded in ``report.errors``;
        the remaining analyses still run.
        """
        selected = list(ANALYSES) if analyses is None else list(analyses)
        unknown = [name for name in selected if name not in ANALYSES]
        if unknown:
            raise InvalidArgumentError(f"unknown analysis: {', '.join(unknown)}")

        records = tuple(records)
        report = AnalysisReport(skipped=skipped)

        if not any(r.is_well_formed for r in records):
            warnings.warn("no well-formed records to analyze", EmptyInputWarning, stacklevel=2)

        tasks = {
            'total_requests': self.total_requests,
            'status_codes': self.status_code_analysis,
            'top_pages': self.most_visited_pages,
            'traffic_sources': self.traffic_source_analysis,
            'suspicious_ips': self.suspicious_ips,
            'traffic_trend': self.traffic_trend,
        }
        for name in ANALYSES:
            if name not in selected:
                continue
            try:
                setattr(report, name, tasks[name](records))
            except Exception as e:
                logger.exception("Analysis %s failed", name)
                report.errors[name] = str(e)

        return report
