"""Web Log Analytics package"""

from .patterns import VERSION, ANALYSES, REPORT_LABELS
from .errors import EmptyInputWarning, InvalidArgumentError, MalformedRecordError, PartitionModeError
from .models import AnalysisReport, IngestResult, LogRecord, PartitionIndex
from .reader import LogReader, parse_row
from .partition import build_partition_index
from .analyzer import LogAnalyticsPipeline, time_bucket
from .output import (
    export_partitions,
    labeled_rows,
    print_partitions,
    print_records,
    print_report,
    write_csv_report,
    write_json_report,
)

__all__ = [
    'VERSION', 'ANALYSES', 'REPORT_LABELS',
    'EmptyInputWarning', 'InvalidArgumentError', 'MalformedRecordError', 'PartitionModeError',
    'AnalysisReport', 'IngestResult', 'LogRecord', 'PartitionIndex',
    'LogReader', 'parse_row', 'build_partition_index', 'LogAnalyticsPipeline', 'time_bucket',
    'export_partitions', 'labeled_rows', 'print_partitions', 'print_records', 'print_report',
    'write_csv_report', 'write_json_report',
]
