"""Web Log Analytics - CSV ingestion"""

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from rich.progress import Progress, SpinnerColumn, TextColumn

from .errors import MalformedRecordError
from .models import IngestResult, LogRecord, is_valid_timestamp
from .patterns import BOM, CSV_FIELDS, MAX_RECORDED_ERRORS, UNDECODABLE

logger = logging.getLogger(__name__)


def parse_row(row: Sequence[str], line_number: Optional[int] = None) -> LogRecord:
    """Turn one CSV row into a LogRecord.

    Raises:
        MalformedRecordError: wrong field count, an empty field, undecodable
            bytes, a non-integer status or a timestamp outside
            ``YYYY-MM-DD HH:MM:SS``.
    """
    if len(row) != len(CSV_FIELDS):
        raise MalformedRecordError(
            f"expected {len(CSV_FIELDS)} fields, got {len(row)}", line_number, row)

    values = [value.strip() for value in row]
    for name, value in zip(CSV_FIELDS, values):
        if not value:
            raise MalformedRecordError(f"empty field '{name}'", line_number, row)
        if UNDECODABLE in value:
            raise MalformedRecordError(f"undecodable bytes in field '{name}'", line_number, row)

    ip, timestamp, url, status, user_agent = values

    try:
        status_code = int(status)
    except ValueError:
        raise MalformedRecordError(f"status is not an integer: {status!r}", line_number, row) from None

    if not is_valid_timestamp(timestamp):
        raise MalformedRecordError(f"unparsable timestamp: {timestamp!r}", line_number, row)

    return LogRecord(ip=ip, timestamp=timestamp, url=url, status=status_code, user_agent=user_agent)


def is_header(row: Sequence[str]) -> bool:
    return tuple(value.strip().lstrip(BOM).lower() for value in row) == CSV_FIELDS


class LogReader:
    """Reads ``ip,timestamp,url,status,user_agent`` rows into LogRecords.

    With ``skip_malformed`` (the default) bad rows are dropped and counted;
    otherwise the first bad row raises MalformedRecordError. The first
    non-blank row is skipped when it is the header.
    """

    def __init__(self, skip_malformed: bool = True, console=None):
        self.skip_malformed = skip_malformed
        self.console = console

    def read_lines(self, lines: Iterable[str]) -> IngestResult:
        records: List[LogRecord] = []
        errors: List[MalformedRecordError] = []
        skipped = 0
        seen_data = False

        for line_number, row in enumerate(csv.reader(lines), 1):
            if not row or not any(value.strip() for value in row):
                continue
            if not seen_data:
                seen_data = True
                if is_header(row):
                    continue
            try:
                records.append(parse_row(row, line_number))
            except MalformedRecordError as e:
                if not self.skip_malformed:
                    raise
                skipped += 1
                if len(errors) < MAX_RECORDED_ERRORS:
                    errors.append(e)
                logger.debug("Skipping malformed row: %s", e)

        if skipped:
            logger.info("Skipped %d malformed row(s)", skipped)
        return IngestResult(records=tuple(records), skipped=skipped, errors=errors)

    def read_file(self, filepath) -> IngestResult:
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Log file not found: {filepath}")

        # undecodable bytes become U+FFFD and the row is rejected by parse_row
        with open(path, 'r', encoding='utf-8-sig', errors='replace', newline='') as f:
            lines = f.readlines()

        if self.console is None:
            return self.read_lines(lines)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True
        ) as progress:
            task = progress.add_task("Reading logs...", total=len(lines))
            result = self.read_lines(lines)
            progress.update(task, completed=len(lines))
        return result
