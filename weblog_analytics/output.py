"""Web Log Analytics - Report output"""

import csv
import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List

from rich import box
from rich.panel import Panel
from rich.table import Table

from .models import AnalysisReport, PartitionIndex
from .patterns import ANALYSES, CSV_FIELDS, PARTITION_FILE, REPORT_COLUMNS, REPORT_LABELS

logger = logging.getLogger(__name__)


def labeled_rows(report: AnalysisReport) -> Iterator[List]:
    """Yield every result row prefixed with its analysis label"""
    for name in ANALYSES:
        if name in report.errors:
            continue
        label = REPORT_LABELS[name]
        if name == 'total_requests':
            if report.total_requests is not None:
                yield [label, report.total_requests]
            continue
        for key, count in getattr(report, name):
            yield [label, key, count]


def write_csv_report(report: AnalysisReport, filepath) -> Path:
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        writer = csv.writer(f)
        for row in labeled_rows(report):
            writer.writerow(row)
    logger.info("Wrote CSV report to %s", path)
    return path


def write_json_report(report: AnalysisReport, filepath) -> Path:
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, indent=2)
    logger.info("Wrote JSON report to %s", path)
    return path


def export_partitions(index: PartitionIndex, directory) -> Dict[int, Path]:
    """Write one ``status=<code>/part-00000.csv`` file per partition"""
    root = Path(directory)
    written = {}
    for status, records in index.items():
        part_dir = root / f"status={status}"
        part_dir.mkdir(parents=True, exist_ok=True)
        part_file = part_dir / PARTITION_FILE
        with open(part_file, 'w', encoding='utf-8', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(CSV_FIELDS)
            for record in records:
                writer.writerow(record.to_row())
        written[status] = part_file
    logger.info("Exported %d partition(s) to %s", len(written), root)
    return written


def _status_color(code: int) -> str:
    return 'green' if code < 400 else 'yellow' if code < 500 else 'red'


def print_report(report: AnalysisReport, console=None):
    if console is None:
        print(json.dumps(report.to_dict(), indent=2))
        return

    console.print("\n" + "═" * 70, style="cyan")
    console.print("              WEB LOG ANALYTICS REPORT", style="bold cyan")
    console.print("═" * 70, style="cyan")

    total = report.total_requests if report.total_requests is not None else 0
    console.print(Panel.fit(
        f"Total Requests: [cyan]{total:,}[/]\n"
        f"Skipped Rows: [{'yellow' if report.skipped else 'green'}]{report.skipped:,}[/]\n"
        f"Suspicious IPs: [{'red' if report.suspicious_ips else 'green'}]{len(report.suspicious_ips):,}[/]",
        title="Summary",
        border_style="cyan"
    ))

    for name in ANALYSES[1:]:
        rows = getattr(report, name)
        if not rows:
            continue
        console.print("\n" + "─" * 70, style="cyan")
        console.print(REPORT_LABELS[name].rstrip(':').upper(),
                      style="bold red" if name == 'suspicious_ips' else "bold")
        key_heading, count_heading = REPORT_COLUMNS[name]
        table = Table(box=box.ROUNDED)
        table.add_column(key_heading, style="red" if name == 'suspicious_ips' else "cyan")
        table.add_column(count_heading, style="white", justify="right")
        for key, count in rows:
            if name == 'status_codes':
                table.add_row(f"[{_status_color(key)}]{key}[/]", str(count))
            else:
                table.add_row(str(key), str(count))
        console.print(table)

    if report.errors:
        console.print("\n" + "─" * 70, style="cyan")
        console.print("FAILED ANALYSES", style="bold red")
        for name, message in report.errors.items():
            console.print(f"  {name}: [red]{message}[/]")

    console.print("\n" + "═" * 70, style="cyan")


def print_partitions(index: PartitionIndex, console):
    table = Table(box=box.ROUNDED, title="Partitions")
    table.add_column("Partition", style="cyan")
    table.add_column("Records", style="white", justify="right")
    for status, records in index.items():
        table.add_row(f"status={status}", str(len(records)))
    console.print(table)


def print_records(records, console):
    table = Table(box=box.ROUNDED)
    for name in CSV_FIELDS:
        table.add_column(name, style="cyan" if name == 'ip' else "white")
    for record in records:
        table.add_row(*(str(value) for value in record.to_row()))
    console.print(table)
