#!/usr/bin/env python3
"""Web Log Analytics - Entry point"""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from weblog_analytics import (
    ANALYSES,
    VERSION,
    InvalidArgumentError,
    LogAnalyticsPipeline,
    LogReader,
    MalformedRecordError,
    export_partitions,
    print_partitions,
    print_records,
    print_report,
    write_csv_report,
    write_json_report,
)
from weblog_analytics.patterns import (
    DEFAULT_BUCKET_MINUTES,
    DEFAULT_FAILED_STATUSES,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_SUSPICIOUS_THRESHOLD,
)

console = Console()
logger = logging.getLogger("weblog_analytics.cli")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Web Log Analytics - request, status, page, agent, IP and trend analysis of CSV access logs",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("logfile", help="CSV log file (ip,timestamp,url,status,user_agent)")
    parser.add_argument("--top", type=int, default=DEFAULT_PAGE_LIMIT,
                        help="Number of most visited pages to report")
    parser.add_argument("--threshold", type=int, default=DEFAULT_SUSPICIOUS_THRESHOLD,
                        help="Failed requests an IP must exceed to be suspicious")
    parser.add_argument("--failed-status", type=int, action="append", dest="failed_statuses",
                        metavar="CODE", help="Status counted as a failed request (repeatable, default 404 and 500)")
    parser.add_argument("--bucket-minutes", type=int, default=DEFAULT_BUCKET_MINUTES,
                        help="Traffic trend bucket width in minutes")
    parser.add_argument("--analysis", action="append", choices=ANALYSES, dest="analyses",
                        help="Run only this analysis (repeatable)")
    parser.add_argument("--strict-rows", action="store_true",
                        help="Fail on the first malformed row instead of skipping it")
    parser.add_argument("-o", "--output", help="Output file (JSON)")
    parser.add_argument("--csv", help="Output file (labeled CSV rows)")
    parser.add_argument("-j", "--json", action="store_true", help="JSON output only")
    parser.add_argument("--partition-dir", help="Export status partitions under this directory")
    parser.add_argument("--strict-partitions", action="store_true",
                        help="Reject a fully dynamic partition build")
    parser.add_argument("--static-status", type=int, metavar="CODE",
                        help="Build only the partition for this status")
    parser.add_argument("--list-partitions", action="store_true", help="List status partitions")
    parser.add_argument("--status", type=int, metavar="CODE", help="Show the records of one status partition")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"WebLogAnalytics v{VERSION}")
    return parser


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True
    )
    logging.captureWarnings(True)


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        pipeline = LogAnalyticsPipeline(
            page_limit=args.top,
            failed_statuses=args.failed_statuses or DEFAULT_FAILED_STATUSES,
            threshold=args.threshold,
            bucket_minutes=args.bucket_minutes
        )
        reader = LogReader(skip_malformed=not args.strict_rows,
                           console=None if args.json else console)
        ingested = reader.read_file(args.logfile)
        report = pipeline.run(ingested.records, analyses=args.analyses, skipped=ingested.skipped)

        partition_mode_given = args.strict_partitions or args.static_status is not None
        show_partitions = args.list_partitions or partition_mode_given
        needs_index = args.partition_dir or show_partitions or args.status is not None
        index = None
        if needs_index:
            index = pipeline.build_partition_index(
                ingested.records, strict=args.strict_partitions, static_status=args.static_status)

        if args.json:
            payload = report.to_dict()
            if index is not None:
                payload['partitions'] = {str(k): len(v) for k, v in index.items()}
                if args.status is not None:
                    payload['records'] = [r.to_dict() for r in index.partition(args.status)]
            print(json.dumps(payload, indent=2))
        else:
            print_report(report, console)
            if index is not None and show_partitions:
                print_partitions(index, console)
            if index is not None and args.status is not None:
                print_records(index.partition(args.status), console)

        if args.output:
            write_json_report(report, args.output)
            if not args.json:
                console.print(f"\n[green]Report saved to:[/] {args.output}")
        if args.csv:
            write_csv_report(report, args.csv)
            if not args.json:
                console.print(f"[green]CSV report saved to:[/] {args.csv}")
        if args.partition_dir:
            written = export_partitions(index, args.partition_dir)
            if not args.json:
                console.print(f"[green]{len(written)} partition(s) exported to:[/] {args.partition_dir}")

    except (FileNotFoundError, MalformedRecordError, InvalidArgumentError) as e:
        logger.debug("Aborting", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
