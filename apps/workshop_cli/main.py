"""CLI harness for browsing the archive and ingesting reports."""
import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from lib import analytics
from lib.record_store import RecordStore
from services.report_extractor.run import run as run_report_extractor
from utils.errors import WorkshopHubError


def _print_records(records) -> None:
    for record in records:
        print(f"  [{record.id}] {analytics.format_date(record.date)}  {record.title}")
        print(f"      {record.category} | Lead: {record.lead} | Venue: {record.venue}")


def cmd_list(store: RecordStore, args: argparse.Namespace) -> int:
    records = analytics.filter_inventory(store.records, args.category, args.search)
    print(f"{len(records)} Active Records")
    _print_records(records)
    return 0


def cmd_show(store: RecordStore, args: argparse.Namespace) -> int:
    record = store.get(args.record_id)
    payload = record.to_payload()
    payload["budgetTotal"] = analytics.budget_total(record)
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def cmd_dashboard(store: RecordStore, args: argparse.Namespace) -> int:
    summary = analytics.dashboard_summary(store.records, args.year)
    print("=" * 60)
    print(f"Annual Impact Report {summary['year']}")
    print("=" * 60)
    print(f"  Workshops: {summary['record_count']}")
    print(f"  Participants: {summary['total_participants']}")
    print(f"  Average feedback: {summary['average_rating']}")
    _print_records(summary["records"])
    return 0


def cmd_compare(store: RecordStore, args: argparse.Namespace) -> int:
    print(json.dumps(analytics.comparison_matrix(store.records), indent=2, ensure_ascii=False))
    return 0


def cmd_process_report(store: RecordStore, args: argparse.Namespace) -> int:
    text = Path(args.report_file).read_text(encoding="utf-8")
    record = run_report_extractor(text)
    if args.save:
        store.add(record)
        print(f"✓ Saved workshop [{record.id}] to the archive.")
    print(json.dumps(record.to_payload(), indent=2, ensure_ascii=False))
    return 0


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "dashboard": cmd_dashboard,
    "compare": cmd_compare,
    "process-report": cmd_process_report,
}


def _parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Browse the workshop archive.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List workshops in the inventory.")
    list_parser.add_argument("--category", default=analytics.ALL_CATEGORIES, help="Category filter.")
    list_parser.add_argument("--search", default="", help="Search title, venue and lead.")

    show_parser = subparsers.add_parser("show", help="Show one workshop as JSON.")
    show_parser.add_argument("record_id", help="Workshop id.")

    dashboard_parser = subparsers.add_parser("dashboard", help="Yearly summary.")
    dashboard_parser.add_argument("--year", default=None, help="Year to summarise (defaults to this year).")

    subparsers.add_parser("compare", help="Comparison matrix across workshops.")

    report_parser = subparsers.add_parser("process-report", help="Extract a workshop from a report file.")
    report_parser.add_argument("report_file", help="Path to the raw report text.")
    report_parser.add_argument("--save", action="store_true", help="Add the extracted workshop to the archive.")
    return parser.parse_args(argv)


def _main(argv: list[str], store: Optional[RecordStore] = None) -> int:
    """Entry point used by `python -m apps.workshop_cli.main`."""
    args = _parse_args(argv)
    store = store or RecordStore()
    result = store.load()
    if result.degraded:
        print("⚠ Operating in offline fallback mode; changes will not reach the archive.")
    try:
        return COMMANDS[args.command](store, args)
    except WorkshopHubError as e:
        print(f"✗ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(_main(sys.argv[1:]))
