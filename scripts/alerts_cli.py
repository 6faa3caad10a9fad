#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from alerts import (  # noqa: E402
    COUNT_UNAVAILABLE,
    AlertQueryEngine,
    AlertRecord,
    AlertStore,
    AlertStoreError,
    Severity,
)

DEFAULT_DOCUMENT = "data/alerts.xml"


def resolve_path(base_dir: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    return candidate if candidate.is_absolute() else (base_dir / candidate).resolve()


def _print_records(records: list[AlertRecord]) -> None:
    print(json.dumps([record.to_dict() for record in records], ensure_ascii=False, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect and update the smart city alert document")
    parser.add_argument(
        "--document",
        default=DEFAULT_DOCUMENT,
        help=f"Path to the alert XML document (default: {DEFAULT_DOCUMENT})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List every alert held by the store")
    subparsers.add_parser("critical", help="List CRITICAL alerts from the document")
    subparsers.add_parser("high-priority", help="List SEVERE and CRITICAL alerts from the document")
    subparsers.add_parser("latest", help="Show the most recent alert in the document")
    subparsers.add_parser("validate", help="Check that the document holds at least one well-formed alert")

    region_parser = subparsers.add_parser("region", help="List alerts for a region (case-insensitive)")
    region_parser.add_argument("region")

    severity_choices = [level.value for level in Severity]
    severity_parser = subparsers.add_parser("severity", help="List alerts with an exact severity")
    severity_parser.add_argument("severity", choices=severity_choices)

    count_parser = subparsers.add_parser("count", help="Count alerts with an exact severity")
    count_parser.add_argument("severity", choices=severity_choices)

    broadcast_parser = subparsers.add_parser("broadcast", help="Save a new alert")
    broadcast_parser.add_argument("--severity", required=True, choices=severity_choices)
    broadcast_parser.add_argument("--message", required=True)
    broadcast_parser.add_argument("--region", required=True)
    broadcast_parser.add_argument("--issuer", default=None)

    delete_parser = subparsers.add_parser("delete", help="Delete an alert by id")
    delete_parser.add_argument("alert_id")
    return parser


def main() -> int:
    args = build_parser().parse_args()
    document_path = resolve_path(PROJECT_ROOT, args.document)
    engine = AlertQueryEngine(document_path)

    try:
        if args.command == "list":
            _print_records(AlertStore(document_path).find_all())
        elif args.command == "critical":
            _print_records(engine.filter_critical())
        elif args.command == "high-priority":
            _print_records(engine.filter_high_priority())
        elif args.command == "region":
            _print_records(engine.filter_by_region(args.region))
        elif args.command == "severity":
            _print_records(engine.filter_by_severity(Severity.from_value(args.severity)))
        elif args.command == "count":
            count = engine.count_by_severity(Severity.from_value(args.severity))
            if count == COUNT_UNAVAILABLE:
                print(f"[ALERTS] Count unavailable: cannot read {document_path}", file=sys.stderr)
                return 1
            print(count)
        elif args.command == "latest":
            record = engine.most_recent()
            if record is None:
                print("[ALERTS] Document holds no alerts.")
                return 1
            _print_records([record])
        elif args.command == "validate":
            valid = engine.validate_structure()
            print(f"[ALERTS] {document_path}: {'valid' if valid else 'INVALID'}")
            return 0 if valid else 1
        elif args.command == "broadcast":
            saved = AlertStore(document_path).save(
                AlertRecord(
                    severity=Severity.from_value(args.severity),
                    message=args.message,
                    region=args.region,
                    issuer=args.issuer,
                )
            )
            print(f"[ALERTS] Alert broadcasted. ID: {saved.id}, Severity: {saved.severity.value}, Region: {saved.region}")
        elif args.command == "delete":
            if not AlertStore(document_path).delete(args.alert_id):
                print(f"[ALERTS] Alert not found: {args.alert_id}", file=sys.stderr)
                return 1
            print(f"[ALERTS] Alert deleted: {args.alert_id}")
    except AlertStoreError as exc:
        print(f"[ALERTS] Error: {exc}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
