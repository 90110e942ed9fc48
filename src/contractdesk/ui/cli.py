from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from contractdesk.adapters.csv_upload.schema import PLAN_SPELLINGS, STATUS_SPELLINGS
from contractdesk.app import (
    browse_contracts,
    dashboard_statistics,
    import_contracts_csv,
    preview_contracts_csv,
    remove_contract,
    set_contract_status,
)
from contractdesk.config import configure_logging
from contractdesk.domain.ports.persistence import ContractQuery
from contractdesk.domain.reconciliation import (
    BatchTooLargeError,
    MalformedFileError,
    RowValidationFailedError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from contractdesk.domain.contract_admin import ContractPage, ContractStatistics
    from contractdesk.domain.model import ContractStatus, Plan
    from contractdesk.domain.reconciliation import CommitResult, PreviewSummary

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage customer service contracts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    preview = subparsers.add_parser("preview", help="Dry-run a CSV upload without writing")
    preview.add_argument("file", type=str, help="CSV file with the contracts to import")

    upload = subparsers.add_parser("import", help="Import a CSV upload atomically")
    upload.add_argument("file", type=str, help="CSV file with the contracts to import")

    listing = subparsers.add_parser("list", help="List stored contracts")
    listing.add_argument("--id", dest="contract_id", type=str, help="Exact contract id")
    listing.add_argument("--name", type=str, help="Case-insensitive client name fragment")
    listing.add_argument("--email", type=str, help="Case-insensitive client email fragment")
    listing.add_argument("--plan", type=str, help="Basico, Pro or Enterprise")
    listing.add_argument("--status", type=str, help="Ativo or Inativo")
    listing.add_argument("--value", type=str, help="Exact monthly value")
    listing.add_argument("--start-date", type=str, help="Exact start date (YYYY-MM-DD)")
    listing.add_argument("--page", type=int, default=1, help="Page number (default: %(default)s)")
    listing.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Contracts per page (defaults to config)",
    )

    status = subparsers.add_parser("status", help="Set a contract's status")
    status.add_argument("contract_id", type=str, help="Contract id")
    status.add_argument("status", type=str, help="Ativo or Inativo")

    delete = subparsers.add_parser("delete", help="Delete a contract")
    delete.add_argument("contract_id", type=str, help="Contract id")

    subparsers.add_parser("stats", help="Show dashboard statistics")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _parse_plan(value: str) -> Plan:
    plan = PLAN_SPELLINGS.get(value.strip().lower())
    if plan is None:
        raise ValueError(f"Invalid plan: {value}")
    return plan


def _parse_status(value: str) -> ContractStatus:
    status = STATUS_SPELLINGS.get(value.strip().lower())
    if status is None:
        raise ValueError(f"Invalid status: {value}")
    return status


def _parse_decimal(value: str) -> Decimal:
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid value: {value}") from exc


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date: {value}") from exc


def _build_query(args: argparse.Namespace) -> ContractQuery:
    return ContractQuery(
        contract_id=_parse_uuid(args.contract_id) if args.contract_id else None,
        name_contains=args.name,
        email_contains=args.email,
        plan=_parse_plan(args.plan) if args.plan else None,
        status=_parse_status(args.status) if args.status else None,
        monthly_value=_parse_decimal(args.value) if args.value else None,
        start_date=_parse_date(args.start_date) if args.start_date else None,
    )


def _read_upload(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ValueError(f"Cannot read {path}: {exc.strerror}") from exc


def _report_preview(summary: PreviewSummary) -> None:
    log.info(
        "Preview: total=%s, new=%s, unchanged=%s, reactivation=%s",
        summary.total,
        summary.count_new,
        summary.count_unchanged,
        summary.count_reactivation,
    )
    for label, items in (
        ("new", summary.new),
        ("unchanged", summary.unchanged),
        ("reactivation", summary.reactivation),
    ):
        for item in items:
            suffix = f" ({item.reason})" if item.reason else ""
            log.info("  [%s] %s <%s>%s", label, item.name, item.email, suffix)


def _report_commit(result: CommitResult) -> None:
    log.info(
        "Import finished: inserted=%s, updated=%s, ignored=%s, total=%s",
        result.inserted,
        result.updated,
        result.ignored,
        result.total,
    )


def _report_page(page: ContractPage) -> None:
    log.info("Page %s/%s (%s contracts)", page.page, page.total_pages, page.total)
    for contract in page.items:
        log.info(
            "  %s %s <%s> %s %s %s since %s",
            contract.id,
            contract.client_name,
            contract.client_email,
            contract.plan.value,
            contract.monthly_value,
            contract.status.value,
            contract.start_date.isoformat(),
        )


def _report_statistics(stats: ContractStatistics) -> None:
    log.info(
        "Clients: total=%s, active=%s, inactive=%s",
        stats.total_clients,
        stats.active,
        stats.inactive,
    )
    log.info(
        "Monthly value: active=%s, inactive=%s",
        stats.monthly_value_active,
        stats.monthly_value_inactive,
    )
    for plan, count in stats.per_plan.items():
        value = stats.monthly_value_per_plan[plan]
        log.info("  %s: %s contracts, %s/month", plan.value, count, value)


def _run(args: argparse.Namespace) -> None:
    if args.command == "preview":
        _report_preview(preview_contracts_csv(_read_upload(args.file)))
    elif args.command == "import":
        _report_commit(import_contracts_csv(_read_upload(args.file)))
    elif args.command == "list":
        page = browse_contracts(criteria=_build_query(args), page=args.page, limit=args.limit)
        _report_page(page)
    elif args.command == "status":
        contract = set_contract_status(_parse_uuid(args.contract_id), _parse_status(args.status))
        log.info("Contract %s is now %s", contract.id, contract.status.value)
    elif args.command == "delete":
        remove_contract(_parse_uuid(args.contract_id))
        log.info("Deleted contract %s", args.contract_id)
    elif args.command == "stats":
        _report_statistics(dashboard_statistics())
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        _run(parsed_args)
    except RowValidationFailedError as exc:
        log.error("%s", exc)  # noqa: TRY400
        for error in exc.errors:
            log.error("  %s", error)  # noqa: TRY400
        sys.exit(2)
    except (BatchTooLargeError, MalformedFileError, ValueError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console entry point: install the Ctrl+C handler, then run ``main``."""
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
