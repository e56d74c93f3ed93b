from __future__ import annotations

import argparse
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from config import config
from db.db import init_db
from db.repositories import AccountingEntryRepository
from domain.base_types import ExchangeId, TaxAccountId
from domain.year_to_date import year_date_range
from importers.ledger_csv import load_ledger_entries
from services.exchange_service import ExchangeService
from utils.exchange_summary import render_exchange_financials, render_rule_status, render_year_to_date_metrics
from utils.formatting import format_currency

logger = logging.getLogger(__name__)


def run_import(db_file: Path, csv_path: Path, *, reset: bool = False) -> None:
    session = init_db(db_file=db_file, reset=reset)
    entries = load_ledger_entries(csv_path)
    AccountingEntryRepository(session).create_many(entries)
    logger.info("Persisted %d ledger entries into %s", len(entries), db_file)
    print(f"Imported {len(entries)} entries from {csv_path}")


def run_financials(db_file: Path, exchange_id: ExchangeId, *, persist: bool) -> None:
    service = ExchangeService(init_db(db_file=db_file))
    financials = service.refresh_financials(exchange_id) if persist else service.financials(exchange_id)
    render_exchange_financials(exchange_id, financials)


def run_balance(db_file: Path, exchange_id: ExchangeId) -> None:
    service = ExchangeService(init_db(db_file=db_file))
    print(f"Exchange {exchange_id} balance: {format_currency(service.balance(exchange_id))}")


def run_year_to_date(db_file: Path, tax_account_id: TaxAccountId, start: date, end: date) -> None:
    service = ExchangeService(init_db(db_file=db_file))
    metrics = service.year_to_date(tax_account_id, start, end)
    render_year_to_date_metrics(tax_account_id, start, end, metrics)


def run_rules(db_file: Path, exchange_id: ExchangeId, sale_value: Decimal | None) -> None:
    service = ExchangeService(init_db(db_file=db_file))
    status = service.identification_status(exchange_id, total_sale_value=sale_value)
    render_rule_status(exchange_id, status)


def _resolve_range(args: argparse.Namespace) -> tuple[date, date]:
    if args.start is not None or args.end is not None:
        if args.start is None or args.end is None:
            raise SystemExit("--start and --end must be given together")
        return args.start, args.end
    return year_date_range(args.year if args.year is not None else date.today().year)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Exchange ledger aggregation and 1031 identification checks.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database file (defaults to settings)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import-entries", help="Load accounting entries from CSV")
    import_parser.add_argument("--csv", type=Path, required=True)
    import_parser.add_argument("--reset", action="store_true", help="Delete the database file before importing")

    financials_parser = subparsers.add_parser("financials", help="Sale, replacement and remaining value")
    financials_parser.add_argument("--exchange-id", type=int, required=True)
    financials_parser.add_argument("--persist", action="store_true", help="Store the values on the exchange")

    balance_parser = subparsers.add_parser("balance", help="Cash held for an exchange")
    balance_parser.add_argument("--exchange-id", type=int, required=True)

    ytd_parser = subparsers.add_parser("ytd", help="Year to date metrics for a tax account")
    ytd_parser.add_argument("--tax-account-id", type=int, required=True)
    ytd_parser.add_argument("--year", type=int, default=None)
    ytd_parser.add_argument("--start", type=date.fromisoformat, default=None)
    ytd_parser.add_argument("--end", type=date.fromisoformat, default=None)

    rules_parser = subparsers.add_parser("rules", help="Evaluate identification rules for an exchange")
    rules_parser.add_argument("--exchange-id", type=int, required=True)
    rules_parser.add_argument("--sale-value", type=Decimal, default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    logging.basicConfig(level=config().log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    args = build_parser().parse_args(argv)
    db_file = args.db or config().database_file

    if args.command == "import-entries":
        run_import(db_file, args.csv, reset=args.reset)
    elif args.command == "financials":
        run_financials(db_file, ExchangeId(args.exchange_id), persist=args.persist)
    elif args.command == "balance":
        run_balance(db_file, ExchangeId(args.exchange_id))
    elif args.command == "ytd":
        start, end = _resolve_range(args)
        run_year_to_date(db_file, TaxAccountId(args.tax_account_id), start, end)
    elif args.command == "rules":
        run_rules(db_file, ExchangeId(args.exchange_id), args.sale_value)


if __name__ == "__main__":
    main()
