from __future__ import annotations

import csv
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from domain.base_types import ExchangeId
from domain.ledger import EntryType, LedgerEntry

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"date", "credit", "debit", "entry_type"}


def load_ledger_entries(csv_path: Path) -> list[LedgerEntry]:
    """Load accounting entries exported from the bookkeeping table.

    Each row should contain: date,credit,debit,entry_type[,from_exchange_id,to_exchange_id,description]
    Empty amounts are read as zero and empty exchange ids as no exchange.
    """

    if not csv_path.exists():
        return []

    with csv_path.open() as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"Ledger CSV {csv_path} is empty or missing headers")

        missing = REQUIRED_COLUMNS - set(reader.fieldnames)
        if missing:
            raise ValueError(f"Ledger CSV {csv_path} missing required columns: {', '.join(sorted(missing))}")

        entries: list[LedgerEntry] = []
        for line_number, row in enumerate(reader, start=2):
            try:
                entries.append(
                    LedgerEntry(
                        date=date.fromisoformat((row.get("date") or "").strip()),
                        credit=_parse_amount(row.get("credit")),
                        debit=_parse_amount(row.get("debit")),
                        entry_type=EntryType((row.get("entry_type") or "").strip() or EntryType.MANUAL),
                        from_exchange_id=_parse_exchange_id(row.get("from_exchange_id")),
                        to_exchange_id=_parse_exchange_id(row.get("to_exchange_id")),
                        description=(row.get("description") or "").strip() or None,
                    )
                )
            except (ValueError, InvalidOperation) as err:
                raise ValueError(f"Ledger CSV {csv_path} line {line_number}: {err}") from err

    logger.info("Loaded %d ledger entries from %s", len(entries), csv_path)
    return entries


def _parse_amount(raw: str | None) -> Decimal:
    if raw is None:
        return Decimal("0")
    normalized = raw.strip().replace(",", "")
    if not normalized:
        return Decimal("0")
    return Decimal(normalized)


def _parse_exchange_id(raw: str | None) -> ExchangeId | None:
    if raw is None:
        return None
    normalized = raw.strip()
    if not normalized:
        return None
    return ExchangeId(int(normalized))
