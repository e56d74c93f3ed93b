from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Collection, Iterable

from pydantic import BaseModel

from .base_types import ExchangeId
from .ledger import EntryType, LedgerEntry


class YearToDateMetrics(BaseModel):
    total_value_property_sold: Decimal
    total_amount_received_to_qi: Decimal
    total_exchangeable_value_acquired: Decimal
    # Taxable boot.
    funds_returned_to_exchanger: Decimal
    total_funds_sent_from_exchange: Decimal

    @classmethod
    def empty(cls) -> YearToDateMetrics:
        zero = Decimal("0")
        return cls(
            total_value_property_sold=zero,
            total_amount_received_to_qi=zero,
            total_exchangeable_value_acquired=zero,
            funds_returned_to_exchanger=zero,
            total_funds_sent_from_exchange=zero,
        )


def year_date_range(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def compute_year_to_date_metrics(
    entries: Iterable[LedgerEntry],
    exchange_ids: Collection[ExchangeId],
    start_date: date,
    end_date: date,
) -> YearToDateMetrics:
    """Aggregate account-level totals over all exchanges of a tax account.

    Both date bounds are inclusive. Unlike ``compute_exchange_financials``,
    sale and purchase totals only count entries explicitly tagged as
    ``sale_proceeds``/``purchase_funds``; the raw-amount fallback is not applied.
    """
    if not exchange_ids:
        return YearToDateMetrics.empty()

    ids = set(exchange_ids)
    property_sold = Decimal("0")
    received_to_qi = Decimal("0")
    value_acquired = Decimal("0")
    funds_sent = Decimal("0")
    fees = Decimal("0")

    for entry in entries:
        if not start_date <= entry.date <= end_date:
            continue

        if entry.to_exchange_id in ids:
            received_to_qi += entry.credit
            if entry.entry_type == EntryType.SALE_PROCEEDS:
                property_sold += entry.credit

        if entry.from_exchange_id in ids:
            funds_sent += entry.debit
            if entry.entry_type == EntryType.PURCHASE_FUNDS:
                value_acquired += entry.debit
            elif entry.entry_type == EntryType.FEES:
                fees += entry.debit

    # Fees are not boot; anything spent beyond receipts is reported as zero boot.
    boot = max(Decimal("0"), received_to_qi - value_acquired - fees)

    return YearToDateMetrics(
        total_value_property_sold=property_sold,
        total_amount_received_to_qi=received_to_qi,
        total_exchangeable_value_acquired=value_acquired,
        funds_returned_to_exchanger=boot,
        total_funds_sent_from_exchange=funds_sent,
    )
