from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from pydantic import BaseModel

from .base_types import ExchangeId, TaxAccountId
from .ledger import EntryType, LedgerEntry


class Exchange(BaseModel):
    id: ExchangeId
    exchange_number: str
    tax_account_id: TaxAccountId | None = None


class ExchangeFinancials(BaseModel):
    total_sale_property_value: Decimal
    total_replacement_property: Decimal
    value_remaining: Decimal


def compute_exchange_financials(entries: Iterable[LedgerEntry], exchange_id: ExchangeId) -> ExchangeFinancials:
    """Derive sale proceeds, replacement spend and remaining value for one exchange.

    Any positive credit into the exchange counts as sale proceeds and any
    positive debit out of it counts as replacement spend, even when the entry
    is not tagged with the matching type. Unclassified manual entries rely on
    this fallback.
    """
    total_sale = Decimal("0")
    total_replacement = Decimal("0")
    for entry in entries:
        if entry.is_received_by(exchange_id) and (entry.entry_type == EntryType.SALE_PROCEEDS or entry.credit > 0):
            total_sale += entry.credit
        if entry.is_sent_from(exchange_id) and (entry.entry_type == EntryType.PURCHASE_FUNDS or entry.debit > 0):
            total_replacement += entry.debit

    # Negative remaining value means replacement spend exceeded proceeds.
    return ExchangeFinancials(
        total_sale_property_value=total_sale,
        total_replacement_property=total_replacement,
        value_remaining=total_sale - total_replacement,
    )


def compute_exchange_balance(entries: Iterable[LedgerEntry], exchange_id: ExchangeId) -> Decimal:
    """Cash currently held for the exchange: all credits in minus all debits out."""
    total_credit = Decimal("0")
    total_debit = Decimal("0")
    for entry in entries:
        if entry.is_received_by(exchange_id):
            total_credit += entry.credit
        if entry.is_sent_from(exchange_id):
            total_debit += entry.debit
    return total_credit - total_debit
