from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, field_validator

from .base_types import EntryId, ExchangeId


class EntryType(StrEnum):
    SALE_PROCEEDS = "sale_proceeds"
    PURCHASE_FUNDS = "purchase_funds"
    FEES = "fees"
    EARNEST_MONEY = "earnest_money"
    WIRE_IN = "wire_in"
    WIRE_OUT = "wire_out"
    MANUAL = "manual"


class SettlementType(StrEnum):
    SELLER = "seller"
    BUYER = "buyer"


class LedgerEntry(BaseModel):
    """A single monetary movement between exchanges or to/from the outside world.

    Direction convention:
    - ``to_exchange_id`` receives the ``credit`` amount.
    - ``from_exchange_id`` sends the ``debit`` amount.

    Either side may be empty (external wire). Amounts are not required to be
    non-negative; malformed upstream values flow through arithmetic unchanged.
    """

    id: EntryId | None = None
    date: dt.date
    credit: Decimal = Decimal("0")
    debit: Decimal = Decimal("0")
    entry_type: EntryType = EntryType.MANUAL
    from_exchange_id: ExchangeId | None = None
    to_exchange_id: ExchangeId | None = None

    description: str | None = None
    transaction_id: int | None = None
    task_id: int | None = None
    settlement_seller_id: str | None = None
    settlement_buyer_id: str | None = None
    settlement_type: SettlementType | None = None

    @field_validator("credit", "debit", mode="before")
    @classmethod
    def _coerce_missing_amount(cls, value: Any) -> Any:
        if value is None:
            return Decimal("0")
        return value

    @field_validator("entry_type", mode="before")
    @classmethod
    def _coerce_missing_entry_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return EntryType.MANUAL
        return value

    def is_received_by(self, exchange_id: ExchangeId) -> bool:
        return self.to_exchange_id is not None and self.to_exchange_id == exchange_id

    def is_sent_from(self, exchange_id: ExchangeId) -> bool:
        return self.from_exchange_id is not None and self.from_exchange_id == exchange_id
