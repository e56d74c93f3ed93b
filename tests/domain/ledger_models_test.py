from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from domain.identified_property import IdentifiedProperty, PropertyImprovement, total_identified_value
from domain.ledger import EntryType, LedgerEntry
from tests.constants import SALE_EXCHANGE, SECOND_EXCHANGE


def test_missing_amounts_and_type_are_coerced() -> None:
    entry = LedgerEntry.model_validate(
        {"date": "2024-03-01", "credit": None, "debit": None, "entry_type": None, "to_exchange_id": 1}
    )

    assert entry.date == date(2024, 3, 1)
    assert entry.credit == Decimal("0")
    assert entry.debit == Decimal("0")
    assert entry.entry_type == EntryType.MANUAL
    assert entry.from_exchange_id is None


def test_unknown_entry_type_is_rejected() -> None:
    with pytest.raises(ValidationError):
        LedgerEntry(date=date(2024, 3, 1), entry_type="refund")  # type: ignore[arg-type]


def test_entry_direction_helpers() -> None:
    entry = LedgerEntry(date=date(2024, 3, 1), from_exchange_id=SALE_EXCHANGE, to_exchange_id=SECOND_EXCHANGE)

    assert entry.is_sent_from(SALE_EXCHANGE)
    assert not entry.is_received_by(SALE_EXCHANGE)
    assert entry.is_received_by(SECOND_EXCHANGE)
    assert not entry.is_sent_from(SECOND_EXCHANGE)


def test_effective_value_includes_improvements() -> None:
    prop = IdentifiedProperty(
        exchange_id=SALE_EXCHANGE,
        value=Decimal("300000"),
        improvements=[
            PropertyImprovement(description="roof", value=Decimal("15000")),
            PropertyImprovement.model_validate({"description": "unknown", "value": None}),
        ],
    )

    assert prop.effective_value == Decimal("315000")


def test_missing_value_and_improvements_count_as_zero() -> None:
    prop = IdentifiedProperty.model_validate({"exchange_id": SALE_EXCHANGE, "value": None, "improvements": None})

    assert prop.effective_value == Decimal("0")
    assert total_identified_value([prop, prop]) == Decimal("0")
