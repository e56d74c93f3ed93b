from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Any, Iterable

from pydantic import BaseModel, Field, field_validator

from .base_types import ExchangeId, IdentifiedPropertyId, ImprovementId


class IdentificationType(StrEnum):
    WRITTEN_FORM = "written_form"
    BY_CONTRACT = "by_contract"


class PropertyType(StrEnum):
    STANDARD_ADDRESS = "standard_address"
    DST = "dst"
    MEMBERSHIP_INTEREST = "membership_interest"


class IdentificationStatus(StrEnum):
    IDENTIFIED = "identified"
    UNDER_CONTRACT = "under_contract"
    ACQUIRED = "acquired"
    CANCELLED = "cancelled"


class PropertyImprovement(BaseModel):
    id: ImprovementId | None = None
    description: str = ""
    value: Decimal = Decimal("0")

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_missing_value(cls, value: Any) -> Any:
        return Decimal("0") if value is None else value


class IdentifiedProperty(BaseModel):
    """A candidate replacement property identified for one exchange.

    Cancellation is a status, the record itself is kept for audit.
    """

    id: IdentifiedPropertyId | None = None
    exchange_id: ExchangeId
    identification_type: IdentificationType = IdentificationType.WRITTEN_FORM
    property_type: PropertyType = PropertyType.STANDARD_ADDRESS
    description: str | None = None
    status: IdentificationStatus = IdentificationStatus.IDENTIFIED
    value: Decimal | None = None
    identification_date: date | None = None
    is_parked: bool = False
    improvements: list[PropertyImprovement] = Field(default_factory=list)

    @field_validator("improvements", mode="before")
    @classmethod
    def _coerce_missing_improvements(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def effective_value(self) -> Decimal:
        base = self.value if self.value is not None else Decimal("0")
        return base + sum((improvement.value for improvement in self.improvements), start=Decimal("0"))


def total_identified_value(properties: Iterable[IdentifiedProperty]) -> Decimal:
    return sum((prop.effective_value for prop in properties), start=Decimal("0"))
