from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Sequence

from pydantic import BaseModel, Field

from utils.formatting import format_currency, format_percent

from .identified_property import IdentifiedProperty, total_identified_value

MAX_PROPERTIES_UNDER_THREE_PROPERTY_RULE = 3
TWO_HUNDRED_PERCENT_MULTIPLIER = Decimal("2")
NINETY_FIVE_PERCENT = Decimal("0.95")
LIMIT_WARNING_RATIO = Decimal("0.90")


class ExchangeRule(StrEnum):
    NONE = "none"
    THREE_PROPERTY = "3_property"
    TWO_HUNDRED_PERCENT = "200_percent"
    NINETY_FIVE_PERCENT = "95_percent"
    # Reserved by the stored schema; never produced by evaluation.
    COMPLIANT = "compliant"


class ExchangeRuleStatus(BaseModel):
    active_rule: ExchangeRule
    is_compliant: bool
    total_identified_value: Decimal
    total_sale_value: Decimal
    identified_count: int
    violations: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class AddPropertyCheck(BaseModel):
    can_add: bool
    reason: str | None = None


def _to_amount(value: Decimal | float | int | None) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def evaluate_exchange_rule(
    properties: Sequence[IdentifiedProperty],
    total_sale_value: Decimal | float | None,
) -> ExchangeRuleStatus:
    """Classify identified replacement properties against the IRS identification rules.

    Exactly one rule is active per evaluation:
    - up to three properties fall under the 3-property rule regardless of value;
    - four or more properties fall under the 200% rule while their combined
      value stays within twice the sale value (inclusive);
    - otherwise the 95% rule applies and the identification is non-compliant.
    """
    total_sale_value = _to_amount(total_sale_value)
    identified_count = len(properties)
    identified_value = total_identified_value(properties)

    if identified_count == 0:
        return ExchangeRuleStatus(
            active_rule=ExchangeRule.NONE,
            is_compliant=True,
            total_identified_value=Decimal("0"),
            total_sale_value=total_sale_value,
            identified_count=0,
        )

    if identified_count <= MAX_PROPERTIES_UNDER_THREE_PROPERTY_RULE:
        warnings: list[str] = []
        if identified_count == MAX_PROPERTIES_UNDER_THREE_PROPERTY_RULE:
            warnings.append("You have reached the maximum of 3 properties. Adding more will require the 200% rule.")
        return ExchangeRuleStatus(
            active_rule=ExchangeRule.THREE_PROPERTY,
            is_compliant=True,
            total_identified_value=identified_value,
            total_sale_value=total_sale_value,
            identified_count=identified_count,
            warnings=warnings,
        )

    max_allowed = total_sale_value * TWO_HUNDRED_PERCENT_MULTIPLIER
    if identified_value <= max_allowed:
        warnings = []
        # A zero limit has no meaningful usage ratio.
        if max_allowed != 0:
            usage = identified_value / max_allowed
            if usage >= LIMIT_WARNING_RATIO:
                remaining = max_allowed - identified_value
                warnings.append(
                    f"You have used {format_percent(usage)} of your 200% limit. "
                    f"Only {format_currency(remaining)} remaining."
                )
        return ExchangeRuleStatus(
            active_rule=ExchangeRule.TWO_HUNDRED_PERCENT,
            is_compliant=True,
            total_identified_value=identified_value,
            total_sale_value=total_sale_value,
            identified_count=identified_count,
            warnings=warnings,
        )

    required_acquisition = identified_value * NINETY_FIVE_PERCENT
    return ExchangeRuleStatus(
        active_rule=ExchangeRule.NINETY_FIVE_PERCENT,
        is_compliant=False,
        total_identified_value=identified_value,
        total_sale_value=total_sale_value,
        identified_count=identified_count,
        violations=[
            f"Total identified value ({format_currency(identified_value)}) exceeds 200% of sale value "
            f"({format_currency(max_allowed)})",
            f"You must acquire at least 95% ({format_currency(required_acquisition)}) of all identified properties",
        ],
        warnings=[
            "The 95% rule is very restrictive. "
            "Consider reducing identified properties to comply with the 200% rule."
        ],
    )


def can_add_property(
    current_properties: Sequence[IdentifiedProperty],
    new_property_value: Decimal | float | None,
    total_sale_value: Decimal | float | None,
) -> AddPropertyCheck:
    """Look ahead before identifying another property.

    Below three properties anything may be added. At exactly three the new
    property moves the exchange to the 200% rule, so it is refused only when
    that would already breach the limit. Past three, the same limit guards
    against falling into the 95% rule.
    """
    new_property_value = _to_amount(new_property_value)
    total_sale_value = _to_amount(total_sale_value)
    current_count = len(current_properties)
    if current_count < MAX_PROPERTIES_UNDER_THREE_PROPERTY_RULE:
        return AddPropertyCheck(can_add=True)

    new_total = total_identified_value(current_properties) + new_property_value
    max_allowed = total_sale_value * TWO_HUNDRED_PERCENT_MULTIPLIER

    if current_count == MAX_PROPERTIES_UNDER_THREE_PROPERTY_RULE:
        if new_total > max_allowed:
            return AddPropertyCheck(
                can_add=False,
                reason=f"Adding this property would exceed the 200% rule limit of {format_currency(max_allowed)}",
            )
        return AddPropertyCheck(can_add=True, reason="Adding 4th property will activate the 200% rule")

    if new_total > max_allowed:
        return AddPropertyCheck(
            can_add=False,
            reason=(
                "Adding this property would exceed the 200% rule limit. "
                "This would trigger the restrictive 95% rule."
            ),
        )
    return AddPropertyCheck(can_add=True)

