from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def format_currency(value: Decimal) -> str:
    cents = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if cents < 0:
        return f"-${-cents:,.2f}"
    return f"${cents:,.2f}"


def format_percent(ratio: Decimal) -> str:
    percent = (ratio * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{percent:.1f}%"
