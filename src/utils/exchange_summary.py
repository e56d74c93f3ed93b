from __future__ import annotations

from datetime import date

from domain.exchange import ExchangeFinancials
from domain.exchange_rules import ExchangeRule, ExchangeRuleStatus
from domain.year_to_date import YearToDateMetrics

from .formatting import format_currency

RULE_LABELS = {
    ExchangeRule.NONE: "No properties identified",
    ExchangeRule.THREE_PROPERTY: "3-Property Rule",
    ExchangeRule.TWO_HUNDRED_PERCENT: "200% Rule",
    ExchangeRule.NINETY_FIVE_PERCENT: "95% Rule",
    ExchangeRule.COMPLIANT: "Compliant",
}


def _render_rows(title: str, rows: list[tuple[str, str]]) -> None:
    label_width = max(len(label) for label, _ in rows)
    value_width = max(len(value) for _, value in rows)
    lines = [title]
    for label, value in rows:
        lines.append(f"  {label:<{label_width}} {value:>{value_width}}")
    print("\n".join(lines))


def render_exchange_financials(exchange_id: int, financials: ExchangeFinancials) -> None:
    _render_rows(
        f"Exchange {exchange_id} financials:",
        [
            ("Total sale property value", format_currency(financials.total_sale_property_value)),
            ("Total replacement property", format_currency(financials.total_replacement_property)),
            ("Value remaining", format_currency(financials.value_remaining)),
        ],
    )


def render_year_to_date_metrics(tax_account_id: int, start: date, end: date, metrics: YearToDateMetrics) -> None:
    _render_rows(
        f"Tax account {tax_account_id} year to date ({start} → {end}):",
        [
            ("Total value of property sold", format_currency(metrics.total_value_property_sold)),
            ("Total amount received to QI", format_currency(metrics.total_amount_received_to_qi)),
            ("Exchangeable value acquired", format_currency(metrics.total_exchangeable_value_acquired)),
            ("Funds returned to exchanger", format_currency(metrics.funds_returned_to_exchanger)),
            ("Funds sent from exchange", format_currency(metrics.total_funds_sent_from_exchange)),
        ],
    )


def render_rule_status(exchange_id: int, status: ExchangeRuleStatus) -> None:
    _render_rows(
        f"Exchange {exchange_id} identification:",
        [
            ("Active rule", RULE_LABELS[status.active_rule]),
            ("Compliant", "yes" if status.is_compliant else "NO"),
            ("Identified properties", str(status.identified_count)),
            ("Total identified value", format_currency(status.total_identified_value)),
            ("Total sale value", format_currency(status.total_sale_value)),
        ],
    )
    for violation in status.violations:
        print(f"  ! {violation}")
    for warning in status.warnings:
        print(f"  * {warning}")
