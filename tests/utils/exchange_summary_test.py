from decimal import Decimal

import pytest

from domain.exchange_rules import evaluate_exchange_rule
from domain.year_to_date import YearToDateMetrics
from tests.constants import DEC_31, JAN_15
from tests.helpers.ledger_factory import make_properties
from utils.exchange_summary import render_rule_status, render_year_to_date_metrics
from utils.formatting import format_currency, format_percent


def test_format_currency_groups_thousands_and_rounds_half_up() -> None:
    assert format_currency(Decimal("997500")) == "$997,500.00"
    assert format_currency(Decimal("0.005")) == "$0.01"
    assert format_currency(Decimal("-25000.5")) == "-$25,000.50"


def test_format_percent_uses_one_decimal() -> None:
    assert format_percent(Decimal("0.95")) == "95.0%"
    assert format_percent(Decimal("0.89999")) == "90.0%"


def test_render_rule_status_lists_violations_and_warnings(capsys: pytest.CaptureFixture[str]) -> None:
    status = evaluate_exchange_rule(make_properties("300000", "250000", "250000", "250000"), Decimal("500000"))

    render_rule_status(1, status)

    out = capsys.readouterr().out
    assert "95% Rule" in out
    assert "NO" in out
    assert "! You must acquire at least 95% ($997,500.00) of all identified properties" in out
    assert "* The 95% rule is very restrictive." in out


def test_render_year_to_date_metrics(capsys: pytest.CaptureFixture[str]) -> None:
    render_year_to_date_metrics(7, JAN_15, DEC_31, YearToDateMetrics.empty())

    out = capsys.readouterr().out
    assert out.startswith("Tax account 7 year to date (2024-01-15 → 2024-12-31):")
    assert "Funds returned to exchanger" in out
    assert "$0.00" in out
