from datetime import date
from decimal import Decimal

from domain.exchange import compute_exchange_financials
from domain.ledger import EntryType
from domain.year_to_date import YearToDateMetrics, compute_year_to_date_metrics, year_date_range
from tests.constants import DEC_31, JAN_15, JUN_30, OTHER_EXCHANGE, SALE_EXCHANGE, SECOND_EXCHANGE
from tests.helpers.ledger_factory import make_entry

YEAR_START, YEAR_END = year_date_range(2024)


def test_year_date_range_covers_whole_calendar_year() -> None:
    assert year_date_range(2024) == (date(2024, 1, 1), date(2024, 12, 31))


def test_metrics_across_exchanges_of_account() -> None:
    entries = [
        make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="400000", to_exchange=SALE_EXCHANGE, on=JAN_15),
        make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="100000", to_exchange=SECOND_EXCHANGE, on=JUN_30),
        make_entry(entry_type=EntryType.WIRE_IN, credit="5000", to_exchange=SECOND_EXCHANGE, on=JUN_30),
        make_entry(entry_type=EntryType.PURCHASE_FUNDS, debit="350000", from_exchange=SALE_EXCHANGE, on=JUN_30),
        make_entry(entry_type=EntryType.FEES, debit="2500", from_exchange=SALE_EXCHANGE, on=DEC_31),
        make_entry(entry_type=EntryType.WIRE_OUT, debit="40000", from_exchange=SECOND_EXCHANGE, on=DEC_31),
    ]

    metrics = compute_year_to_date_metrics(entries, [SALE_EXCHANGE, SECOND_EXCHANGE], YEAR_START, YEAR_END)

    assert metrics.total_value_property_sold == Decimal("500000")
    assert metrics.total_amount_received_to_qi == Decimal("505000")
    assert metrics.total_exchangeable_value_acquired == Decimal("350000")
    assert metrics.total_funds_sent_from_exchange == Decimal("392500")
    assert metrics.funds_returned_to_exchanger == Decimal("505000") - Decimal("350000") - Decimal("2500")


def test_funds_returned_is_clamped_at_zero() -> None:
    entries = [
        make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="100000", to_exchange=SALE_EXCHANGE),
        make_entry(entry_type=EntryType.PURCHASE_FUNDS, debit="99000", from_exchange=SALE_EXCHANGE),
        make_entry(entry_type=EntryType.FEES, debit="3000", from_exchange=SALE_EXCHANGE),
    ]

    metrics = compute_year_to_date_metrics(entries, [SALE_EXCHANGE], YEAR_START, YEAR_END)

    assert metrics.total_exchangeable_value_acquired + Decimal("3000") > metrics.total_amount_received_to_qi
    assert metrics.funds_returned_to_exchanger == Decimal("0")


def test_date_range_is_inclusive_on_both_ends() -> None:
    entries = [
        make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="1", to_exchange=SALE_EXCHANGE, on=date(2023, 12, 31)),
        make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="10", to_exchange=SALE_EXCHANGE, on=date(2024, 1, 1)),
        make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="100", to_exchange=SALE_EXCHANGE, on=date(2024, 12, 31)),
        make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="1000", to_exchange=SALE_EXCHANGE, on=date(2025, 1, 1)),
    ]

    metrics = compute_year_to_date_metrics(entries, [SALE_EXCHANGE], YEAR_START, YEAR_END)

    assert metrics.total_value_property_sold == Decimal("110")


def test_entries_of_foreign_exchanges_are_excluded() -> None:
    entries = [
        make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="777", to_exchange=OTHER_EXCHANGE),
        make_entry(entry_type=EntryType.PURCHASE_FUNDS, debit="555", from_exchange=OTHER_EXCHANGE),
    ]

    metrics = compute_year_to_date_metrics(entries, [SALE_EXCHANGE], YEAR_START, YEAR_END)

    assert metrics == YearToDateMetrics.empty()


def test_empty_exchange_set_returns_zero_metrics() -> None:
    entries = [make_entry(entry_type=EntryType.SALE_PROCEEDS, credit="500", to_exchange=SALE_EXCHANGE)]

    metrics = compute_year_to_date_metrics(entries, [], YEAR_START, YEAR_END)

    assert metrics == YearToDateMetrics.empty()
    assert metrics.funds_returned_to_exchanger == Decimal("0")


def test_strict_type_filters_differ_from_single_exchange_financials() -> None:
    # An untagged credit counts as sale value for the single exchange view but
    # not as property sold in the account-level totals.
    entries = [
        make_entry(entry_type=EntryType.MANUAL, credit="1000", to_exchange=SALE_EXCHANGE),
        make_entry(entry_type=EntryType.MANUAL, debit="600", from_exchange=SALE_EXCHANGE),
    ]

    financials = compute_exchange_financials(entries, SALE_EXCHANGE)
    metrics = compute_year_to_date_metrics(entries, [SALE_EXCHANGE], YEAR_START, YEAR_END)

    assert financials.total_sale_property_value == Decimal("1000")
    assert financials.total_replacement_property == Decimal("600")
    assert metrics.total_value_property_sold == Decimal("0")
    assert metrics.total_exchangeable_value_acquired == Decimal("0")
    assert metrics.total_amount_received_to_qi == Decimal("1000")
    assert metrics.total_funds_sent_from_exchange == Decimal("600")
    # Untagged outflows are not deducted from boot.
    assert metrics.funds_returned_to_exchanger == Decimal("1000")


def test_transfer_between_own_exchanges_counts_both_directions() -> None:
    transfer = make_entry(
        entry_type=EntryType.MANUAL,
        credit="5000",
        debit="5000",
        from_exchange=SALE_EXCHANGE,
        to_exchange=SECOND_EXCHANGE,
    )

    metrics = compute_year_to_date_metrics([transfer], [SALE_EXCHANGE, SECOND_EXCHANGE], YEAR_START, YEAR_END)

    assert metrics.total_amount_received_to_qi == Decimal("5000")
    assert metrics.total_funds_sent_from_exchange == Decimal("5000")
