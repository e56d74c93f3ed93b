from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from db.repositories import AccountingEntryRepository, ExchangeRepository, IdentifiedPropertyRepository
from domain.base_types import ExchangeId, TaxAccountId
from domain.exchange import ExchangeFinancials, compute_exchange_balance, compute_exchange_financials
from domain.exchange_rules import AddPropertyCheck, ExchangeRuleStatus, can_add_property, evaluate_exchange_rule
from domain.year_to_date import YearToDateMetrics, compute_year_to_date_metrics, year_date_range

logger = logging.getLogger(__name__)


class ExchangeNotFoundError(Exception):
    def __init__(self, exchange_id: ExchangeId) -> None:
        self.exchange_id = exchange_id
        super().__init__(f"Exchange {exchange_id} not found")


class ExchangeService:
    """Fetch exchange records from storage and run the pure calculations on them."""

    def __init__(self, session: Session) -> None:
        self._entries = AccountingEntryRepository(session)
        self._exchanges = ExchangeRepository(session)
        self._properties = IdentifiedPropertyRepository(session)

    def financials(self, exchange_id: ExchangeId) -> ExchangeFinancials:
        entries = self._entries.list_for_exchange(exchange_id)
        return compute_exchange_financials(entries, exchange_id)

    def refresh_financials(self, exchange_id: ExchangeId) -> ExchangeFinancials:
        """Recompute the financials and store them on the exchange row."""
        financials = self.financials(exchange_id)
        if not self._exchanges.update_financials(exchange_id, financials):
            raise ExchangeNotFoundError(exchange_id)
        logger.info(
            "Exchange %s financials refreshed: sale=%s replacement=%s remaining=%s",
            exchange_id,
            financials.total_sale_property_value,
            financials.total_replacement_property,
            financials.value_remaining,
        )
        return financials

    def balance(self, exchange_id: ExchangeId) -> Decimal:
        return compute_exchange_balance(self._entries.list_for_exchange(exchange_id), exchange_id)

    def identification_status(
        self,
        exchange_id: ExchangeId,
        total_sale_value: Decimal | None = None,
    ) -> ExchangeRuleStatus:
        if total_sale_value is None:
            total_sale_value = self.financials(exchange_id).total_sale_property_value
        properties = self._properties.list_for_exchange(exchange_id)
        status = evaluate_exchange_rule(properties, total_sale_value)
        if not status.is_compliant:
            logger.warning("Exchange %s identification is non-compliant under %s", exchange_id, status.active_rule)
        return status

    def check_new_identification(
        self,
        exchange_id: ExchangeId,
        value: Decimal,
        total_sale_value: Decimal | None = None,
    ) -> AddPropertyCheck:
        if total_sale_value is None:
            total_sale_value = self.financials(exchange_id).total_sale_property_value
        properties = self._properties.list_for_exchange(exchange_id)
        return can_add_property(properties, value, total_sale_value)

    def year_to_date(self, tax_account_id: TaxAccountId, start_date: date, end_date: date) -> YearToDateMetrics:
        exchange_ids = [exchange.id for exchange in self._exchanges.list_for_tax_account(tax_account_id)]
        if not exchange_ids:
            logger.info("Tax account %s has no exchanges, returning empty metrics", tax_account_id)
            return YearToDateMetrics.empty()

        entries = self._entries.list_for_exchanges(exchange_ids, start_date, end_date)
        logger.debug(
            "Aggregating %d entries over %d exchanges for tax account %s (%s..%s)",
            len(entries),
            len(exchange_ids),
            tax_account_id,
            start_date,
            end_date,
        )
        return compute_year_to_date_metrics(entries, exchange_ids, start_date, end_date)

    def year_metrics(self, tax_account_id: TaxAccountId, year: int) -> YearToDateMetrics:
        start_date, end_date = year_date_range(year)
        return self.year_to_date(tax_account_id, start_date, end_date)

    def current_year_metrics(self, tax_account_id: TaxAccountId, today: date | None = None) -> YearToDateMetrics:
        return self.year_metrics(tax_account_id, (today or date.today()).year)
