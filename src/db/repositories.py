from __future__ import annotations

import logging
from datetime import date
from typing import Collection

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db import models
from domain.base_types import (
    EntryId,
    ExchangeId,
    IdentifiedPropertyId,
    ImprovementId,
    ProfileId,
    TaxAccountId,
)
from domain.exchange import Exchange, ExchangeFinancials
from domain.identified_property import (
    IdentificationStatus,
    IdentificationType,
    IdentifiedProperty,
    PropertyImprovement,
    PropertyType,
)
from domain.ledger import EntryType, LedgerEntry, SettlementType
from domain.tax_account import TaxAccount, build_spousal_account_number

logger = logging.getLogger(__name__)


class AccountNumberConflictError(Exception):
    def __init__(self, *, account_number: str, attempts: int) -> None:
        self.account_number = account_number
        self.attempts = attempts
        super().__init__(f"Could not assign a unique account number after {attempts} attempts (last={account_number})")


class AccountingEntryRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_many(self, entries: list[LedgerEntry]) -> list[LedgerEntry]:
        orm_entries = [
            models.AccountingEntryOrm(
                date=entry.date,
                credit=entry.credit,
                debit=entry.debit,
                entry_type=entry.entry_type.value,
                from_exchange_id=entry.from_exchange_id,
                to_exchange_id=entry.to_exchange_id,
                description=entry.description,
                transaction_id=entry.transaction_id,
                task_id=entry.task_id,
                settlement_seller_id=entry.settlement_seller_id,
                settlement_buyer_id=entry.settlement_buyer_id,
                settlement_type=entry.settlement_type.value if entry.settlement_type else None,
            )
            for entry in entries
        ]
        self._session.add_all(orm_entries)
        self._session.commit()
        return [self._to_domain(orm_entry) for orm_entry in orm_entries]

    def list_for_exchange(self, exchange_id: ExchangeId) -> list[LedgerEntry]:
        """Entries touching the exchange on either side."""
        stmt = (
            select(models.AccountingEntryOrm)
            .where(
                or_(
                    models.AccountingEntryOrm.to_exchange_id == exchange_id,
                    models.AccountingEntryOrm.from_exchange_id == exchange_id,
                )
            )
            .order_by(models.AccountingEntryOrm.date.asc(), models.AccountingEntryOrm.id.asc())
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def list_for_exchanges(
        self,
        exchange_ids: Collection[ExchangeId],
        start_date: date,
        end_date: date,
    ) -> list[LedgerEntry]:
        """Entries touching any of the exchanges, dated within the inclusive range."""
        if not exchange_ids:
            return []
        ids = list(exchange_ids)
        stmt = (
            select(models.AccountingEntryOrm)
            .where(
                or_(
                    models.AccountingEntryOrm.to_exchange_id.in_(ids),
                    models.AccountingEntryOrm.from_exchange_id.in_(ids),
                ),
                models.AccountingEntryOrm.date >= start_date,
                models.AccountingEntryOrm.date <= end_date,
            )
            .order_by(models.AccountingEntryOrm.date.asc(), models.AccountingEntryOrm.id.asc())
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    @staticmethod
    def _to_domain(orm_entry: models.AccountingEntryOrm) -> LedgerEntry:
        return LedgerEntry(
            id=EntryId(orm_entry.id),
            date=orm_entry.date,
            credit=orm_entry.credit,
            debit=orm_entry.debit,
            entry_type=EntryType(orm_entry.entry_type),
            from_exchange_id=_exchange_id_or_none(orm_entry.from_exchange_id),
            to_exchange_id=_exchange_id_or_none(orm_entry.to_exchange_id),
            description=orm_entry.description,
            transaction_id=orm_entry.transaction_id,
            task_id=orm_entry.task_id,
            settlement_seller_id=orm_entry.settlement_seller_id,
            settlement_buyer_id=orm_entry.settlement_buyer_id,
            settlement_type=SettlementType(orm_entry.settlement_type) if orm_entry.settlement_type else None,
        )


class ExchangeRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, exchange_number: str, tax_account_id: TaxAccountId | None = None) -> Exchange:
        orm_exchange = models.ExchangeOrm(exchange_number=exchange_number, tax_account_id=tax_account_id)
        self._session.add(orm_exchange)
        self._session.commit()
        self._session.refresh(orm_exchange)
        return self._to_domain(orm_exchange)

    def get(self, exchange_id: ExchangeId) -> Exchange | None:
        orm_exchange = self._session.get(models.ExchangeOrm, exchange_id)
        if orm_exchange is None:
            return None
        return self._to_domain(orm_exchange)

    def list_for_tax_account(self, tax_account_id: TaxAccountId) -> list[Exchange]:
        stmt = (
            select(models.ExchangeOrm)
            .where(models.ExchangeOrm.tax_account_id == tax_account_id)
            .order_by(models.ExchangeOrm.id.asc())
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def get_financials(self, exchange_id: ExchangeId) -> ExchangeFinancials | None:
        """Last persisted financials, or None when never computed."""
        orm_exchange = self._session.get(models.ExchangeOrm, exchange_id)
        if orm_exchange is None or orm_exchange.total_sale_property_value is None:
            return None
        return ExchangeFinancials(
            total_sale_property_value=orm_exchange.total_sale_property_value,
            total_replacement_property=orm_exchange.total_replacement_property,
            value_remaining=orm_exchange.value_remaining,
        )

    def update_financials(self, exchange_id: ExchangeId, financials: ExchangeFinancials) -> bool:
        orm_exchange = self._session.get(models.ExchangeOrm, exchange_id)
        if orm_exchange is None:
            return False
        orm_exchange.total_sale_property_value = financials.total_sale_property_value
        orm_exchange.total_replacement_property = financials.total_replacement_property
        orm_exchange.value_remaining = financials.value_remaining
        self._session.commit()
        return True

    @staticmethod
    def _to_domain(orm_exchange: models.ExchangeOrm) -> Exchange:
        return Exchange(
            id=ExchangeId(orm_exchange.id),
            exchange_number=orm_exchange.exchange_number,
            tax_account_id=_tax_account_id_or_none(orm_exchange.tax_account_id),
        )


class IdentifiedPropertyRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, identified_property: IdentifiedProperty) -> IdentifiedProperty:
        orm_property = models.IdentifiedPropertyOrm(
            exchange_id=identified_property.exchange_id,
            identification_type=identified_property.identification_type.value,
            property_type=identified_property.property_type.value,
            description=identified_property.description,
            status=identified_property.status.value,
            value=identified_property.value,
            identification_date=identified_property.identification_date,
            is_parked=identified_property.is_parked,
        )
        orm_property.improvements = [
            models.PropertyImprovementOrm(description=improvement.description, value=improvement.value)
            for improvement in identified_property.improvements
        ]
        self._session.add(orm_property)
        self._session.commit()
        self._session.refresh(orm_property)
        return self._to_domain(orm_property)

    def list_for_exchange(self, exchange_id: ExchangeId) -> list[IdentifiedProperty]:
        """All identifications of the exchange, cancelled ones included."""
        stmt = (
            select(models.IdentifiedPropertyOrm)
            .where(models.IdentifiedPropertyOrm.exchange_id == exchange_id)
            .order_by(models.IdentifiedPropertyOrm.id.asc())
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    @staticmethod
    def _to_domain(orm_property: models.IdentifiedPropertyOrm) -> IdentifiedProperty:
        return IdentifiedProperty(
            id=IdentifiedPropertyId(orm_property.id),
            exchange_id=ExchangeId(orm_property.exchange_id),
            identification_type=IdentificationType(orm_property.identification_type),
            property_type=PropertyType(orm_property.property_type),
            description=orm_property.description,
            status=IdentificationStatus(orm_property.status),
            value=orm_property.value,
            identification_date=orm_property.identification_date,
            is_parked=orm_property.is_parked,
            improvements=[
                PropertyImprovement(
                    id=ImprovementId(improvement.id),
                    description=improvement.description,
                    value=improvement.value,
                )
                for improvement in orm_property.improvements
            ],
        )


class TaxAccountRepository:
    MAX_NUMBERING_ATTEMPTS = 5

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, tax_account_id: TaxAccountId) -> TaxAccount | None:
        orm_account = self._session.get(models.TaxAccountOrm, tax_account_id)
        if orm_account is None:
            return None
        return self._to_domain(orm_account)

    def create(self, name: str, *, primary_profile_id: ProfileId | None = None) -> TaxAccount:
        orm_account = models.TaxAccountOrm(name=name, primary_profile_id=primary_profile_id)
        self._session.add(orm_account)
        self._session.commit()
        self._session.refresh(orm_account)
        return self._to_domain(orm_account)

    def count_spousal(self) -> int:
        stmt = select(func.count()).select_from(models.TaxAccountOrm).where(models.TaxAccountOrm.is_spousal.is_(True))
        return self._session.scalar(stmt) or 0

    def create_spousal(
        self,
        *,
        name: str,
        primary_profile_id: ProfileId,
        spouse_profile_id: ProfileId,
        primary_last_name: str | None,
        spouse_last_name: str | None,
    ) -> TaxAccount:
        """Create a joint account and assign its number inside one transaction.

        The sequence is the spousal count read after inserting the new row, so
        the first joint account gets ``001``. A concurrent writer may take the
        same number first; the unique constraint on ``account_number`` then
        fails the flush or commit, the transaction is rolled back and the next
        sequence is tried: the recount, or one past the last tried number if
        the recount has not moved.
        """
        account_number = ""
        previous_sequence = 0
        for attempt in range(self.MAX_NUMBERING_ATTEMPTS):
            orm_account = models.TaxAccountOrm(
                name=name,
                is_spousal=True,
                primary_profile_id=primary_profile_id,
                spouse_profile_id=spouse_profile_id,
            )
            try:
                self._session.add(orm_account)
                self._session.flush()

                sequence = max(self.count_spousal(), previous_sequence + 1)
                previous_sequence = sequence
                account_number = build_spousal_account_number(primary_last_name, spouse_last_name, sequence)
                orm_account.account_number = account_number
                self._session.commit()
            except IntegrityError:
                self._session.rollback()
                logger.warning("Account number %s already taken (attempt %d), retrying", account_number, attempt + 1)
                continue

            self._session.refresh(orm_account)
            logger.info("Created spousal tax account %s with number %s", orm_account.id, account_number)
            return self._to_domain(orm_account)

        raise AccountNumberConflictError(account_number=account_number, attempts=self.MAX_NUMBERING_ATTEMPTS)

    @staticmethod
    def _to_domain(orm_account: models.TaxAccountOrm) -> TaxAccount:
        return TaxAccount(
            id=TaxAccountId(orm_account.id),
            name=orm_account.name,
            account_number=orm_account.account_number,
            is_spousal=orm_account.is_spousal,
            primary_profile_id=_profile_id_or_none(orm_account.primary_profile_id),
            spouse_profile_id=_profile_id_or_none(orm_account.spouse_profile_id),
        )


def _exchange_id_or_none(value: int | None) -> ExchangeId | None:
    return ExchangeId(value) if value is not None else None


def _profile_id_or_none(value: str | None) -> ProfileId | None:
    return ProfileId(value) if value is not None else None


def _tax_account_id_or_none(value: int | None) -> TaxAccountId | None:
    return TaxAccountId(value) if value is not None else None
