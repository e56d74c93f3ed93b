from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator


class DecimalAsString(TypeDecorator):
    impl = String
    cache_ok = True

    def process_bind_param(self, value: Decimal | None, dialect: object) -> str | None:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: str | None, dialect: object) -> Decimal | None:
        if value is None:
            return None
        return Decimal(value)


class Base(DeclarativeBase):
    pass


class TaxAccountOrm(Base):
    __tablename__ = "tax_accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    account_number: Mapped[str | None] = mapped_column(String, unique=True, nullable=True)
    is_spousal: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    primary_profile_id: Mapped[str | None] = mapped_column(String, nullable=True)
    spouse_profile_id: Mapped[str | None] = mapped_column(String, nullable=True)

    exchanges: Mapped[list["ExchangeOrm"]] = relationship(back_populates="tax_account")


class ExchangeOrm(Base):
    __tablename__ = "exchanges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exchange_number: Mapped[str] = mapped_column(String, nullable=False)
    tax_account_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("tax_accounts.id"), nullable=True)
    total_sale_property_value: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    total_replacement_property: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    value_remaining: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)

    tax_account: Mapped[TaxAccountOrm | None] = relationship(back_populates="exchanges")
    identified_properties: Mapped[list["IdentifiedPropertyOrm"]] = relationship(
        back_populates="exchange", cascade="all, delete-orphan"
    )


class AccountingEntryOrm(Base):
    __tablename__ = "accounting_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    credit: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)
    debit: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)
    entry_type: Mapped[str] = mapped_column(String, nullable=False)
    from_exchange_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("exchanges.id"), nullable=True)
    to_exchange_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("exchanges.id"), nullable=True)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    transaction_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    task_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    settlement_seller_id: Mapped[str | None] = mapped_column(String, nullable=True)
    settlement_buyer_id: Mapped[str | None] = mapped_column(String, nullable=True)
    settlement_type: Mapped[str | None] = mapped_column(String, nullable=True)


class IdentifiedPropertyOrm(Base):
    __tablename__ = "identified_properties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exchange_id: Mapped[int] = mapped_column(Integer, ForeignKey("exchanges.id"), nullable=False)
    identification_type: Mapped[str] = mapped_column(String, nullable=False)
    property_type: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False)
    value: Mapped[Decimal | None] = mapped_column(DecimalAsString, nullable=True)
    identification_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    is_parked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    exchange: Mapped[ExchangeOrm] = relationship(back_populates="identified_properties")
    improvements: Mapped[list["PropertyImprovementOrm"]] = relationship(
        back_populates="identified_property",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImprovementOrm.id",
    )


class PropertyImprovementOrm(Base):
    __tablename__ = "property_improvements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    identified_property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("identified_properties.id"), nullable=False
    )
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    value: Mapped[Decimal] = mapped_column(DecimalAsString, nullable=False)

    identified_property: Mapped[IdentifiedPropertyOrm] = relationship(back_populates="improvements")
