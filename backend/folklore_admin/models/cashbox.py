"""Cashbox models: Cashbox, CashMovement and CashboxClosure."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from folklore_admin.db.base import Base, TimestampMixin
from folklore_admin.models.validators import non_negative, one_of, positive


class Currency(str, Enum):
    CZK = "CZK"
    EUR = "EUR"


class CashMovementType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class CashCategory(str, Enum):
    FOOD = "FOOD"
    DRINKS = "DRINKS"
    TICKETS = "TICKETS"
    STAFF = "STAFF"
    SUPPLIES = "SUPPLIES"
    OTHER = "OTHER"


class CashPaymentMethod(str, Enum):
    CASH = "CASH"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    VOUCHER = "VOUCHER"


class Cashbox(Base, TimestampMixin):
    """Cash register opened for a day, a reservation or an event."""

    __tablename__ = "cashboxes"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), default=Currency.CZK.value, nullable=False)
    initial_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    current_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    event_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("events.id", ondelete="SET NULL"), nullable=True, index=True
    )
    opened_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    movements: Mapped[List["CashMovement"]] = relationship(
        back_populates="cashbox", cascade="all, delete-orphan", order_by="CashMovement.id"
    )
    closures: Mapped[List["CashboxClosure"]] = relationship(
        back_populates="cashbox", cascade="all, delete-orphan", order_by="CashboxClosure.id"
    )

    @validates("currency")
    def _validate_currency(self, key, value):
        return one_of(key, value, {c.value for c in Currency})

    @validates("initial_balance")
    def _validate_initial_balance(self, key, value):
        return non_negative(key, value)


class CashMovement(Base):
    """Cashbox ledger entry: money in or out."""

    __tablename__ = "cash_movements"

    id: Mapped[int] = mapped_column(primary_key=True)
    cashbox_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("cashboxes.id", ondelete="CASCADE"), nullable=True, index=True
    )
    movement_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(20), default=CashCategory.OTHER.value, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default=Currency.CZK.value, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    reference_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    event_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("events.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    entry_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    cashbox: Mapped[Optional["Cashbox"]] = relationship(back_populates="movements")

    @validates("movement_type")
    def _validate_movement_type(self, key, value):
        return one_of(key, value, {t.value for t in CashMovementType})

    @validates("category")
    def _validate_category(self, key, value):
        return one_of(key, value, {c.value for c in CashCategory})

    @validates("currency")
    def _validate_currency(self, key, value):
        return one_of(key, value, {c.value for c in Currency})

    @validates("payment_method")
    def _validate_payment_method(self, key, value):
        return one_of(key, value, {m.value for m in CashPaymentMethod})

    @validates("amount")
    def _validate_amount(self, key, value):
        return positive(key, value)

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.movement_type == CashMovementType.INCOME.value else -self.amount


class CashboxClosure(Base):
    """End-of-shift count of a cashbox."""

    __tablename__ = "cashbox_closures"

    id: Mapped[int] = mapped_column(primary_key=True)
    cashbox_id: Mapped[int] = mapped_column(
        ForeignKey("cashboxes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expected_cash: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    actual_cash: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    difference: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_income: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_expense: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net_result: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    closed_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    closed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    cashbox: Mapped["Cashbox"] = relationship(back_populates="closures")
