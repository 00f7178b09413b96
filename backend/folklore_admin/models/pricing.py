"""Per-person pricing and reservation calendar models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from folklore_admin.db.base import Base, TimestampMixin
from folklore_admin.models.validators import non_negative

DEFAULT_ADULT_PRICE = Decimal("1250.00")
DEFAULT_CHILD_PRICE = Decimal("800.00")
DEFAULT_INFANT_PRICE = Decimal("0.00")

RESERVATIONS_PROJECT = "reservations"


class DateRangeMixin:
    """A rule valid from ``date_from`` through ``date_to``.

    A missing ``date_to`` means the rule applies to ``date_from`` only.
    """

    date_from: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    date_to: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    def covers(self, day: date) -> bool:
        return self.date_from <= day <= (self.date_to or self.date_from)


class PricingDefault(Base, TimestampMixin):
    """Single-row table with the standard per-person prices."""

    __tablename__ = "pricing_defaults"

    id: Mapped[int] = mapped_column(primary_key=True)
    adult_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=DEFAULT_ADULT_PRICE, nullable=False)
    child_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=DEFAULT_CHILD_PRICE, nullable=False)
    infant_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=DEFAULT_INFANT_PRICE, nullable=False)

    @validates("adult_price", "child_price", "infant_price")
    def _validate_price(self, key, value):
        return non_negative(key, value)


class PricingDateOverride(Base, TimestampMixin):
    """Per-person prices for one specific date."""

    __tablename__ = "pricing_date_overrides"

    id: Mapped[int] = mapped_column(primary_key=True)
    override_date: Mapped[date] = mapped_column(Date, unique=True, index=True, nullable=False)
    adult_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    child_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    infant_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    @validates("adult_price", "child_price", "infant_price")
    def _validate_price(self, key, value):
        return non_negative(key, value)


class DisabledDate(Base, DateRangeMixin, TimestampMixin):
    """Closed days for a booking project."""

    __tablename__ = "disabled_dates"

    id: Mapped[int] = mapped_column(primary_key=True)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    project: Mapped[str] = mapped_column(
        String(50), default=RESERVATIONS_PROJECT, nullable=False, index=True
    )
