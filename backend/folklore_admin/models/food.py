"""Menu (reservation food) models with per-date price and availability rules."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from folklore_admin.db.base import Base, TimestampMixin
from folklore_admin.models.pricing import DateRangeMixin
from folklore_admin.models.validators import non_negative


class ReservationFood(Base, TimestampMixin):
    """A menu guests choose when booking."""

    __tablename__ = "reservation_foods"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    is_children_menu: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    price_overrides: Mapped[List["FoodItemPriceOverride"]] = relationship(
        back_populates="food", cascade="all, delete-orphan"
    )
    availability_rules: Mapped[List["FoodItemAvailability"]] = relationship(
        back_populates="food", cascade="all, delete-orphan"
    )

    @validates("price")
    def _validate_price(self, key, value):
        return non_negative(key, value)


class FoodItemPriceOverride(Base, DateRangeMixin, TimestampMixin):
    """Menu price for a date range."""

    __tablename__ = "food_item_price_overrides"

    id: Mapped[int] = mapped_column(primary_key=True)
    reservation_food_id: Mapped[int] = mapped_column(
        ForeignKey("reservation_foods.id", ondelete="CASCADE"), nullable=False, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    food: Mapped["ReservationFood"] = relationship(back_populates="price_overrides")

    @validates("price")
    def _validate_price(self, key, value):
        return non_negative(key, value)


class FoodItemAvailability(Base, DateRangeMixin, TimestampMixin):
    """Whether a menu can be ordered in a date range."""

    __tablename__ = "food_item_availability"

    id: Mapped[int] = mapped_column(primary_key=True)
    reservation_food_id: Mapped[int] = mapped_column(
        ForeignKey("reservation_foods.id", ondelete="CASCADE"), nullable=False, index=True
    )
    available: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    food: Mapped["ReservationFood"] = relationship(back_populates="availability_rules")
