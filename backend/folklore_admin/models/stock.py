"""Stock models: StockItem, StockMovement, Recipe and RecipeIngredient."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from folklore_admin.db.base import Base, TimestampMixin
from folklore_admin.models.validators import non_negative, one_of, positive


class StockUnit(str, Enum):
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    PCS = "ks"


class MovementType(str, Enum):
    """How a movement changes the quantity on hand."""

    IN = "IN"  # adds quantity
    OUT = "OUT"  # subtracts quantity
    ADJUSTMENT = "ADJUSTMENT"  # sets the absolute quantity


class StockItem(Base, TimestampMixin):
    """Ingredient or supply kept in the warehouse."""

    __tablename__ = "stock_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    unit: Mapped[str] = mapped_column(String(10), nullable=False)
    quantity_available: Mapped[Decimal] = mapped_column(Numeric(12, 3), default=Decimal("0"), nullable=False)
    min_quantity: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 3), nullable=True)
    price_per_unit: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    supplier: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    movements: Mapped[List["StockMovement"]] = relationship(
        back_populates="stock_item", cascade="all, delete-orphan"
    )
    recipe_ingredients: Mapped[List["RecipeIngredient"]] = relationship(
        back_populates="stock_item", cascade="all, delete-orphan"
    )

    @validates("unit")
    def _validate_unit(self, key, value):
        return one_of(key, value, {u.value for u in StockUnit})

    @validates("min_quantity", "price_per_unit")
    def _validate_non_negative(self, key, value):
        return non_negative(key, value)

    @property
    def is_low_stock(self) -> bool:
        return self.min_quantity is not None and self.quantity_available <= self.min_quantity


class StockMovement(Base):
    """Append-only ledger of stock changes."""

    __tablename__ = "stock_movements"

    id: Mapped[int] = mapped_column(primary_key=True)
    stock_item_id: Mapped[int] = mapped_column(
        ForeignKey("stock_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    movement_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    # quantity on hand after the movement was applied
    balance_after: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    event_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("events.id", ondelete="SET NULL"), nullable=True, index=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    stock_item: Mapped["StockItem"] = relationship(back_populates="movements")

    @property
    def stock_item_name(self) -> Optional[str]:
        return self.stock_item.name if self.stock_item else None

    @validates("movement_type")
    def _validate_movement_type(self, key, value):
        return one_of(key, value, {t.value for t in MovementType})

    @validates("quantity")
    def _validate_quantity(self, key, value):
        return non_negative(key, value)


class Recipe(Base, TimestampMixin):
    """Ingredients needed to prepare a menu."""

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(primary_key=True)
    reservation_food_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservation_foods.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    portions: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    food: Mapped[Optional["ReservationFood"]] = relationship("ReservationFood")
    ingredients: Mapped[List["RecipeIngredient"]] = relationship(
        back_populates="recipe", cascade="all, delete-orphan", order_by="RecipeIngredient.id"
    )

    @validates("portions")
    def _validate_portions(self, key, value):
        return positive(key, value)


class RecipeIngredient(Base):
    """Quantity of one stock item used by a recipe batch."""

    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        UniqueConstraint("recipe_id", "stock_item_id", name="uq_recipe_ingredient_item"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    recipe_id: Mapped[int] = mapped_column(
        ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stock_item_id: Mapped[int] = mapped_column(
        ForeignKey("stock_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quantity_required: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)

    recipe: Mapped["Recipe"] = relationship(back_populates="ingredients")
    stock_item: Mapped["StockItem"] = relationship(back_populates="recipe_ingredients")

    @validates("quantity_required")
    def _validate_quantity(self, key, value):
        return positive(key, value)

    @property
    def stock_item_name(self) -> str:
        return self.stock_item.name

    @property
    def unit(self) -> str:
        return self.stock_item.unit


from folklore_admin.models.food import ReservationFood  # noqa: E402
