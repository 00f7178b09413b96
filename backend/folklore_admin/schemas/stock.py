"""Stock, movement and recipe schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from folklore_admin.models.stock import MovementType, StockUnit


# ============== Stock items ==============

class StockItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    unit: StockUnit
    min_quantity: Optional[Decimal] = Field(None, ge=0)
    price_per_unit: Optional[Decimal] = Field(None, ge=0)
    supplier: Optional[str] = Field(None, max_length=255)


class StockItemCreate(StockItemBase):
    """Initial quantity is recorded as an IN movement."""

    quantity_available: Decimal = Field(default=Decimal("0"), ge=0)

    model_config = {"use_enum_values": True}


class StockItemUpdate(BaseModel):
    """Quantity is changed through movements only."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    unit: Optional[StockUnit] = None
    min_quantity: Optional[Decimal] = Field(None, ge=0)
    price_per_unit: Optional[Decimal] = Field(None, ge=0)
    supplier: Optional[str] = Field(None, max_length=255)

    model_config = {"use_enum_values": True}


class StockItemResponse(StockItemBase):
    id: int
    quantity_available: Decimal
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ============== Movements ==============

class StockMovementCreate(BaseModel):
    stock_item_id: int
    movement_type: MovementType
    quantity: Decimal = Field(..., ge=0)
    reason: Optional[str] = Field(None, max_length=500)
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    allow_negative: bool = False

    model_config = {"use_enum_values": True}

    @model_validator(mode="after")
    def _check_quantity(self) -> "StockMovementCreate":
        if self.movement_type != MovementType.ADJUSTMENT.value and self.quantity <= 0:
            raise ValueError("quantity must be greater than zero for IN and OUT movements")
        return self


class StockMovementResponse(BaseModel):
    id: int
    stock_item_id: int
    stock_item_name: Optional[str] = None
    movement_type: MovementType
    quantity: Decimal
    balance_after: Decimal
    reason: Optional[str] = None
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    user_id: Optional[int] = None
    created_at: datetime

    model_config = {"from_attributes": True}


# ============== Recipes ==============

class RecipeIngredientIn(BaseModel):
    stock_item_id: int
    quantity_required: Decimal = Field(..., gt=0)


class RecipeIngredientResponse(RecipeIngredientIn):
    id: int
    stock_item_name: str
    unit: str

    model_config = {"from_attributes": True}


def _unique_items(ingredients: Optional[List[RecipeIngredientIn]]):
    if ingredients:
        ids = [i.stock_item_id for i in ingredients]
        if len(ids) != len(set(ids)):
            raise ValueError("each stock item may appear only once in a recipe")
    return ingredients


class RecipeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    reservation_food_id: Optional[int] = None
    portions: int = Field(1, ge=1)
    ingredients: List[RecipeIngredientIn] = []

    @field_validator("ingredients")
    @classmethod
    def _no_duplicates(cls, v):
        return _unique_items(v)


class RecipeUpdate(BaseModel):
    """Giving ``ingredients`` replaces the ingredient list."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    reservation_food_id: Optional[int] = None
    portions: Optional[int] = Field(None, ge=1)
    ingredients: Optional[List[RecipeIngredientIn]] = None

    @field_validator("ingredients")
    @classmethod
    def _no_duplicates(cls, v):
        return _unique_items(v)


class RecipeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    reservation_food_id: Optional[int] = None
    portions: int
    ingredients: List[RecipeIngredientResponse] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RecipeAvailability(BaseModel):
    recipe_id: int
    portions_available: Optional[int] = None
    limiting_stock_item_id: Optional[int] = None
    limiting_stock_item_name: Optional[str] = None


class RecipeConsumeRequest(BaseModel):
    portions: Decimal = Field(..., gt=0)
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    reason: Optional[str] = Field(None, max_length=500)
    allow_negative: bool = False


class RecipeConsumeResult(BaseModel):
    recipe_id: int
    portions: Decimal
    movements: List[StockMovementResponse]


class ReservationIssueResult(BaseModel):
    reservation_id: int
    issued: dict[str, int] = {}
    skipped: List[str] = []
    movements: List[StockMovementResponse] = []
