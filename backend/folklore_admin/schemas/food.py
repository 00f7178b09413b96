"""Menu schemas: foods, price overrides and availability rules."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from folklore_admin.schemas.pricing import DateRangeIn, DateRangeUpdate


class ReservationFoodBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    is_children_menu: bool = False


class ReservationFoodCreate(ReservationFoodBase):
    pass


class ReservationFoodUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    is_children_menu: Optional[bool] = None


class ReservationFoodResponse(ReservationFoodBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MenuEntry(BaseModel):
    """A food as offered on a specific day."""

    id: int
    name: str
    description: Optional[str] = None
    is_children_menu: bool
    base_price: Decimal
    price: Decimal
    price_override_id: Optional[int] = None


# ============== Price overrides ==============

class FoodPriceOverrideCreate(DateRangeIn):
    reservation_food_id: int
    price: Decimal = Field(..., ge=0)
    reason: Optional[str] = Field(None, max_length=255)


class FoodPriceOverrideUpdate(DateRangeUpdate):
    price: Optional[Decimal] = Field(None, ge=0)
    reason: Optional[str] = Field(None, max_length=255)


class FoodPriceOverrideResponse(BaseModel):
    id: int
    reservation_food_id: int
    date_from: date
    date_to: Optional[date] = None
    price: Decimal
    reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ============== Availability ==============

class FoodAvailabilityCreate(DateRangeIn):
    reservation_food_id: int
    available: bool = False
    reason: Optional[str] = Field(None, max_length=255)


class FoodAvailabilityUpdate(DateRangeUpdate):
    available: Optional[bool] = None
    reason: Optional[str] = Field(None, max_length=255)


class FoodAvailabilityResponse(BaseModel):
    id: int
    reservation_food_id: int
    date_from: date
    date_to: Optional[date] = None
    available: bool
    reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
