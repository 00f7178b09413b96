"""Per-person pricing and calendar schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from folklore_admin.models.pricing import RESERVATIONS_PROJECT


class DateRangeIn(BaseModel):
    """Date range input: ``date_to`` missing means a single day."""

    date_from: date
    date_to: Optional[date] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.date_to is not None and self.date_to < self.date_from:
            raise ValueError("date_to must not be before date_from")
        return self


class DateRangeUpdate(BaseModel):
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @model_validator(mode="after")
    def _check_range(self):
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to must not be before date_from")
        return self


# ============== Per-person prices ==============

class PersonPrices(BaseModel):
    adult_price: Decimal = Field(..., ge=0)
    child_price: Decimal = Field(..., ge=0)
    infant_price: Decimal = Field(..., ge=0)


class PricingDefaultUpdate(BaseModel):
    adult_price: Optional[Decimal] = Field(None, ge=0)
    child_price: Optional[Decimal] = Field(None, ge=0)
    infant_price: Optional[Decimal] = Field(None, ge=0)


class PricingDefaultResponse(PersonPrices):
    id: int
    updated_at: datetime

    model_config = {"from_attributes": True}


class PricingDateOverrideCreate(PersonPrices):
    override_date: date
    reason: Optional[str] = Field(None, max_length=255)


class PricingDateOverrideUpdate(PricingDefaultUpdate):
    override_date: Optional[date] = None
    reason: Optional[str] = Field(None, max_length=255)


class PricingDateOverrideResponse(PricingDateOverrideCreate):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PricesForDate(PersonPrices):
    """Prices that apply on a given day."""

    on: date
    source: str  # "default" or "override"
    override_id: Optional[int] = None


# ============== Disabled dates ==============

class DisabledDateCreate(DateRangeIn):
    reason: Optional[str] = Field(None, max_length=255)
    project: str = Field(RESERVATIONS_PROJECT, min_length=1, max_length=50)


class DisabledDateUpdate(DateRangeUpdate):
    reason: Optional[str] = Field(None, max_length=255)
    project: Optional[str] = Field(None, min_length=1, max_length=50)


class DisabledDateResponse(BaseModel):
    id: int
    date_from: date
    date_to: Optional[date] = None
    reason: Optional[str] = None
    project: str
    created_at: datetime

    model_config = {"from_attributes": True}


class DisabledDateCheck(BaseModel):
    on: date
    project: str
    disabled: bool
    reasons: List[str] = []
