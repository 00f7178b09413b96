"""Per-date menu price overrides and availability rules."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from folklore_admin.api.deps import get_or_404
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.food import FoodItemAvailability, FoodItemPriceOverride, ReservationFood
from folklore_admin.schemas.food import (
    FoodAvailabilityCreate,
    FoodAvailabilityResponse,
    FoodAvailabilityUpdate,
    FoodPriceOverrideCreate,
    FoodPriceOverrideResponse,
    FoodPriceOverrideUpdate,
)

price_overrides_router = APIRouter()
availability_router = APIRouter()


def update_date_range(rule, changes: dict) -> None:
    """Apply a partial update and re-check the merged range."""
    rule.apply_changes(changes)
    if rule.date_to is not None and rule.date_to < rule.date_from:
        raise HTTPException(
            status_code=422,
            detail="date_to must not be before date_from",
        )


# ============== Price overrides ==============

@price_overrides_router.get("/", response_model=List[FoodPriceOverrideResponse])
def list_price_overrides(db: DbSession, current_user: CurrentUser, food_id: Optional[int] = Query(None)):
    query = db.query(FoodItemPriceOverride)
    if food_id:
        query = query.filter(FoodItemPriceOverride.reservation_food_id == food_id)
    return query.order_by(FoodItemPriceOverride.date_from, FoodItemPriceOverride.id).all()


@price_overrides_router.get("/{override_id}", response_model=FoodPriceOverrideResponse)
def get_price_override(override_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, FoodItemPriceOverride, override_id, "Price override")


@price_overrides_router.post("/", response_model=FoodPriceOverrideResponse, status_code=status.HTTP_201_CREATED)
def create_price_override(data: FoodPriceOverrideCreate, db: DbSession, current_user: RequireManager):
    get_or_404(db, ReservationFood, data.reservation_food_id, "Menu item")
    rule = FoodItemPriceOverride(**data.model_dump())
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


@price_overrides_router.put("/{override_id}", response_model=FoodPriceOverrideResponse)
def update_price_override(
    override_id: int, data: FoodPriceOverrideUpdate, db: DbSession, current_user: RequireManager
):
    rule = get_or_404(db, FoodItemPriceOverride, override_id, "Price override")
    update_date_range(rule, data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(rule)
    return rule


@price_overrides_router.delete("/{override_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_price_override(override_id: int, db: DbSession, current_user: RequireManager):
    rule = get_or_404(db, FoodItemPriceOverride, override_id, "Price override")
    db.delete(rule)
    db.commit()


# ============== Availability ==============

@availability_router.get("/", response_model=List[FoodAvailabilityResponse])
def list_availability(db: DbSession, current_user: CurrentUser, food_id: Optional[int] = Query(None)):
    query = db.query(FoodItemAvailability)
    if food_id:
        query = query.filter(FoodItemAvailability.reservation_food_id == food_id)
    return query.order_by(FoodItemAvailability.date_from, FoodItemAvailability.id).all()


@availability_router.get("/{rule_id}", response_model=FoodAvailabilityResponse)
def get_availability(rule_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, FoodItemAvailability, rule_id, "Availability rule")


@availability_router.post("/", response_model=FoodAvailabilityResponse, status_code=status.HTTP_201_CREATED)
def create_availability(data: FoodAvailabilityCreate, db: DbSession, current_user: RequireManager):
    get_or_404(db, ReservationFood, data.reservation_food_id, "Menu item")
    rule = FoodItemAvailability(**data.model_dump())
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


@availability_router.put("/{rule_id}", response_model=FoodAvailabilityResponse)
def update_availability(rule_id: int, data: FoodAvailabilityUpdate, db: DbSession, current_user: RequireManager):
    rule = get_or_404(db, FoodItemAvailability, rule_id, "Availability rule")
    update_date_range(rule, data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(rule)
    return rule


@availability_router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_availability(rule_id: int, db: DbSession, current_user: RequireManager):
    rule = get_or_404(db, FoodItemAvailability, rule_id, "Availability rule")
    db.delete(rule)
    db.commit()
