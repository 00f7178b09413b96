"""Reservation menu (foods) routes."""

from datetime import date
from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from folklore_admin.api.deps import get_or_404
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.food import ReservationFood
from folklore_admin.schemas.food import (
    MenuEntry,
    ReservationFoodCreate,
    ReservationFoodResponse,
    ReservationFoodUpdate,
)
from folklore_admin.services.pricing_service import PricingService

router = APIRouter()


def _check_name(db, name: str, exclude_id: int = None) -> None:
    query = db.query(ReservationFood).filter(ReservationFood.name == name)
    if exclude_id:
        query = query.filter(ReservationFood.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Menu '{name}' already exists")


@router.get("/", response_model=List[ReservationFoodResponse])
def list_foods(db: DbSession, current_user: CurrentUser):
    return db.query(ReservationFood).order_by(ReservationFood.name).all()


@router.get("/menu", response_model=List[MenuEntry])
def menu_for_date(db: DbSession, current_user: CurrentUser, on: date = Query(...)):
    """Foods offered on a day, with date price overrides applied."""
    return PricingService(db).menu_for_date(on)


@router.get("/{food_id}", response_model=ReservationFoodResponse)
def get_food(food_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, ReservationFood, food_id, "Menu item")


@router.post("/", response_model=ReservationFoodResponse, status_code=status.HTTP_201_CREATED)
def create_food(data: ReservationFoodCreate, db: DbSession, current_user: RequireManager):
    _check_name(db, data.name)
    food = ReservationFood(**data.model_dump())
    db.add(food)
    db.commit()
    db.refresh(food)
    return food


@router.put("/{food_id}", response_model=ReservationFoodResponse)
def update_food(food_id: int, data: ReservationFoodUpdate, db: DbSession, current_user: RequireManager):
    food = get_or_404(db, ReservationFood, food_id, "Menu item")
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("name"):
        _check_name(db, update_data["name"], exclude_id=food.id)
    food.apply_changes(update_data)
    db.commit()
    db.refresh(food)
    return food


@router.delete("/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_food(food_id: int, db: DbSession, current_user: RequireManager):
    food = get_or_404(db, ReservationFood, food_id, "Menu item")
    db.delete(food)
    db.commit()
