"""Stock item, movement and recipe routes."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from folklore_admin.api.deps import conflict, get_or_404
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.food import ReservationFood
from folklore_admin.models.reservation import Reservation
from folklore_admin.models.stock import MovementType, Recipe, RecipeIngredient, StockItem, StockMovement
from folklore_admin.schemas.stock import (
    RecipeAvailability,
    RecipeConsumeRequest,
    RecipeConsumeResult,
    RecipeCreate,
    RecipeIngredientIn,
    RecipeResponse,
    RecipeUpdate,
    ReservationIssueResult,
    StockItemCreate,
    StockItemResponse,
    StockItemUpdate,
    StockMovementCreate,
    StockMovementResponse,
)
from folklore_admin.services.stock_service import InsufficientStockError, StockService

logger = logging.getLogger(__name__)

router = APIRouter()
movements_router = APIRouter()
recipes_router = APIRouter()


# ============== Stock items ==============

@router.get("/", response_model=List[StockItemResponse])
def list_stock_items(
    db: DbSession,
    current_user: CurrentUser,
    search: Optional[str] = Query(None),
    low_stock: bool = Query(False),
):
    query = db.query(StockItem)
    if search:
        query = query.filter(StockItem.name.ilike(f"%{search}%"))
    if low_stock:
        query = query.filter(
            StockItem.min_quantity.isnot(None),
            StockItem.quantity_available <= StockItem.min_quantity,
        )
    return query.order_by(StockItem.name).all()


@router.get("/low-stock", response_model=List[StockItemResponse])
def list_low_stock(db: DbSession, current_user: CurrentUser):
    return StockService(db).low_stock_items()


@router.post("/issue/reservation/{reservation_id}", response_model=ReservationIssueResult)
def issue_for_reservation(
    reservation_id: int,
    db: DbSession,
    current_user: RequireManager,
    allow_negative: bool = Query(False),
):
    """Deduct recipe ingredients for every menu ordered in the reservation."""
    reservation = get_or_404(db, Reservation, reservation_id, "Reservation")
    try:
        result = StockService(db).issue_for_reservation(
            reservation, user_id=current_user.id, allow_negative=allow_negative
        )
    except InsufficientStockError as e:
        raise conflict(e)
    db.commit()
    return result


@router.get("/{item_id}", response_model=StockItemResponse)
def get_stock_item(item_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, StockItem, item_id, "Stock item")


@router.post("/", response_model=StockItemResponse, status_code=status.HTTP_201_CREATED)
def create_stock_item(data: StockItemCreate, db: DbSession, current_user: RequireManager):
    item_data = data.model_dump(exclude={"quantity_available"})
    item = StockItem(**item_data, quantity_available=0)
    db.add(item)
    db.flush()
    if data.quantity_available > 0:
        StockService(db).record_movement(
            item,
            MovementType.IN.value,
            data.quantity_available,
            reason="Initial stock",
            user_id=current_user.id,
        )
    db.commit()
    db.refresh(item)
    return item


@router.put("/{item_id}", response_model=StockItemResponse)
def update_stock_item(item_id: int, data: StockItemUpdate, db: DbSession, current_user: RequireManager):
    item = get_or_404(db, StockItem, item_id, "Stock item")
    item.apply_changes(data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stock_item(item_id: int, db: DbSession, current_user: RequireManager):
    item = get_or_404(db, StockItem, item_id, "Stock item")
    db.delete(item)
    db.commit()
    logger.info(f"Stock item {item_id} deleted by {current_user.email}")


# ============== Movements ==============

@movements_router.get("/", response_model=List[StockMovementResponse])
def list_movements(
    db: DbSession,
    current_user: CurrentUser,
    stock_item_id: Optional[int] = Query(None),
    movement_type: Optional[str] = Query(None),
    reservation_id: Optional[int] = Query(None),
    event_id: Optional[int] = Query(None),
    limit: int = Query(200, ge=1, le=1000),
):
    """Ledger entries, newest first."""
    query = db.query(StockMovement)
    if stock_item_id:
        query = query.filter(StockMovement.stock_item_id == stock_item_id)
    if movement_type:
        query = query.filter(StockMovement.movement_type == movement_type)
    if reservation_id:
        query = query.filter(StockMovement.reservation_id == reservation_id)
    if event_id:
        query = query.filter(StockMovement.event_id == event_id)
    return query.order_by(StockMovement.id.desc()).limit(limit).all()


@movements_router.get("/{movement_id}", response_model=StockMovementResponse)
def get_movement(movement_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, StockMovement, movement_id, "Stock movement")


@movements_router.post("/", response_model=StockMovementResponse, status_code=status.HTTP_201_CREATED)
def create_movement(data: StockMovementCreate, db: DbSession, current_user: RequireManager):
    item = get_or_404(db, StockItem, data.stock_item_id, "Stock item")
    try:
        movement = StockService(db).record_movement(
            item,
            data.movement_type,
            data.quantity,
            reason=data.reason,
            reservation_id=data.reservation_id,
            event_id=data.event_id,
            user_id=current_user.id,
            allow_negative=data.allow_negative,
        )
    except InsufficientStockError as e:
        raise conflict(e)
    db.commit()
    db.refresh(movement)
    return movement


# ============== Recipes ==============

def _set_ingredients(db: Session, recipe: Recipe, ingredients: List[RecipeIngredientIn]) -> None:
    recipe.ingredients.clear()
    db.flush()
    for line in ingredients:
        item = get_or_404(db, StockItem, line.stock_item_id, "Stock item")
        recipe.ingredients.append(
            RecipeIngredient(stock_item=item, quantity_required=line.quantity_required)
        )


@recipes_router.get("/", response_model=List[RecipeResponse])
def list_recipes(db: DbSession, current_user: CurrentUser, food_id: Optional[int] = Query(None)):
    query = db.query(Recipe)
    if food_id:
        query = query.filter(Recipe.reservation_food_id == food_id)
    return query.order_by(Recipe.name).all()


@recipes_router.get("/{recipe_id}", response_model=RecipeResponse)
def get_recipe(recipe_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Recipe, recipe_id, "Recipe")


@recipes_router.post("/", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(data: RecipeCreate, db: DbSession, current_user: RequireManager):
    if data.reservation_food_id:
        get_or_404(db, ReservationFood, data.reservation_food_id, "Menu item")
    recipe = Recipe(**data.model_dump(exclude={"ingredients"}))
    db.add(recipe)
    _set_ingredients(db, recipe, data.ingredients)
    db.commit()
    db.refresh(recipe)
    return recipe


@recipes_router.put("/{recipe_id}", response_model=RecipeResponse)
def update_recipe(recipe_id: int, data: RecipeUpdate, db: DbSession, current_user: RequireManager):
    recipe = get_or_404(db, Recipe, recipe_id, "Recipe")
    update_data = data.model_dump(exclude_unset=True, exclude={"ingredients"})
    if update_data.get("reservation_food_id"):
        get_or_404(db, ReservationFood, update_data["reservation_food_id"], "Menu item")
    recipe.apply_changes(update_data)
    if data.ingredients is not None:
        _set_ingredients(db, recipe, data.ingredients)
    db.commit()
    db.refresh(recipe)
    return recipe


@recipes_router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(recipe_id: int, db: DbSession, current_user: RequireManager):
    recipe = get_or_404(db, Recipe, recipe_id, "Recipe")
    db.delete(recipe)
    db.commit()


@recipes_router.get("/{recipe_id}/availability", response_model=RecipeAvailability)
def recipe_availability(recipe_id: int, db: DbSession, current_user: CurrentUser):
    recipe = get_or_404(db, Recipe, recipe_id, "Recipe")
    return StockService(db).recipe_availability(recipe)


@recipes_router.post("/{recipe_id}/consume", response_model=RecipeConsumeResult)
def consume_recipe(recipe_id: int, data: RecipeConsumeRequest, db: DbSession, current_user: RequireManager):
    recipe = get_or_404(db, Recipe, recipe_id, "Recipe")
    try:
        movements = StockService(db).consume_recipe(
            recipe,
            data.portions,
            reservation_id=data.reservation_id,
            event_id=data.event_id,
            reason=data.reason,
            user_id=current_user.id,
            allow_negative=data.allow_negative,
        )
    except InsufficientStockError as e:
        raise conflict(e)
    db.commit()
    return RecipeConsumeResult(
        recipe_id=recipe.id,
        portions=data.portions,
        movements=[StockMovementResponse.model_validate(m) for m in movements],
    )
