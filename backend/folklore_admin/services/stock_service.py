"""Stock Service - movements, recipe availability and recipe consumption.

Every change of ``StockItem.quantity_available`` goes through
``record_movement`` so that the movement ledger always explains the current
quantity on hand.

Flow for consumption (recipe or reservation issue):
1. Build the list of (stock item, quantity) needed
2. Pre-validate every line against the quantity on hand
3. Only when all lines fit, write one OUT movement per line
"""

import logging
import math
from collections import OrderedDict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from folklore_admin.models.reservation import Reservation
from folklore_admin.models.stock import MovementType, Recipe, StockItem, StockMovement
from folklore_admin.services.pricing_service import find_food

logger = logging.getLogger(__name__)

QUANTITY_STEP = Decimal("0.001")


class InsufficientStockError(Exception):
    """Raised when there's not enough stock for a deduction."""

    def __init__(self, item_name: str, item_id: int, available: Decimal, needed: Decimal, unit: str):
        self.item_name = item_name
        self.item_id = item_id
        self.available = available
        self.needed = needed
        self.unit = unit
        super().__init__(
            f"Insufficient stock for '{item_name}': need {needed} {unit}, have {available} {unit}"
        )


def _qty(value) -> Decimal:
    return Decimal(str(value)).quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)


class StockService:
    """Service for stock movements and recipe-driven deductions."""

    def __init__(self, db: Session):
        self.db = db

    # ===== MOVEMENTS =====

    def record_movement(
        self,
        item: StockItem,
        movement_type: str,
        quantity,
        reason: Optional[str] = None,
        reservation_id: Optional[int] = None,
        event_id: Optional[int] = None,
        user_id: Optional[int] = None,
        allow_negative: bool = False,
    ) -> StockMovement:
        """Apply a movement to the item and append it to the ledger."""
        quantity = _qty(quantity)
        current = item.quantity_available or Decimal("0")

        if movement_type == MovementType.IN.value:
            balance = current + quantity
        elif movement_type == MovementType.OUT.value:
            if quantity > current and not allow_negative:
                raise InsufficientStockError(item.name, item.id, current, quantity, item.unit)
            balance = current - quantity
        elif movement_type == MovementType.ADJUSTMENT.value:
            balance = quantity
        else:
            raise ValueError(f"Unknown movement type {movement_type!r}")

        item.quantity_available = balance
        movement = StockMovement(
            stock_item=item,
            movement_type=movement_type,
            quantity=quantity,
            balance_after=balance,
            reason=reason,
            reservation_id=reservation_id,
            event_id=event_id,
            user_id=user_id,
        )
        self.db.add(movement)
        self.db.flush()

        if item.is_low_stock:
            logger.warning(
                f"Stock item '{item.name}' (ID: {item.id}) is low: "
                f"{balance} {item.unit} (min {item.min_quantity})"
            )
        return movement

    def low_stock_items(self) -> List[StockItem]:
        return (
            self.db.query(StockItem)
            .filter(
                StockItem.min_quantity.isnot(None),
                StockItem.quantity_available <= StockItem.min_quantity,
            )
            .order_by(StockItem.name)
            .all()
        )

    def low_stock_count(self) -> int:
        return (
            self.db.query(func.count(StockItem.id))
            .filter(
                StockItem.min_quantity.isnot(None),
                StockItem.quantity_available <= StockItem.min_quantity,
            )
            .scalar()
            or 0
        )

    # ===== RECIPES =====

    def recipe_availability(self, recipe: Recipe) -> Dict[str, Any]:
        """How many portions of the recipe current stock allows."""
        result = {
            "recipe_id": recipe.id,
            "portions_available": None,
            "limiting_stock_item_id": None,
            "limiting_stock_item_name": None,
        }
        best = None
        for ingredient in recipe.ingredients:
            per_portion = Decimal(ingredient.quantity_required) / Decimal(recipe.portions)
            available = max(ingredient.stock_item.quantity_available or Decimal("0"), Decimal("0"))
            portions = math.floor(available / per_portion)
            if best is None or portions < best:
                best = portions
                result["portions_available"] = portions
                result["limiting_stock_item_id"] = ingredient.stock_item_id
                result["limiting_stock_item_name"] = ingredient.stock_item.name
        return result

    def _recipe_lines(self, recipe: Recipe, portions) -> List[Tuple[StockItem, Decimal]]:
        factor = Decimal(str(portions)) / Decimal(recipe.portions)
        return [
            (ingredient.stock_item, _qty(Decimal(ingredient.quantity_required) * factor))
            for ingredient in recipe.ingredients
        ]

    def _deduct_lines(
        self,
        lines: List[Tuple[StockItem, Decimal]],
        reason: Optional[str],
        reservation_id: Optional[int],
        event_id: Optional[int],
        user_id: Optional[int],
        allow_negative: bool,
    ) -> List[StockMovement]:
        # Merge lines hitting the same item so the pre-check sees the total
        needed: "OrderedDict[int, Tuple[StockItem, Decimal]]" = OrderedDict()
        for item, quantity in lines:
            if item.id in needed:
                needed[item.id] = (item, needed[item.id][1] + quantity)
            else:
                needed[item.id] = (item, quantity)

        if not allow_negative:
            for item, quantity in needed.values():
                available = item.quantity_available or Decimal("0")
                if quantity > available:
                    raise InsufficientStockError(item.name, item.id, available, quantity, item.unit)

        movements = []
        for item, quantity in needed.values():
            if quantity <= 0:
                continue
            movements.append(
                self.record_movement(
                    item,
                    MovementType.OUT.value,
                    quantity,
                    reason=reason,
                    reservation_id=reservation_id,
                    event_id=event_id,
                    user_id=user_id,
                    allow_negative=True,
                )
            )
        return movements

    def consume_recipe(
        self,
        recipe: Recipe,
        portions,
        reservation_id: Optional[int] = None,
        event_id: Optional[int] = None,
        reason: Optional[str] = None,
        user_id: Optional[int] = None,
        allow_negative: bool = False,
    ) -> List[StockMovement]:
        """Deduct ingredients for ``portions`` portions, all or nothing."""
        movements = self._deduct_lines(
            self._recipe_lines(recipe, portions),
            reason=reason or f"Recipe: {recipe.name} x {portions}",
            reservation_id=reservation_id,
            event_id=event_id,
            user_id=user_id,
            allow_negative=allow_negative,
        )
        logger.info(
            f"Consumed recipe '{recipe.name}' x {portions}: {len(movements)} movements"
        )
        return movements

    # ===== RESERVATION ISSUE =====

    def _recipe_for_menu(self, menu: str) -> Optional[Recipe]:
        food = find_food(self.db, menu)
        if food is None:
            return None
        return (
            self.db.query(Recipe)
            .filter(Recipe.reservation_food_id == food.id)
            .order_by(Recipe.id)
            .first()
        )

    def issue_for_reservation(
        self, reservation: Reservation, user_id: Optional[int] = None, allow_negative: bool = False
    ) -> Dict[str, Any]:
        """Issue one recipe portion per reservation person with a known menu."""
        portions_by_menu: "OrderedDict[str, int]" = OrderedDict()
        for person in reservation.persons:
            if person.menu and person.menu.strip():
                menu = person.menu.strip()
                portions_by_menu[menu] = portions_by_menu.get(menu, 0) + 1

        issued: Dict[str, int] = {}
        skipped: List[str] = []
        lines: List[Tuple[StockItem, Decimal]] = []
        for menu, count in portions_by_menu.items():
            recipe = self._recipe_for_menu(menu)
            if recipe is None or not recipe.ingredients:
                skipped.append(menu)
                continue
            lines.extend(self._recipe_lines(recipe, count))
            issued[menu] = count

        movements = self._deduct_lines(
            lines,
            reason=f"Reservation #{reservation.id}",
            reservation_id=reservation.id,
            event_id=None,
            user_id=user_id,
            allow_negative=allow_negative,
        )
        logger.info(
            f"Issued stock for reservation {reservation.id}: "
            f"{sum(issued.values())} portions, skipped {skipped}"
        )
        return {
            "reservation_id": reservation.id,
            "issued": issued,
            "skipped": skipped,
            "movements": movements,
        }
