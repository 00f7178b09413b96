"""Pricing Service - per-person prices, menu prices and the reservation calendar.

Date-range rules (food price overrides, food availability, disabled dates)
cover ``date_from`` through ``date_to``; without ``date_to`` they cover a
single day. When several rules of one kind match a day, the most specific
one wins: the rule that started latest, then the one created last.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, TypeVar

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from folklore_admin.models.food import FoodItemAvailability, FoodItemPriceOverride, ReservationFood
from folklore_admin.models.pricing import (
    RESERVATIONS_PROJECT,
    DisabledDate,
    PricingDateOverride,
    PricingDefault,
)

logger = logging.getLogger(__name__)

RuleT = TypeVar("RuleT", FoodItemPriceOverride, FoodItemAvailability, DisabledDate)


def pick_rule(rules: Sequence[RuleT], day: date) -> Optional[RuleT]:
    """Return the matching rule with the latest start, ties broken by highest id."""
    matching = [r for r in rules if r.covers(day)]
    if not matching:
        return None
    return max(matching, key=lambda r: (r.date_from, r.id or 0))


def _covering(query, model, day: date):
    return query.filter(
        model.date_from <= day,
        or_(
            model.date_to >= day,
            and_(model.date_to.is_(None), model.date_from == day),
        ),
    )


def menu_key(name: Optional[str]) -> str:
    """Normalised menu name used to match a person's menu to a food."""
    return (name or "").strip().casefold()


def find_food(db: Session, menu: Optional[str]) -> Optional[ReservationFood]:
    """The food named ``menu``, ignoring case and surrounding spaces.

    Names are compared in Python; SQLite ``lower()`` folds ASCII letters only.
    """
    key = menu_key(menu)
    if not key:
        return None
    for food in db.query(ReservationFood).order_by(ReservationFood.id):
        if menu_key(food.name) == key:
            return food
    return None


class PricingService:
    """Service answering 'what does it cost / is it open on this day'."""

    def __init__(self, db: Session):
        self.db = db

    # ===== PER-PERSON PRICES =====

    def get_defaults(self) -> PricingDefault:
        """Return the single defaults row, creating it on first use."""
        defaults = self.db.query(PricingDefault).order_by(PricingDefault.id).first()
        if defaults is None:
            defaults = PricingDefault()
            self.db.add(defaults)
            self.db.flush()
            logger.info("Created default per-person pricing row")
        return defaults

    def prices_for_date(self, day: date) -> Dict:
        override = (
            self.db.query(PricingDateOverride)
            .filter(PricingDateOverride.override_date == day)
            .first()
        )
        if override:
            return {
                "on": day,
                "source": "override",
                "override_id": override.id,
                "adult_price": override.adult_price,
                "child_price": override.child_price,
                "infant_price": override.infant_price,
            }
        defaults = self.get_defaults()
        return {
            "on": day,
            "source": "default",
            "override_id": None,
            "adult_price": defaults.adult_price,
            "child_price": defaults.child_price,
            "infant_price": defaults.infant_price,
        }

    # ===== MENU =====

    def food_price_override(self, food: ReservationFood, day: date) -> Optional[FoodItemPriceOverride]:
        rules = _covering(
            self.db.query(FoodItemPriceOverride).filter(
                FoodItemPriceOverride.reservation_food_id == food.id
            ),
            FoodItemPriceOverride,
            day,
        ).all()
        return pick_rule(rules, day)

    def is_food_available(self, food: ReservationFood, day: date) -> bool:
        """Foods are available unless an availability rule for the day says otherwise."""
        rules = _covering(
            self.db.query(FoodItemAvailability).filter(
                FoodItemAvailability.reservation_food_id == food.id
            ),
            FoodItemAvailability,
            day,
        ).all()
        rule = pick_rule(rules, day)
        return True if rule is None else rule.available

    def menu_for_date(self, day: date) -> List[Dict]:
        entries = []
        for food in self.db.query(ReservationFood).order_by(ReservationFood.name).all():
            if not self.is_food_available(food, day):
                continue
            override = self.food_price_override(food, day)
            entries.append({
                "id": food.id,
                "name": food.name,
                "description": food.description,
                "is_children_menu": food.is_children_menu,
                "base_price": food.price,
                "price": override.price if override else food.price,
                "price_override_id": override.id if override else None,
            })
        return entries

    # ===== CALENDAR =====

    def disabled_ranges(self, day: date, project: str = RESERVATIONS_PROJECT) -> List[DisabledDate]:
        return (
            _covering(
                self.db.query(DisabledDate).filter(DisabledDate.project == project),
                DisabledDate,
                day,
            )
            .order_by(DisabledDate.date_from, DisabledDate.id)
            .all()
        )

    def is_date_disabled(self, day: date, project: str = RESERVATIONS_PROJECT) -> bool:
        return bool(self.disabled_ranges(day, project))
