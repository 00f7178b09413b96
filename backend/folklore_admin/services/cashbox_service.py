"""Cashbox Service - cash ledger, cashbox balances and closures.

A movement posted into a cashbox moves its ``current_balance``: INCOME adds,
EXPENSE subtracts. Ledger entries without a cashbox only count in the
summaries and financial results.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from folklore_admin.core.clock import local_today
from folklore_admin.models.cashbox import (
    Cashbox,
    CashboxClosure,
    CashMovement,
    CashMovementType,
)

logger = logging.getLogger(__name__)


class CashboxStateError(Exception):
    """Raised when a closed or inactive cashbox is written to."""


class CashboxCurrencyError(Exception):
    """Raised when a movement currency differs from the cashbox currency."""


def summarize(movements: Iterable[CashMovement]) -> Dict[str, Any]:
    """Income, expense and net per currency."""
    totals: Dict[str, Dict[str, Decimal]] = {}
    count = 0
    for movement in movements:
        count += 1
        bucket = totals.setdefault(
            movement.currency,
            {"income": Decimal("0"), "expense": Decimal("0"), "net": Decimal("0")},
        )
        if movement.movement_type == CashMovementType.INCOME.value:
            bucket["income"] += movement.amount
        else:
            bucket["expense"] += movement.amount
        bucket["net"] = bucket["income"] - bucket["expense"]
    return {"totals": totals, "entry_count": count}


class CashboxService:
    """Service for cash movements and cashbox lifecycle."""

    def __init__(self, db: Session):
        self.db = db

    def create_cashbox(self, data: Dict[str, Any], user_id: Optional[int] = None) -> Cashbox:
        initial = data.get("initial_balance") or Decimal("0")
        cashbox = Cashbox(**data, current_balance=initial, is_active=True, user_id=user_id)
        self.db.add(cashbox)
        self.db.flush()
        logger.info(f"Cashbox {cashbox.id} '{cashbox.name}' opened with {initial} {cashbox.currency}")
        return cashbox

    # ===== MOVEMENTS =====

    def post_movement(
        self, cashbox: Cashbox, data: Dict[str, Any], user_id: Optional[int] = None
    ) -> CashMovement:
        if not cashbox.is_active:
            raise CashboxStateError(f"Cashbox {cashbox.id} is not active")
        data = dict(data)
        data.pop("cashbox_id", None)
        currency = data.pop("currency", None) or cashbox.currency
        if currency != cashbox.currency:
            raise CashboxCurrencyError(
                f"Cashbox {cashbox.id} holds {cashbox.currency}, movement is in {currency}"
            )

        movement = self._build(data, currency, user_id)
        movement.cashbox = cashbox
        cashbox.current_balance = (cashbox.current_balance or Decimal("0")) + movement.signed_amount
        self.db.add(movement)
        self.db.flush()
        logger.info(
            f"Cashbox {cashbox.id}: {movement.movement_type} {movement.amount} {currency}, "
            f"balance {cashbox.current_balance}"
        )
        return movement

    def create_entry(self, data: Dict[str, Any], user_id: Optional[int] = None) -> CashMovement:
        """Ledger entry, posted through its cashbox when one is given."""
        cashbox_id = data.get("cashbox_id")
        if cashbox_id is not None:
            cashbox = self.db.get(Cashbox, cashbox_id)
            if cashbox is None:
                raise LookupError(f"Cashbox {cashbox_id} not found")
            return self.post_movement(cashbox, data, user_id)

        data = dict(data)
        data.pop("cashbox_id", None)
        currency = data.pop("currency")
        movement = self._build(data, currency, user_id)
        self.db.add(movement)
        self.db.flush()
        return movement

    def delete_entry(self, movement: CashMovement) -> None:
        cashbox = movement.cashbox
        if cashbox is not None:
            if not cashbox.is_active:
                raise CashboxStateError(f"Cashbox {cashbox.id} is not active")
            cashbox.current_balance = cashbox.current_balance - movement.signed_amount
        self.db.delete(movement)
        self.db.flush()

    @staticmethod
    def _build(data: Dict[str, Any], currency: str, user_id: Optional[int]) -> CashMovement:
        if data.get("entry_date") is None:
            data["entry_date"] = local_today()
        return CashMovement(currency=currency, user_id=user_id, **data)

    # ===== LIFECYCLE =====

    def close(
        self, cashbox: Cashbox, actual_cash, notes: Optional[str] = None, user_id: Optional[int] = None
    ) -> CashboxClosure:
        if not cashbox.is_active:
            raise CashboxStateError(f"Cashbox {cashbox.id} is already closed")

        totals = summarize(cashbox.movements)["totals"].get(cashbox.currency, {})
        income = totals.get("income", Decimal("0"))
        expense = totals.get("expense", Decimal("0"))
        expected = cashbox.current_balance
        actual = Decimal(str(actual_cash))

        closure = CashboxClosure(
            cashbox=cashbox,
            expected_cash=expected,
            actual_cash=actual,
            difference=actual - expected,
            total_income=income,
            total_expense=expense,
            net_result=income - expense,
            notes=notes,
            closed_by=user_id,
        )
        self.db.add(closure)
        cashbox.closed_at = datetime.now(timezone.utc)
        cashbox.is_active = False
        self.db.flush()

        if closure.difference != 0:
            logger.warning(
                f"Cashbox {cashbox.id} closed with difference {closure.difference} {cashbox.currency}"
            )
        else:
            logger.info(f"Cashbox {cashbox.id} closed, balance {expected} {cashbox.currency}")
        return closure

    def destroy(self, cashbox: Cashbox) -> Cashbox:
        """Drop every movement and reset the balance; the box stays inactive."""
        removed = len(cashbox.movements)
        cashbox.movements.clear()
        cashbox.current_balance = cashbox.initial_balance
        cashbox.closed_at = None
        cashbox.is_active = False
        self.db.flush()
        logger.warning(f"Cashbox {cashbox.id} reset, {removed} movements deleted")
        return cashbox

    # ===== REPORTS =====

    def financial_result(
        self, reservation_id: Optional[int] = None, event_id: Optional[int] = None
    ) -> Dict[str, Any]:
        query = self.db.query(CashMovement)
        if reservation_id is not None:
            query = query.filter(CashMovement.reservation_id == reservation_id)
        if event_id is not None:
            query = query.filter(CashMovement.event_id == event_id)
        result = summarize(query.order_by(CashMovement.id).all())
        result.update({"reservation_id": reservation_id, "event_id": event_id})
        return result
