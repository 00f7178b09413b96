"""Cash ledger and cashbox routes."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from folklore_admin.api.deps import bad_request, conflict, get_or_404
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.cashbox import Cashbox, CashMovement
from folklore_admin.schemas.cashbox import (
    CashboxCloseRequest,
    CashboxClosureResponse,
    CashboxCreate,
    CashboxDetail,
    CashboxMovementCreate,
    CashboxResponse,
    CashboxUpdate,
    CashEntryCreate,
    CashMovementResponse,
    CashSummary,
)
from folklore_admin.services.cashbox_service import (
    CashboxCurrencyError,
    CashboxService,
    CashboxStateError,
    summarize,
)

logger = logging.getLogger(__name__)

router = APIRouter()
cashboxes_router = APIRouter()


def _ledger_query(
    db,
    cashbox_id: Optional[int] = None,
    movement_type: Optional[str] = None,
    category: Optional[str] = None,
    currency: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    reservation_id: Optional[int] = None,
    event_id: Optional[int] = None,
):
    query = db.query(CashMovement)
    if cashbox_id:
        query = query.filter(CashMovement.cashbox_id == cashbox_id)
    if movement_type:
        query = query.filter(CashMovement.movement_type == movement_type)
    if category:
        query = query.filter(CashMovement.category == category)
    if currency:
        query = query.filter(CashMovement.currency == currency)
    if date_from:
        query = query.filter(CashMovement.entry_date >= date_from)
    if date_to:
        query = query.filter(CashMovement.entry_date <= date_to)
    if reservation_id:
        query = query.filter(CashMovement.reservation_id == reservation_id)
    if event_id:
        query = query.filter(CashMovement.event_id == event_id)
    return query


# ============== Ledger ==============

@router.get("/", response_model=List[CashMovementResponse])
def list_entries(
    db: DbSession,
    current_user: CurrentUser,
    cashbox_id: Optional[int] = Query(None),
    movement_type: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    currency: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    reservation_id: Optional[int] = Query(None),
    event_id: Optional[int] = Query(None),
):
    query = _ledger_query(
        db, cashbox_id, movement_type, category, currency, date_from, date_to, reservation_id, event_id
    )
    return query.order_by(CashMovement.entry_date.desc(), CashMovement.id.desc()).all()


@router.get("/summary", response_model=CashSummary)
def ledger_summary(
    db: DbSession,
    current_user: CurrentUser,
    cashbox_id: Optional[int] = Query(None),
    category: Optional[str] = Query(None),
    currency: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
):
    """Income, expense and net per currency for the filtered entries."""
    query = _ledger_query(
        db, cashbox_id=cashbox_id, category=category, currency=currency, date_from=date_from, date_to=date_to
    )
    return summarize(query.order_by(CashMovement.id).all())


@router.get("/{entry_id}", response_model=CashMovementResponse)
def get_entry(entry_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, CashMovement, entry_id, "Cash entry")


@router.post("/", response_model=CashMovementResponse, status_code=status.HTTP_201_CREATED)
def create_entry(data: CashEntryCreate, db: DbSession, current_user: RequireManager):
    try:
        movement = CashboxService(db).create_entry(data.model_dump(), user_id=current_user.id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except CashboxCurrencyError as e:
        raise bad_request(e)
    except CashboxStateError as e:
        raise conflict(e)
    db.commit()
    db.refresh(movement)
    return movement


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(entry_id: int, db: DbSession, current_user: RequireManager):
    movement = get_or_404(db, CashMovement, entry_id, "Cash entry")
    try:
        CashboxService(db).delete_entry(movement)
    except CashboxStateError as e:
        raise conflict(e)
    db.commit()


# ============== Cashboxes ==============

@cashboxes_router.get("/", response_model=List[CashboxResponse])
def list_cashboxes(db: DbSession, current_user: CurrentUser, active: Optional[bool] = Query(None)):
    query = db.query(Cashbox)
    if active is not None:
        query = query.filter(Cashbox.is_active == active)
    return query.order_by(Cashbox.id.desc()).all()


@cashboxes_router.get("/{cashbox_id}", response_model=CashboxDetail)
def get_cashbox(cashbox_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Cashbox, cashbox_id, "Cashbox")


@cashboxes_router.post("/", response_model=CashboxResponse, status_code=status.HTTP_201_CREATED)
def create_cashbox(data: CashboxCreate, db: DbSession, current_user: RequireManager):
    cashbox = CashboxService(db).create_cashbox(data.model_dump(), user_id=current_user.id)
    db.commit()
    db.refresh(cashbox)
    return cashbox


@cashboxes_router.put("/{cashbox_id}", response_model=CashboxResponse)
def update_cashbox(cashbox_id: int, data: CashboxUpdate, db: DbSession, current_user: RequireManager):
    cashbox = get_or_404(db, Cashbox, cashbox_id, "Cashbox")
    cashbox.apply_changes(data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(cashbox)
    return cashbox


@cashboxes_router.delete("/{cashbox_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cashbox(cashbox_id: int, db: DbSession, current_user: RequireManager):
    cashbox = get_or_404(db, Cashbox, cashbox_id, "Cashbox")
    db.delete(cashbox)
    db.commit()
    logger.info(f"Cashbox {cashbox_id} deleted by {current_user.email}")


@cashboxes_router.get("/{cashbox_id}/movements", response_model=List[CashMovementResponse])
def list_cashbox_movements(cashbox_id: int, db: DbSession, current_user: CurrentUser):
    cashbox = get_or_404(db, Cashbox, cashbox_id, "Cashbox")
    return cashbox.movements


@cashboxes_router.post(
    "/{cashbox_id}/movements", response_model=CashMovementResponse, status_code=status.HTTP_201_CREATED
)
def add_cashbox_movement(
    cashbox_id: int, data: CashboxMovementCreate, db: DbSession, current_user: RequireManager
):
    cashbox = get_or_404(db, Cashbox, cashbox_id, "Cashbox")
    try:
        movement = CashboxService(db).post_movement(cashbox, data.model_dump(), user_id=current_user.id)
    except CashboxCurrencyError as e:
        raise bad_request(e)
    except CashboxStateError as e:
        raise conflict(e)
    db.commit()
    db.refresh(movement)
    return movement


@cashboxes_router.post("/{cashbox_id}/close", response_model=CashboxClosureResponse)
def close_cashbox(cashbox_id: int, data: CashboxCloseRequest, db: DbSession, current_user: RequireManager):
    """Count the cash and close the box."""
    cashbox = get_or_404(db, Cashbox, cashbox_id, "Cashbox")
    try:
        closure = CashboxService(db).close(
            cashbox, data.actual_cash, notes=data.notes, user_id=current_user.id
        )
    except CashboxStateError as e:
        raise conflict(e)
    db.commit()
    db.refresh(closure)
    return closure


@cashboxes_router.post("/{cashbox_id}/destroy", response_model=CashboxResponse)
def destroy_cashbox(cashbox_id: int, db: DbSession, current_user: RequireManager):
    cashbox = get_or_404(db, Cashbox, cashbox_id, "Cashbox")
    CashboxService(db).destroy(cashbox)
    db.commit()
    db.refresh(cashbox)
    logger.warning(f"Cashbox {cashbox_id} reset by {current_user.email}")
    return cashbox


@cashboxes_router.get("/{cashbox_id}/closures", response_model=List[CashboxClosureResponse])
def list_closures(cashbox_id: int, db: DbSession, current_user: CurrentUser):
    cashbox = get_or_404(db, Cashbox, cashbox_id, "Cashbox")
    return cashbox.closures
