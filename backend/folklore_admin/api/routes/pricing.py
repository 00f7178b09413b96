"""Per-person pricing and reservation calendar routes."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from folklore_admin.api.deps import get_or_404
from folklore_admin.api.routes.food_rules import update_date_range
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.pricing import RESERVATIONS_PROJECT, DisabledDate, PricingDateOverride
from folklore_admin.schemas.pricing import (
    DisabledDateCheck,
    DisabledDateCreate,
    DisabledDateResponse,
    DisabledDateUpdate,
    PricesForDate,
    PricingDateOverrideCreate,
    PricingDateOverrideResponse,
    PricingDateOverrideUpdate,
    PricingDefaultResponse,
    PricingDefaultUpdate,
)
from folklore_admin.services.pricing_service import PricingService

logger = logging.getLogger(__name__)

router = APIRouter()
disabled_dates_router = APIRouter()


# ============== Defaults ==============

@router.get("/defaults", response_model=PricingDefaultResponse)
def get_defaults(db: DbSession, current_user: CurrentUser):
    defaults = PricingService(db).get_defaults()
    db.commit()
    return defaults


@router.put("/defaults", response_model=PricingDefaultResponse)
def update_defaults(data: PricingDefaultUpdate, db: DbSession, current_user: RequireManager):
    defaults = PricingService(db).get_defaults()
    defaults.apply_changes(data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(defaults)
    logger.info(
        f"Default prices set to {defaults.adult_price}/{defaults.child_price}/{defaults.infant_price} "
        f"by {current_user.email}"
    )
    return defaults


@router.get("/for-date", response_model=PricesForDate)
def prices_for_date(db: DbSession, current_user: CurrentUser, on: date = Query(...)):
    prices = PricingService(db).prices_for_date(on)
    db.commit()
    return prices


# ============== Date overrides ==============

def _check_override_date(db, day: date, exclude_id: Optional[int] = None) -> None:
    query = db.query(PricingDateOverride).filter(PricingDateOverride.override_date == day)
    if exclude_id:
        query = query.filter(PricingDateOverride.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Prices for {day.isoformat()} are already overridden",
        )


@router.get("/date-overrides", response_model=List[PricingDateOverrideResponse])
def list_date_overrides(
    db: DbSession,
    current_user: CurrentUser,
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
):
    query = db.query(PricingDateOverride)
    if date_from:
        query = query.filter(PricingDateOverride.override_date >= date_from)
    if date_to:
        query = query.filter(PricingDateOverride.override_date <= date_to)
    return query.order_by(PricingDateOverride.override_date).all()


@router.get("/date-overrides/{override_id}", response_model=PricingDateOverrideResponse)
def get_date_override(override_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, PricingDateOverride, override_id, "Date override")


@router.post("/date-overrides", response_model=PricingDateOverrideResponse, status_code=status.HTTP_201_CREATED)
def create_date_override(data: PricingDateOverrideCreate, db: DbSession, current_user: RequireManager):
    _check_override_date(db, data.override_date)
    override = PricingDateOverride(**data.model_dump())
    db.add(override)
    db.commit()
    db.refresh(override)
    return override


@router.put("/date-overrides/{override_id}", response_model=PricingDateOverrideResponse)
def update_date_override(
    override_id: int, data: PricingDateOverrideUpdate, db: DbSession, current_user: RequireManager
):
    override = get_or_404(db, PricingDateOverride, override_id, "Date override")
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("override_date"):
        _check_override_date(db, update_data["override_date"], exclude_id=override.id)
    override.apply_changes(update_data)
    db.commit()
    db.refresh(override)
    return override


@router.delete("/date-overrides/{override_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_date_override(override_id: int, db: DbSession, current_user: RequireManager):
    override = get_or_404(db, PricingDateOverride, override_id, "Date override")
    db.delete(override)
    db.commit()


# ============== Disabled dates ==============

@disabled_dates_router.get("/", response_model=List[DisabledDateResponse])
def list_disabled_dates(db: DbSession, current_user: CurrentUser, project: Optional[str] = Query(None)):
    query = db.query(DisabledDate)
    if project:
        query = query.filter(DisabledDate.project == project)
    return query.order_by(DisabledDate.date_from, DisabledDate.id).all()


@disabled_dates_router.get("/check", response_model=DisabledDateCheck)
def check_disabled_date(
    db: DbSession,
    current_user: CurrentUser,
    on: date = Query(...),
    project: str = Query(RESERVATIONS_PROJECT),
):
    ranges = PricingService(db).disabled_ranges(on, project)
    return DisabledDateCheck(
        on=on,
        project=project,
        disabled=bool(ranges),
        reasons=[r.reason for r in ranges if r.reason],
    )


@disabled_dates_router.get("/{disabled_id}", response_model=DisabledDateResponse)
def get_disabled_date(disabled_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, DisabledDate, disabled_id, "Disabled date")


@disabled_dates_router.post("/", response_model=DisabledDateResponse, status_code=status.HTTP_201_CREATED)
def create_disabled_date(data: DisabledDateCreate, db: DbSession, current_user: RequireManager):
    disabled = DisabledDate(**data.model_dump())
    db.add(disabled)
    db.commit()
    db.refresh(disabled)
    logger.info(f"Reservations closed {disabled.date_from}..{disabled.date_to or disabled.date_from} ({disabled.reason})")
    return disabled


@disabled_dates_router.put("/{disabled_id}", response_model=DisabledDateResponse)
def update_disabled_date(disabled_id: int, data: DisabledDateUpdate, db: DbSession, current_user: RequireManager):
    disabled = get_or_404(db, DisabledDate, disabled_id, "Disabled date")
    update_date_range(disabled, data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(disabled)
    return disabled


@disabled_dates_router.delete("/{disabled_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_disabled_date(disabled_id: int, db: DbSession, current_user: RequireManager):
    disabled = get_or_404(db, DisabledDate, disabled_id, "Disabled date")
    db.delete(disabled)
    db.commit()
