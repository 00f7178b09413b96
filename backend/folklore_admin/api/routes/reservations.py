"""Reservation routes."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Query, status
from sqlalchemy import or_

from folklore_admin.api.deps import bad_request, conflict, get_or_404
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.reservation import Reservation
from folklore_admin.schemas.cashbox import FinancialResult
from folklore_admin.schemas.reservation import (
    PaymentLinkResponse,
    PaymentResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
)
from folklore_admin.services.cashbox_service import CashboxService
from folklore_admin.services.reservation_service import (
    DisabledDateError,
    ReservationError,
    ReservationService,
    ReservationStateError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[ReservationResponse])
def list_reservations(
    db: DbSession,
    current_user: CurrentUser,
    status_filter: Optional[str] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    search: Optional[str] = Query(None),
):
    """List reservations, newest show date first."""
    query = db.query(Reservation)
    if status_filter:
        query = query.filter(Reservation.status == status_filter)
    if date_from:
        query = query.filter(Reservation.reservation_date >= date_from)
    if date_to:
        query = query.filter(Reservation.reservation_date <= date_to)
    if search:
        term = f"%{search}%"
        query = query.filter(
            or_(Reservation.contact_name.ilike(term), Reservation.contact_email.ilike(term))
        )
    return query.order_by(Reservation.reservation_date.desc(), Reservation.id.desc()).all()


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(reservation_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Reservation, reservation_id, "Reservation")


@router.post("/", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    db: DbSession,
    current_user: RequireManager,
    ignore_disabled_dates: bool = Query(False),
):
    try:
        reservation = ReservationService(db).create(data, ignore_disabled_dates=ignore_disabled_dates)
    except DisabledDateError as e:
        raise conflict(e)
    except ReservationError as e:
        raise bad_request(e)
    db.commit()
    db.refresh(reservation)
    return reservation


@router.put("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: int,
    data: ReservationUpdate,
    db: DbSession,
    current_user: RequireManager,
    ignore_disabled_dates: bool = Query(False),
):
    reservation = get_or_404(db, Reservation, reservation_id, "Reservation")
    try:
        ReservationService(db).update(reservation, data, ignore_disabled_dates=ignore_disabled_dates)
    except DisabledDateError as e:
        raise conflict(e)
    except ReservationError as e:
        raise bad_request(e)
    db.commit()
    db.refresh(reservation)
    return reservation


@router.delete("/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_reservation(reservation_id: int, db: DbSession, current_user: RequireManager):
    reservation = get_or_404(db, Reservation, reservation_id, "Reservation")
    for payment in list(reservation.payments):
        payment.reservation = None
    db.delete(reservation)
    db.commit()
    logger.info(f"Reservation {reservation_id} deleted by {current_user.email}")


@router.post("/{reservation_id}/send-payment-email", response_model=PaymentLinkResponse)
def send_payment_email(reservation_id: int, db: DbSession, current_user: RequireManager):
    """Open a payment for the reservation and mail the link to the customer."""
    reservation = get_or_404(db, Reservation, reservation_id, "Reservation")
    try:
        payment, payment_url, email_sent = ReservationService(db).send_payment_link(reservation)
    except ReservationStateError as e:
        raise conflict(e)
    db.commit()
    db.refresh(payment)
    if not email_sent:
        logger.warning(f"Payment link for reservation {reservation_id} was not emailed")
    return PaymentLinkResponse(
        payment=PaymentResponse.model_validate(payment),
        payment_url=payment_url,
        email_sent=email_sent,
        reservation_status=reservation.status,
    )


@router.get("/{reservation_id}/financial-result", response_model=FinancialResult)
def reservation_financial_result(reservation_id: int, db: DbSession, current_user: CurrentUser):
    get_or_404(db, Reservation, reservation_id, "Reservation")
    return CashboxService(db).financial_result(reservation_id=reservation_id)
