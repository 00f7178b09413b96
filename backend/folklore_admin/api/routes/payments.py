"""Payment routes.

Gateway callbacks arrive through ``PATCH /payment/{id}``.
"""

from datetime import date, datetime, time, timedelta
from typing import List, Optional

from fastapi import APIRouter, Query

from folklore_admin.api.deps import conflict, get_or_404
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.reservation import Payment
from folklore_admin.schemas.reservation import PaymentResponse, PaymentStatusUpdate
from folklore_admin.services.reservation_service import ReservationService, ReservationStateError

router = APIRouter()


@router.get("/list", response_model=List[PaymentResponse])
def list_payments(
    db: DbSession,
    current_user: CurrentUser,
    status_filter: Optional[str] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
):
    """List payments by creation time, newest first."""
    query = db.query(Payment)
    if status_filter:
        query = query.filter(Payment.status == status_filter)
    if date_from:
        query = query.filter(Payment.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.filter(Payment.created_at < datetime.combine(date_to + timedelta(days=1), time.min))
    return query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Payment, payment_id, "Payment")


@router.patch("/{payment_id}", response_model=PaymentResponse)
def update_payment_status(
    payment_id: int, data: PaymentStatusUpdate, db: DbSession, current_user: RequireManager
):
    payment = get_or_404(db, Payment, payment_id, "Payment")
    try:
        ReservationService(db).set_payment_status(payment, data.status)
    except ReservationStateError as e:
        raise conflict(e)
    db.commit()
    db.refresh(payment)
    return payment
