"""Dashboard figures for the back-office landing page."""

from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from folklore_admin.core.clock import local_today
from folklore_admin.models.event import Event, EventStatus
from folklore_admin.models.partner import CommissionLog, CommissionStatus
from folklore_admin.models.reservation import (
    Payment,
    PaymentStatus,
    Reservation,
    ReservationPerson,
    ReservationStatus,
)
from folklore_admin.models.staff import StaffAttendance
from folklore_admin.services.stock_service import StockService


def dashboard_stats(db: Session) -> Dict[str, Any]:
    today = local_today()
    week_end = today + timedelta(days=7)

    by_status = {s.value: 0 for s in ReservationStatus}
    for status, count in (
        db.query(Reservation.status, func.count(Reservation.id)).group_by(Reservation.status).all()
    ):
        by_status[status] = count

    reservations_today = (
        db.query(func.count(Reservation.id))
        .filter(
            Reservation.reservation_date == today,
            Reservation.status != ReservationStatus.CANCELLED.value,
        )
        .scalar()
    )
    persons_next_7_days = (
        db.query(func.count(ReservationPerson.id))
        .join(Reservation, ReservationPerson.reservation_id == Reservation.id)
        .filter(
            Reservation.reservation_date >= today,
            Reservation.reservation_date < week_end,
            Reservation.status != ReservationStatus.CANCELLED.value,
        )
        .scalar()
    )
    revenue_paid = (
        db.query(func.coalesce(func.sum(Payment.amount), 0))
        .filter(Payment.status == PaymentStatus.PAID.value)
        .scalar()
    )
    upcoming_events = (
        db.query(func.count(Event.id))
        .filter(
            Event.event_date >= today,
            Event.status.notin_([EventStatus.CANCELLED.value, EventStatus.COMPLETED.value]),
        )
        .scalar()
    )
    commissions_pending = (
        db.query(func.coalesce(func.sum(CommissionLog.commission_amount), 0))
        .filter(CommissionLog.payment_status == CommissionStatus.PENDING.value)
        .scalar()
    )
    attendance_unpaid = (
        db.query(func.coalesce(func.sum(StaffAttendance.payment_amount), 0))
        .filter(StaffAttendance.is_paid.is_(False))
        .scalar()
    )

    return {
        "reservations_total": sum(by_status.values()),
        "reservations_by_status": by_status,
        "reservations_today": reservations_today or 0,
        "persons_next_7_days": persons_next_7_days or 0,
        "revenue_paid": Decimal(str(revenue_paid or 0)),
        "upcoming_events": upcoming_events or 0,
        "low_stock_items": StockService(db).low_stock_count(),
        "commissions_pending": Decimal(str(commissions_pending or 0)),
        "attendance_unpaid": Decimal(str(attendance_unpaid or 0)),
    }
