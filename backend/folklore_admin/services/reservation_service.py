"""Reservation Service - booking lifecycle and payment status handling.

Flow:
1. Reservation created (RECEIVED) with its persons, unless the day is closed
2. Payment link sent: a CREATED payment is opened and the reservation
   moves to WAITING_PAYMENT
3. The gateway reports back through the payment status: AUTHORIZED and PAID
   propagate to the reservation
"""

import logging
import secrets
from datetime import date
from typing import Tuple
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from folklore_admin.core.config import settings
from folklore_admin.core.email import send_payment_link_email
from folklore_admin.models.reservation import (
    Payment,
    PaymentStatus,
    Reservation,
    ReservationPerson,
    ReservationStatus,
)
from folklore_admin.schemas.reservation import ReservationCreate, ReservationUpdate
from folklore_admin.services.pricing_service import PricingService

logger = logging.getLogger(__name__)

INVOICE_CONTACT_FIELDS = {
    "invoice_name": "contact_name",
    "invoice_email": "contact_email",
    "invoice_phone": "contact_phone",
}

FINAL_PAYMENT_STATUSES = {PaymentStatus.PAID.value, PaymentStatus.CANCELLED.value}


class ReservationError(Exception):
    """Base class for reservation rule violations."""


class DisabledDateError(ReservationError):
    """Raised when booking a day closed for reservations."""

    def __init__(self, day: date, reasons):
        self.day = day
        self.reasons = list(reasons)
        detail = ", ".join(r for r in self.reasons if r) or "closed"
        super().__init__(f"Reservations are disabled on {day.isoformat()} ({detail})")


class ReservationStateError(ReservationError):
    """Raised when an operation does not fit the current status."""


class ReservationService:
    """Service for creating and updating reservations."""

    def __init__(self, db: Session):
        self.db = db

    def _check_date(self, day: date, ignore_disabled_dates: bool) -> None:
        if ignore_disabled_dates:
            return
        ranges = PricingService(self.db).disabled_ranges(day)
        if ranges:
            raise DisabledDateError(day, [r.reason for r in ranges])

    @staticmethod
    def _apply_invoice_copy(reservation: Reservation) -> None:
        if reservation.invoice_same_as_contact:
            for invoice_field, contact_field in INVOICE_CONTACT_FIELDS.items():
                setattr(reservation, invoice_field, getattr(reservation, contact_field))

    @staticmethod
    def _check_transfer(reservation: Reservation) -> None:
        if reservation.transfer_selected:
            if not reservation.transfer_count or reservation.transfer_count < 1:
                raise ReservationError("transfer_count must be at least 1 when a transfer is selected")
            if not (reservation.transfer_address or "").strip():
                raise ReservationError("transfer_address is required when a transfer is selected")
        else:
            reservation.transfer_count = None
            reservation.transfer_address = None

    def create(self, data: ReservationCreate, ignore_disabled_dates: bool = False) -> Reservation:
        self._check_date(data.reservation_date, ignore_disabled_dates)

        fields = data.model_dump(exclude={"persons"})
        reservation = Reservation(**fields)
        reservation.persons = [ReservationPerson(**p.model_dump()) for p in data.persons]
        self._apply_invoice_copy(reservation)
        self._check_transfer(reservation)

        self.db.add(reservation)
        self.db.flush()
        logger.info(
            f"Reservation {reservation.id} created for {reservation.reservation_date} "
            f"({len(reservation.persons)} persons)"
        )
        return reservation

    def update(
        self, reservation: Reservation, data: ReservationUpdate, ignore_disabled_dates: bool = False
    ) -> Reservation:
        update_data = data.model_dump(exclude_unset=True)
        persons = update_data.pop("persons", None)

        new_date = update_data.get("reservation_date")
        if new_date is not None and new_date != reservation.reservation_date:
            self._check_date(new_date, ignore_disabled_dates)

        reservation.apply_changes(update_data)

        if persons is not None:
            reservation.persons = [ReservationPerson(**p) for p in persons]

        self._apply_invoice_copy(reservation)
        self._check_transfer(reservation)
        self.db.flush()
        return reservation

    # ===== PAYMENTS =====

    def send_payment_link(self, reservation: Reservation) -> Tuple[Payment, str, bool]:
        """Open a payment for the reservation total and email the link."""
        if reservation.status in (ReservationStatus.CANCELLED.value, ReservationStatus.PAID.value):
            raise ReservationStateError(
                f"Reservation {reservation.id} is {reservation.status}, no payment can be requested"
            )
        amount = reservation.total_price
        if amount <= 0:
            raise ReservationStateError(f"Reservation {reservation.id} has nothing to pay")

        payment = Payment(
            transaction_id=f"FG{reservation.id}-{secrets.token_hex(6).upper()}",
            status=PaymentStatus.CREATED.value,
            reservation=reservation,
            reservation_reference=str(reservation.id),
            amount=amount,
        )
        self.db.add(payment)
        if reservation.status == ReservationStatus.RECEIVED.value:
            reservation.status = ReservationStatus.WAITING_PAYMENT.value
        self.db.flush()

        payment_url = f"{settings.payment_gateway_url}?{urlencode({'transactionId': payment.transaction_id})}"
        email_sent = send_payment_link_email(
            to=reservation.billing_email,
            reservation_id=reservation.id,
            amount=f"{amount:.2f}",
            payment_url=payment_url,
        )
        logger.info(
            f"Payment {payment.transaction_id} opened for reservation {reservation.id} "
            f"({amount}), email_sent={email_sent}"
        )
        return payment, payment_url, email_sent

    def set_payment_status(self, payment: Payment, new_status: str) -> Payment:
        """Change a payment status and propagate it to the reservation."""
        if payment.status == new_status:
            return payment
        if payment.status in FINAL_PAYMENT_STATUSES:
            raise ReservationStateError(
                f"Payment {payment.transaction_id} is already {payment.status}"
            )

        payment.status = new_status
        reservation = payment.reservation
        if reservation is not None:
            if new_status == PaymentStatus.PAID.value:
                reservation.status = ReservationStatus.PAID.value
            elif (
                new_status == PaymentStatus.AUTHORIZED.value
                and reservation.status != ReservationStatus.PAID.value
            ):
                reservation.status = ReservationStatus.AUTHORIZED.value
        self.db.flush()
        logger.info(f"Payment {payment.transaction_id} -> {new_status}")
        return payment
