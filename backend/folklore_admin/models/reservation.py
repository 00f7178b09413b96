"""Reservation, reservation person and payment models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from folklore_admin.db.base import Base, TimestampMixin
from folklore_admin.models.validators import non_negative, one_of, positive


class ReservationStatus(str, Enum):
    RECEIVED = "RECEIVED"
    WAITING_PAYMENT = "WAITING_PAYMENT"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    AUTHORIZED = "AUTHORIZED"
    CONFIRMED = "CONFIRMED"


class PersonType(str, Enum):
    ADULT = "adult"
    CHILD = "child"
    INFANT = "infant"


class PaymentStatus(str, Enum):
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    AUTHORIZED = "AUTHORIZED"
    PENDING = "PENDING"
    CREATED = "CREATED"


class Reservation(Base, TimestampMixin):
    """A customer booking for a show evening."""

    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(primary_key=True)
    reservation_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=ReservationStatus.RECEIVED.value, nullable=False, index=True
    )

    # Contact
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    contact_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    contact_nationality: Mapped[str] = mapped_column(String(50), nullable=False)
    client_come_from: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Invoicing
    invoice_same_as_contact: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    invoice_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    invoice_company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    invoice_ic: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    invoice_dic: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    invoice_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    invoice_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Transfer
    transfer_selected: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    transfer_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    transfer_address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    agreement: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    persons: Mapped[List["ReservationPerson"]] = relationship(
        back_populates="reservation",
        cascade="all, delete-orphan",
        order_by="ReservationPerson.id",
    )
    payments: Mapped[List["Payment"]] = relationship(
        back_populates="reservation",
        order_by="Payment.id",
    )

    @validates("status")
    def _validate_status(self, key, value):
        return one_of(key, value, {s.value for s in ReservationStatus})

    @property
    def total_price(self) -> Decimal:
        return sum((p.price for p in self.persons), Decimal("0"))

    @property
    def billing_email(self) -> str:
        return self.invoice_email or self.contact_email


class ReservationPerson(Base):
    """A single guest within a reservation."""

    __tablename__ = "reservation_persons"

    id: Mapped[int] = mapped_column(primary_key=True)
    reservation_id: Mapped[int] = mapped_column(
        ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    person_type: Mapped[str] = mapped_column(String(10), nullable=False)
    menu: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)

    reservation: Mapped["Reservation"] = relationship(back_populates="persons")

    @validates("person_type")
    def _validate_person_type(self, key, value):
        return one_of(key, value, {t.value for t in PersonType})

    @validates("price")
    def _validate_price(self, key, value):
        return non_negative(key, value)


class Payment(Base, TimestampMixin):
    """Payment attempt for a reservation."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True)
    transaction_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PaymentStatus.CREATED.value, nullable=False, index=True
    )
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    reservation_reference: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    reservation: Mapped[Optional["Reservation"]] = relationship(back_populates="payments")

    @validates("status")
    def _validate_status(self, key, value):
        return one_of(key, value, {s.value for s in PaymentStatus})

    @validates("amount")
    def _validate_amount(self, key, value):
        return positive(key, value)
