"""Event models: events, floor-plan tables, guests, menu and staff assignments."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    JSON, Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Time,
    UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, backref, mapped_column, relationship, validates

from folklore_admin.db.base import Base, TimestampMixin
from folklore_admin.models.validators import non_negative, one_of, positive, validate_list


class EventType(str, Enum):
    FOLKLORE_SHOW = "folklorni_show"
    WEDDING = "svatba"
    EVENT = "event"
    PRIVATE = "privat"


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PLANNED = "PLANNED"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class EventSpace(str, Enum):
    ROUBENKA = "roubenka"
    TERASA = "terasa"
    STODOLKA = "stodolka"
    CELY_AREAL = "cely_areal"


class EventLanguage(str, Enum):
    CZ = "CZ"
    EN = "EN"
    SP = "SP"
    DE = "DE"


class GuestType(str, Enum):
    ADULT = "adult"
    CHILD = "child"


class Event(Base, TimestampMixin):
    """Show, wedding or private party, possibly created from a reservation."""

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    event_time: Mapped[time] = mapped_column(Time, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=120, nullable=False)

    guests_paid: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    guests_free: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    spaces: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Organizer
    organizer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    organizer_company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_person: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    organizer_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    organizer_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    coordinator_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    language: Mapped[str] = mapped_column(String(2), default=EventLanguage.CZ.value, nullable=False)

    # Money
    total_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    deposit_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    deposit_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payment_method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=EventStatus.DRAFT.value, nullable=False, index=True
    )

    # Planning notes
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    organization_plan: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    schedule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    catering_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    special_requirements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    tables: Mapped[List["EventTable"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", order_by="EventTable.id"
    )
    guests: Mapped[List["EventGuest"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", order_by="EventGuest.id"
    )
    menu_items: Mapped[List["EventMenuItem"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", order_by="EventMenuItem.id"
    )
    staff_assignments: Mapped[List["EventStaffAssignment"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", order_by="EventStaffAssignment.id"
    )

    @validates("event_type")
    def _validate_event_type(self, key, value):
        return one_of(key, value, {t.value for t in EventType})

    @validates("status")
    def _validate_status(self, key, value):
        return one_of(key, value, {s.value for s in EventStatus})

    @validates("language")
    def _validate_language(self, key, value):
        return one_of(key, value, {lang.value for lang in EventLanguage})

    @validates("spaces")
    def _validate_spaces(self, key, value):
        validate_list(key, value)
        allowed = {s.value for s in EventSpace}
        return [one_of(key, space, allowed) for space in value]

    @validates("guests_paid", "guests_free", "duration_minutes")
    def _validate_counts(self, key, value):
        return non_negative(key, value)

    @property
    def guests_total(self) -> int:
        return (self.guests_paid or 0) + (self.guests_free or 0)

    @property
    def unseated_guests(self) -> List["EventGuest"]:
        return [g for g in self.guests if g.event_table_id is None]


class EventTable(Base, TimestampMixin):
    """Table on the event floor plan."""

    __tablename__ = "event_tables"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    table_name: Mapped[str] = mapped_column(String(100), nullable=False)
    room: Mapped[str] = mapped_column(String(20), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    position_x: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    position_y: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    event: Mapped["Event"] = relationship(back_populates="tables")
    guests: Mapped[List["EventGuest"]] = relationship(
        back_populates="table", order_by="EventGuest.id"
    )

    @validates("room")
    def _validate_room(self, key, value):
        return one_of(key, value, {s.value for s in EventSpace})

    @validates("capacity")
    def _validate_capacity(self, key, value):
        return positive(key, value)


class EventGuest(Base, TimestampMixin):
    """Named guest of an event, optionally seated at a table."""

    __tablename__ = "event_guests"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    event_table_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("event_tables.id", ondelete="SET NULL"), nullable=True, index=True
    )
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    nationality: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    guest_type: Mapped[str] = mapped_column(String(10), default=GuestType.ADULT.value, nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_present: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True
    )
    person_index: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    menu_item_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservation_foods.id", ondelete="SET NULL"), nullable=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    event: Mapped["Event"] = relationship(back_populates="guests")
    table: Mapped[Optional["EventTable"]] = relationship(back_populates="guests")

    @validates("guest_type")
    def _validate_guest_type(self, key, value):
        return one_of(key, value, {t.value for t in GuestType})


class EventMenuItem(Base, TimestampMixin):
    """Catering line for an event."""

    __tablename__ = "event_menu_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reservation_food_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservation_foods.id", ondelete="SET NULL"), nullable=True
    )
    menu_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    price_per_unit: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    total_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    serving_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    event: Mapped["Event"] = relationship(back_populates="menu_items")

    @validates("quantity")
    def _validate_quantity(self, key, value):
        return positive(key, value)

    @validates("price_per_unit")
    def _validate_price(self, key, value):
        return non_negative(key, value)


class EventStaffAssignment(Base):
    """Staff member scheduled to work an event."""

    __tablename__ = "event_staff_assignments"
    __table_args__ = (
        UniqueConstraint("event_id", "staff_member_id", name="uq_event_staff_member"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    staff_member_id: Mapped[int] = mapped_column(
        ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    assignment_status: Mapped[str] = mapped_column(String(20), default="ASSIGNED", nullable=False)
    attendance_status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False)
    hours_worked: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    payment_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    payment_status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    event: Mapped["Event"] = relationship(back_populates="staff_assignments")
    staff_member: Mapped["StaffMember"] = relationship(
        "StaffMember",
        backref=backref("event_assignments", cascade="all, delete-orphan"),
    )


from folklore_admin.models.staff import StaffMember  # noqa: E402
