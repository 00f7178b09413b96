"""Staff member, attendance and staffing formula models."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from folklore_admin.db.base import Base, TimestampMixin
from folklore_admin.models.validators import non_negative, one_of, positive


class StaffingCategory(str, Enum):
    """Staff categories sized from the guest count."""

    WAITERS = "cisniciWaiters"
    CHEFS = "kuchariChefs"
    HELPERS = "pomocneSilyHelpers"
    HOSTS = "moderatoriHosts"
    MUSICIANS = "muzikantiMusicians"
    DANCERS = "tanecniciDancers"
    PHOTOGRAPHERS = "fotografkyPhotographers"
    JEWELRY = "sperkyJewelry"


# (category, guests per staff member, enabled, description)
DEFAULT_STAFFING_FORMULAS = [
    (StaffingCategory.WAITERS, 25, True, "Jeden číšník na 25 hostů"),
    (StaffingCategory.CHEFS, 50, True, "Jeden kuchař na 50 hostů"),
    (StaffingCategory.HELPERS, 40, True, "Jeden pomocník na 40 hostů"),
    (StaffingCategory.HOSTS, 100, True, "Jeden moderátor na 100 hostů"),
    (StaffingCategory.MUSICIANS, 75, False, "Jeden muzikant na 75 hostů"),
    (StaffingCategory.DANCERS, 50, False, "Jeden tanečník na 50 hostů"),
    (StaffingCategory.PHOTOGRAPHERS, 150, False, "Jedna fotografka na 150 hostů"),
    (StaffingCategory.JEWELRY, 200, False, "Jeden prodejce šperků na 200 hostů"),
]


class StaffMember(Base, TimestampMixin):
    """Employee or external worker."""

    __tablename__ = "staff_members"

    id: Mapped[int] = mapped_column(primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    role: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    hourly_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    fixed_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    emergency_contact: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    emergency_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    attendance: Mapped[List["StaffAttendance"]] = relationship(
        back_populates="staff_member",
        cascade="all, delete-orphan",
        order_by="StaffAttendance.attendance_date.desc()",
    )

    @validates("hourly_rate", "fixed_rate")
    def _validate_rate(self, key, value):
        return non_negative(key, value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class StaffAttendance(Base, TimestampMixin):
    """Hours worked by a staff member on one day."""

    __tablename__ = "staff_attendance"

    id: Mapped[int] = mapped_column(primary_key=True)
    staff_member_id: Mapped[int] = mapped_column(
        ForeignKey("staff_members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    check_in_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    check_out_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    hours_worked: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True
    )
    event_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("events.id", ondelete="SET NULL"), nullable=True
    )
    payment_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    staff_member: Mapped["StaffMember"] = relationship(back_populates="attendance")

    @validates("hours_worked")
    def _validate_hours(self, key, value):
        return positive(key, value)

    @validates("payment_amount")
    def _validate_payment(self, key, value):
        return non_negative(key, value)


class StaffingFormula(Base, TimestampMixin):
    """One staff member per ``ratio`` guests for a category."""

    __tablename__ = "staffing_formulas"

    id: Mapped[int] = mapped_column(primary_key=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    ratio: Mapped[int] = mapped_column(Integer, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @validates("category")
    def _validate_category(self, key, value):
        return one_of(key, value, {c.value for c in StaffingCategory})

    @validates("ratio")
    def _validate_ratio(self, key, value):
        return positive(key, value)
