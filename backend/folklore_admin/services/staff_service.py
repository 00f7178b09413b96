"""Staff Service - attendance hours and pay, staffing formulas."""

import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from folklore_admin.models.staff import (
    DEFAULT_STAFFING_FORMULAS,
    StaffAttendance,
    StaffingFormula,
    StaffMember,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

PAID_LOCKED_FIELDS = frozenset(
    {"hours_worked", "payment_amount", "check_in_time", "check_out_time"}
)


class AttendanceError(Exception):
    """Raised for attendance records that cannot be computed or changed."""


class AttendanceLockedError(AttendanceError):
    """Raised when changing the hours or pay of a paid record."""


def hours_between(check_in: time, check_out: time) -> Decimal:
    """Hours between two clock times; a check-out before check-in crosses midnight."""
    if check_in == check_out:
        raise AttendanceError("check_out_time must differ from check_in_time")
    start = datetime.combine(date.min, check_in)
    end = datetime.combine(date.min, check_out)
    if end < start:
        end += timedelta(days=1)
    seconds = Decimal((end - start).seconds)
    return (seconds / Decimal(3600)).quantize(CENT, rounding=ROUND_HALF_UP)


def attendance_payment(member: StaffMember, hours) -> Optional[Decimal]:
    """Hourly pay when the member has an hourly rate, otherwise the fixed rate."""
    if member.hourly_rate:
        return (Decimal(str(hours)) * member.hourly_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    if member.fixed_rate is not None:
        return member.fixed_rate
    return None


def staffing_requirements(formulas, guests: int) -> Dict[str, Any]:
    """One row per enabled formula: ceil(guests / ratio)."""
    requirements = []
    for formula in formulas:
        if not formula.enabled:
            continue
        required = math.ceil(guests / formula.ratio) if guests > 0 else 0
        requirements.append(
            {"category": formula.category, "ratio": formula.ratio, "required": required}
        )
    return {
        "guests": guests,
        "requirements": requirements,
        "total_required": sum(r["required"] for r in requirements),
    }


def ensure_default_formulas(db: Session) -> int:
    """Create the default staffing formulas whose category has no row yet."""
    existing = {category for (category,) in db.query(StaffingFormula.category).all()}
    created = 0
    for category, ratio, enabled, description in DEFAULT_STAFFING_FORMULAS:
        if category.value in existing:
            continue
        db.add(
            StaffingFormula(
                category=category.value, ratio=ratio, enabled=enabled, description=description
            )
        )
        created += 1
    if created:
        db.flush()
        logger.info(f"Created {created} default staffing formulas")
    return created


class StaffService:
    """Service for attendance records and staffing calculations."""

    def __init__(self, db: Session):
        self.db = db

    def _resolve_hours(self, hours, check_in: Optional[time], check_out: Optional[time]) -> Decimal:
        if hours is not None:
            return Decimal(str(hours))
        if check_in is not None and check_out is not None:
            return hours_between(check_in, check_out)
        raise AttendanceError("hours_worked or both check_in_time and check_out_time are required")

    def record_attendance(self, member: StaffMember, data: Dict[str, Any]) -> StaffAttendance:
        data = dict(data)
        hours = self._resolve_hours(
            data.pop("hours_worked", None), data.get("check_in_time"), data.get("check_out_time")
        )
        payment = data.pop("payment_amount", None)
        if payment is None:
            payment = attendance_payment(member, hours)
        data.pop("staff_member_id", None)

        record = StaffAttendance(
            staff_member=member, hours_worked=hours, payment_amount=payment, **data
        )
        self.db.add(record)
        self.db.flush()
        logger.info(
            f"Attendance for {member.full_name} on {record.attendance_date}: "
            f"{hours} h, {payment}"
        )
        return record

    def update_attendance(self, record: StaffAttendance, data: Dict[str, Any]) -> StaffAttendance:
        data = dict(data)
        if record.is_paid and PAID_LOCKED_FIELDS.intersection(data):
            raise AttendanceLockedError(f"Attendance {record.id} is already paid")

        explicit_hours = data.pop("hours_worked", None)
        explicit_payment = data.pop("payment_amount", None)
        new_hours = explicit_hours
        if new_hours is None and ("check_in_time" in data or "check_out_time" in data):
            check_in = data.get("check_in_time", record.check_in_time)
            check_out = data.get("check_out_time", record.check_out_time)
            if check_in and check_out:
                new_hours = hours_between(check_in, check_out)

        record.apply_changes(data)

        if new_hours is not None:
            record.hours_worked = new_hours

        if explicit_payment is not None:
            record.payment_amount = explicit_payment
        elif new_hours is not None:
            record.payment_amount = attendance_payment(record.staff_member, record.hours_worked)

        self.db.flush()
        return record

    def mark_paid(self, record: StaffAttendance) -> StaffAttendance:
        if record.is_paid:
            raise AttendanceLockedError(f"Attendance {record.id} is already paid")
        record.is_paid = True
        record.paid_at = datetime.now(timezone.utc)
        self.db.flush()
        logger.info(f"Attendance {record.id} paid: {record.payment_amount}")
        return record

    def calculate_staffing(self, guests: int) -> Dict[str, Any]:
        formulas = self.db.query(StaffingFormula).order_by(StaffingFormula.id).all()
        return staffing_requirements(formulas, guests)
