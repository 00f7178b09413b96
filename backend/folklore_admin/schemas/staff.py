"""Staff, attendance and staffing formula schemas."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from folklore_admin.models.staff import StaffingCategory


# ============== Staff members ==============

class StaffMemberBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    role: str = Field(..., min_length=1, max_length=100)
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    fixed_rate: Optional[Decimal] = Field(None, ge=0)
    is_active: bool = True
    emergency_contact: Optional[str] = Field(None, max_length=255)
    emergency_phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class StaffMemberCreate(StaffMemberBase):
    pass


class StaffMemberUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    role: Optional[str] = Field(None, min_length=1, max_length=100)
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    fixed_rate: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None
    emergency_contact: Optional[str] = Field(None, max_length=255)
    emergency_phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class StaffMemberResponse(StaffMemberBase):
    id: int
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ============== Attendance ==============

class StaffAttendanceCreate(BaseModel):
    """``hours_worked`` is derived from check-in/out when omitted."""

    staff_member_id: int
    attendance_date: date
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    hours_worked: Optional[Decimal] = Field(None, gt=0, le=24)
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    payment_amount: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class StaffAttendanceUpdate(BaseModel):
    attendance_date: Optional[date] = None
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    hours_worked: Optional[Decimal] = Field(None, gt=0, le=24)
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    payment_amount: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class StaffAttendanceResponse(BaseModel):
    id: int
    staff_member_id: int
    attendance_date: date
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    hours_worked: Decimal
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    payment_amount: Optional[Decimal] = None
    is_paid: bool
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


# ============== Staffing formulas ==============

class StaffingFormulaBase(BaseModel):
    category: StaffingCategory
    ratio: int = Field(..., ge=1)
    enabled: bool = True
    description: Optional[str] = None


class StaffingFormulaCreate(StaffingFormulaBase):
    model_config = {"use_enum_values": True}


class StaffingFormulaUpdate(BaseModel):
    category: Optional[StaffingCategory] = None
    ratio: Optional[int] = Field(None, ge=1)
    enabled: Optional[bool] = None
    description: Optional[str] = None

    model_config = {"use_enum_values": True}


class StaffingFormulaResponse(StaffingFormulaBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StaffingRequirement(BaseModel):
    category: StaffingCategory
    ratio: int
    required: int


class StaffingCalculation(BaseModel):
    guests: int
    requirements: List[StaffingRequirement]
    total_required: int
