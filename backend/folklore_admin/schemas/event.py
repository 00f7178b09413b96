"""Event schemas, including floor plan, guests, menu and staff assignments."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from folklore_admin.models.event import EventLanguage, EventSpace, EventStatus, EventType, GuestType
from folklore_admin.schemas.staff import StaffMemberResponse, StaffingRequirement


def _dedupe_spaces(v):
    if v is None:
        return v
    seen = []
    for space in v:
        if space not in seen:
            seen.append(space)
    return seen


# ============== Tables ==============

class EventTableBase(BaseModel):
    table_name: str = Field(..., min_length=1, max_length=100)
    room: EventSpace
    capacity: int = Field(..., ge=1)
    position_x: Optional[int] = None
    position_y: Optional[int] = None


class EventTableCreate(EventTableBase):
    model_config = {"use_enum_values": True}


class EventTableUpdate(BaseModel):
    table_name: Optional[str] = Field(None, min_length=1, max_length=100)
    room: Optional[EventSpace] = None
    capacity: Optional[int] = Field(None, ge=1)
    position_x: Optional[int] = None
    position_y: Optional[int] = None

    model_config = {"use_enum_values": True}


# ============== Guests ==============

class EventGuestBase(BaseModel):
    event_table_id: Optional[int] = None
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    nationality: Optional[str] = Field(None, max_length=50)
    guest_type: GuestType = GuestType.ADULT
    is_paid: bool = True
    is_present: bool = False
    reservation_id: Optional[int] = None
    person_index: Optional[int] = Field(None, ge=0)
    menu_item_id: Optional[int] = None
    notes: Optional[str] = None


class EventGuestCreate(EventGuestBase):
    model_config = {"use_enum_values": True}


class EventGuestUpdate(BaseModel):
    event_table_id: Optional[int] = None
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    nationality: Optional[str] = Field(None, max_length=50)
    guest_type: Optional[GuestType] = None
    is_paid: Optional[bool] = None
    is_present: Optional[bool] = None
    menu_item_id: Optional[int] = None
    notes: Optional[str] = None

    model_config = {"use_enum_values": True}


class EventGuestResponse(EventGuestBase):
    id: int
    event_id: int

    model_config = {"from_attributes": True}


class EventTableResponse(EventTableBase):
    id: int
    event_id: int
    guests: List[EventGuestResponse] = []

    model_config = {"from_attributes": True}


# ============== Menu ==============

class EventMenuItemBase(BaseModel):
    reservation_food_id: Optional[int] = None
    menu_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(1, ge=1)
    price_per_unit: Optional[Decimal] = Field(None, ge=0)
    serving_time: Optional[time] = None
    notes: Optional[str] = None


class EventMenuItemCreate(EventMenuItemBase):
    pass


class EventMenuItemUpdate(BaseModel):
    reservation_food_id: Optional[int] = None
    menu_name: Optional[str] = Field(None, min_length=1, max_length=255)
    quantity: Optional[int] = Field(None, ge=1)
    price_per_unit: Optional[Decimal] = Field(None, ge=0)
    serving_time: Optional[time] = None
    notes: Optional[str] = None


class EventMenuItemResponse(EventMenuItemBase):
    id: int
    event_id: int
    total_price: Optional[Decimal] = None

    model_config = {"from_attributes": True}


# ============== Staff assignments ==============

class EventStaffAssignmentCreate(BaseModel):
    staff_member_id: int
    role: Optional[str] = Field(None, max_length=100)
    hours_worked: Optional[Decimal] = Field(None, ge=0)
    payment_amount: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class EventStaffAssignmentResponse(BaseModel):
    id: int
    event_id: int
    staff_member_id: int
    role: Optional[str] = None
    assignment_status: str
    attendance_status: str
    hours_worked: Optional[Decimal] = None
    payment_amount: Optional[Decimal] = None
    payment_status: str
    notes: Optional[str] = None
    assigned_at: datetime
    staff_member: Optional[StaffMemberResponse] = None

    model_config = {"from_attributes": True}


# ============== Events ==============

class EventBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    event_type: EventType
    reservation_id: Optional[int] = None
    event_date: date
    event_time: Optional[time] = None
    duration_minutes: int = Field(120, ge=0)
    guests_paid: int = Field(0, ge=0)
    guests_free: int = Field(0, ge=0)
    spaces: List[EventSpace] = Field(..., min_length=1)
    organizer_name: Optional[str] = Field(None, max_length=255)
    organizer_company: Optional[str] = Field(None, max_length=255)
    contact_person: Optional[str] = Field(None, max_length=255)
    organizer_email: Optional[EmailStr] = None
    organizer_phone: Optional[str] = Field(None, max_length=50)
    coordinator_id: Optional[int] = None
    language: EventLanguage = EventLanguage.CZ
    total_price: Optional[Decimal] = Field(None, ge=0)
    deposit_amount: Optional[Decimal] = Field(None, ge=0)
    deposit_paid: bool = False
    payment_method: Optional[str] = Field(None, max_length=20)
    status: EventStatus = EventStatus.DRAFT
    notes: Optional[str] = None
    organization_plan: Optional[str] = None
    schedule: Optional[str] = None
    catering_notes: Optional[str] = None
    special_requirements: Optional[str] = None


class EventCreate(EventBase):
    """``event_time`` defaults to the configured show start."""

    model_config = {"use_enum_values": True}

    @field_validator("spaces")
    @classmethod
    def _spaces(cls, v):
        return _dedupe_spaces(v)


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    event_type: Optional[EventType] = None
    reservation_id: Optional[int] = None
    event_date: Optional[date] = None
    event_time: Optional[time] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    guests_paid: Optional[int] = Field(None, ge=0)
    guests_free: Optional[int] = Field(None, ge=0)
    spaces: Optional[List[EventSpace]] = Field(None, min_length=1)
    organizer_name: Optional[str] = Field(None, max_length=255)
    organizer_company: Optional[str] = Field(None, max_length=255)
    contact_person: Optional[str] = Field(None, max_length=255)
    organizer_email: Optional[EmailStr] = None
    organizer_phone: Optional[str] = Field(None, max_length=50)
    coordinator_id: Optional[int] = None
    language: Optional[EventLanguage] = None
    total_price: Optional[Decimal] = Field(None, ge=0)
    deposit_amount: Optional[Decimal] = Field(None, ge=0)
    deposit_paid: Optional[bool] = None
    payment_method: Optional[str] = Field(None, max_length=20)
    status: Optional[EventStatus] = None
    notes: Optional[str] = None
    organization_plan: Optional[str] = None
    schedule: Optional[str] = None
    catering_notes: Optional[str] = None
    special_requirements: Optional[str] = None

    model_config = {"use_enum_values": True}

    @field_validator("spaces")
    @classmethod
    def _spaces(cls, v):
        return _dedupe_spaces(v)


class EventResponse(EventBase):
    id: int
    event_time: time
    organizer_email: Optional[str] = None
    guests_total: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventDetail(EventResponse):
    """Event with floor plan, menu and staff stitched in."""

    tables: List[EventTableResponse] = []
    unseated_guests: List[EventGuestResponse] = []
    menu_items: List[EventMenuItemResponse] = []
    staff_assignments: List[EventStaffAssignmentResponse] = []


class EventStaffing(BaseModel):
    event_id: int
    guests: int
    requirements: List[StaffingRequirement]
    total_required: int
    assigned: int
