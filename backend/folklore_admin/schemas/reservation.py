"""Reservation and payment schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from folklore_admin.models.reservation import PaymentStatus, PersonType, ReservationStatus


# ============== Persons ==============

class ReservationPersonBase(BaseModel):
    person_type: PersonType
    menu: Optional[str] = Field(None, max_length=255)
    price: Decimal = Field(default=Decimal("0"), ge=0)


class ReservationPersonCreate(ReservationPersonBase):
    model_config = {"use_enum_values": True}


class ReservationPersonResponse(ReservationPersonBase):
    id: int

    model_config = {"from_attributes": True}


# ============== Reservations ==============

class ReservationBase(BaseModel):
    """Fields shared by create and response."""

    reservation_date: date
    status: ReservationStatus = ReservationStatus.RECEIVED

    contact_name: str = Field(..., min_length=1, max_length=255)
    contact_email: EmailStr
    contact_phone: str = Field(..., min_length=1, max_length=50)
    contact_nationality: str = Field(..., min_length=1, max_length=50)
    client_come_from: Optional[str] = None
    contact_note: Optional[str] = None

    invoice_same_as_contact: bool = True
    invoice_name: Optional[str] = None
    invoice_company: Optional[str] = None
    invoice_ic: Optional[str] = Field(None, max_length=20)
    invoice_dic: Optional[str] = Field(None, max_length=20)
    invoice_email: Optional[EmailStr] = None
    invoice_phone: Optional[str] = None

    transfer_selected: bool = False
    transfer_count: Optional[int] = Field(None, ge=0)
    transfer_address: Optional[str] = None

    agreement: bool = False


class ReservationCreate(ReservationBase):
    """Reservation creation schema."""

    persons: List[ReservationPersonCreate] = Field(..., min_length=1)

    model_config = {"use_enum_values": True}

    @field_validator("agreement")
    @classmethod
    def _agreement_required(cls, v: bool) -> bool:
        if not v:
            raise ValueError("the customer must accept the terms")
        return v

    @model_validator(mode="after")
    def _check_transfer(self) -> "ReservationCreate":
        if self.transfer_selected:
            if not self.transfer_count or self.transfer_count < 1:
                raise ValueError("transfer_count must be at least 1 when a transfer is selected")
            if not (self.transfer_address or "").strip():
                raise ValueError("transfer_address is required when a transfer is selected")
        return self


class ReservationUpdate(BaseModel):
    """Partial reservation update. ``persons`` replaces the whole list."""

    reservation_date: Optional[date] = None
    status: Optional[ReservationStatus] = None
    contact_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, min_length=1, max_length=50)
    contact_nationality: Optional[str] = Field(None, min_length=1, max_length=50)
    client_come_from: Optional[str] = None
    contact_note: Optional[str] = None
    invoice_same_as_contact: Optional[bool] = None
    invoice_name: Optional[str] = None
    invoice_company: Optional[str] = None
    invoice_ic: Optional[str] = Field(None, max_length=20)
    invoice_dic: Optional[str] = Field(None, max_length=20)
    invoice_email: Optional[EmailStr] = None
    invoice_phone: Optional[str] = None
    transfer_selected: Optional[bool] = None
    transfer_count: Optional[int] = Field(None, ge=0)
    transfer_address: Optional[str] = None
    persons: Optional[List[ReservationPersonCreate]] = Field(None, min_length=1)

    model_config = {"use_enum_values": True}


class PaymentResponse(BaseModel):
    """Payment response schema."""

    id: int
    transaction_id: str
    status: PaymentStatus
    reservation_id: Optional[int] = None
    reservation_reference: str
    amount: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ReservationResponse(ReservationBase):
    """Reservation with persons and payments."""

    id: int
    contact_email: str
    invoice_email: Optional[str] = None
    persons: List[ReservationPersonResponse] = []
    payments: List[PaymentResponse] = []
    total_price: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ============== Payments ==============

class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus

    model_config = {"use_enum_values": True}


class PaymentLinkResponse(BaseModel):
    payment: PaymentResponse
    payment_url: str
    email_sent: bool
    reservation_status: ReservationStatus
