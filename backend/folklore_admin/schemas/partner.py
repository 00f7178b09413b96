"""Partner, voucher and commission schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from folklore_admin.models.partner import (
    CommissionStatus,
    CommissionType,
    PartnerPaymentMethod,
    PartnerType,
    VoucherType,
)


# ============== Partners ==============

class PartnerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    partner_type: PartnerType = PartnerType.OTHER
    contact_person: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    commission_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    commission_amount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_method: Optional[PartnerPaymentMethod] = None
    bank_account: Optional[str] = Field(None, max_length=100)
    ic: Optional[str] = Field(None, max_length=20)
    dic: Optional[str] = Field(None, max_length=20)
    is_active: bool = True
    notes: Optional[str] = None


class PartnerCreate(PartnerBase):
    model_config = {"use_enum_values": True}


class PartnerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    partner_type: Optional[PartnerType] = None
    contact_person: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    commission_amount: Optional[Decimal] = Field(None, ge=0)
    payment_method: Optional[PartnerPaymentMethod] = None
    bank_account: Optional[str] = Field(None, max_length=100)
    ic: Optional[str] = Field(None, max_length=20)
    dic: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = None
    notes: Optional[str] = None

    model_config = {"use_enum_values": True}


class PartnerResponse(PartnerBase):
    id: int
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PartnerSummary(BaseModel):
    partner_id: int
    name: str
    voucher_count: int
    redemption_count: int
    commission_pending: Decimal
    commission_paid: Decimal


# ============== Vouchers ==============

def _normalize_code(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if len(v) < 3:
        raise ValueError("voucher code must have at least 3 characters")
    return v


class VoucherBase(BaseModel):
    code: str = Field(..., max_length=50)
    partner_id: Optional[int] = None
    voucher_type: VoucherType
    discount_value: Decimal = Field(default=Decimal("0"), ge=0)
    max_uses: Optional[int] = Field(None, ge=1)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    is_active: bool = True
    notes: Optional[str] = None


class VoucherCreate(VoucherBase):
    model_config = {"use_enum_values": True}

    @field_validator("code")
    @classmethod
    def _code(cls, v: str) -> str:
        return _normalize_code(v)

    @model_validator(mode="after")
    def _check(self) -> "VoucherCreate":
        if self.voucher_type == VoucherType.PERCENTAGE.value and self.discount_value > 100:
            raise ValueError("percentage discount cannot exceed 100")
        if self.valid_from and self.valid_to and self.valid_to < self.valid_from:
            raise ValueError("valid_to must not be before valid_from")
        return self


class VoucherUpdate(BaseModel):
    code: Optional[str] = Field(None, max_length=50)
    partner_id: Optional[int] = None
    voucher_type: Optional[VoucherType] = None
    discount_value: Optional[Decimal] = Field(None, ge=0)
    max_uses: Optional[int] = Field(None, ge=1)
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = None

    model_config = {"use_enum_values": True}

    @field_validator("code")
    @classmethod
    def _code(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_code(v)


class VoucherResponse(VoucherBase):
    id: int
    current_uses: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VoucherValidation(BaseModel):
    code: str
    valid: bool
    reason: Optional[str] = None
    voucher: Optional[VoucherResponse] = None


class VoucherRedeemRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    original_amount: Decimal = Field(..., ge=0)
    reservation_id: Optional[int] = None
    notes: Optional[str] = None


class VoucherRedemptionResponse(BaseModel):
    id: int
    voucher_id: int
    reservation_id: Optional[int] = None
    redeemed_at: datetime
    redeemed_by: Optional[int] = None
    original_amount: Decimal
    discount_applied: Decimal
    final_amount: Decimal
    notes: Optional[str] = None
    commission_log_id: Optional[int] = None

    model_config = {"from_attributes": True}


# ============== Commission logs ==============

class CommissionLogCreate(BaseModel):
    """Manual commission. Amount is derived from the partner terms when omitted."""

    partner_id: int
    commission_type: CommissionType = CommissionType.BOOKING
    base_amount: Decimal = Field(..., ge=0)
    commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    commission_amount: Optional[Decimal] = Field(None, ge=0)
    reservation_id: Optional[int] = None
    voucher_id: Optional[int] = None
    notes: Optional[str] = None

    model_config = {"use_enum_values": True}


class CommissionLogResponse(BaseModel):
    id: int
    partner_id: int
    voucher_id: Optional[int] = None
    reservation_id: Optional[int] = None
    commission_type: CommissionType
    base_amount: Decimal
    commission_rate: Optional[Decimal] = None
    commission_amount: Decimal
    payment_status: CommissionStatus
    payment_method: Optional[str] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CommissionMarkPaid(BaseModel):
    payment_method: Optional[PartnerPaymentMethod] = None

    model_config = {"use_enum_values": True}
