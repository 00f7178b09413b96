"""Cashbox and cash movement schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from folklore_admin.models.cashbox import CashCategory, CashMovementType, CashPaymentMethod, Currency


# ============== Cash movements (ledger entries) ==============

class CashMovementBase(BaseModel):
    movement_type: CashMovementType
    category: CashCategory = CashCategory.OTHER
    amount: Decimal = Field(..., gt=0)
    description: Optional[str] = Field(None, max_length=500)
    payment_method: Optional[CashPaymentMethod] = None
    reference_id: Optional[str] = Field(None, max_length=100)
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    entry_date: Optional[date] = None


class CashboxMovementCreate(CashMovementBase):
    """Movement posted into a specific cashbox; currency comes from the cashbox."""

    currency: Optional[Currency] = None

    model_config = {"use_enum_values": True}


class CashEntryCreate(CashMovementBase):
    """Ledger entry, optionally attached to a cashbox."""

    cashbox_id: Optional[int] = None
    currency: Currency = Currency.CZK

    model_config = {"use_enum_values": True}


class CashMovementResponse(CashMovementBase):
    id: int
    cashbox_id: Optional[int] = None
    currency: Currency
    entry_date: date
    user_id: Optional[int] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrencyTotals(BaseModel):
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    net: Decimal = Decimal("0")


class CashSummary(BaseModel):
    """Totals per currency."""

    totals: Dict[str, CurrencyTotals]
    entry_count: int


class FinancialResult(CashSummary):
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None


# ============== Cashboxes ==============

class CashboxBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    currency: Currency = Currency.CZK
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    notes: Optional[str] = None


class CashboxCreate(CashboxBase):
    initial_balance: Decimal = Field(default=Decimal("0"), ge=0)

    model_config = {"use_enum_values": True}


class CashboxUpdate(BaseModel):
    """Balance and currency change only through movements and resets."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    reservation_id: Optional[int] = None
    event_id: Optional[int] = None
    notes: Optional[str] = None


class CashboxResponse(CashboxBase):
    id: int
    initial_balance: Decimal
    current_balance: Decimal
    opened_at: datetime
    closed_at: Optional[datetime] = None
    is_active: bool
    user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CashboxDetail(CashboxResponse):
    movements: List[CashMovementResponse] = []


class CashboxCloseRequest(BaseModel):
    actual_cash: Decimal = Field(..., ge=0)
    notes: Optional[str] = None


class CashboxClosureResponse(BaseModel):
    id: int
    cashbox_id: int
    expected_cash: Decimal
    actual_cash: Decimal
    difference: Decimal
    total_income: Decimal
    total_expense: Decimal
    net_result: Decimal
    notes: Optional[str] = None
    closed_by: Optional[int] = None
    closed_at: datetime

    model_config = {"from_attributes": True}
