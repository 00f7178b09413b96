"""Partner, voucher and commission models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from folklore_admin.db.base import Base, TimestampMixin
from folklore_admin.models.validators import non_negative, one_of, percentage


class PartnerType(str, Enum):
    HOTEL = "HOTEL"
    RECEPTION = "RECEPTION"
    DISTRIBUTOR = "DISTRIBUTOR"
    OTHER = "OTHER"


class PartnerPaymentMethod(str, Enum):
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    INVOICE = "INVOICE"


class VoucherType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"
    FREE_ENTRY = "FREE_ENTRY"


class CommissionType(str, Enum):
    VOUCHER_REDEMPTION = "VOUCHER_REDEMPTION"
    BOOKING = "BOOKING"
    EVENT = "EVENT"


class CommissionStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class Partner(Base, TimestampMixin):
    """Hotel, reception desk or distributor sending guests for a commission."""

    __tablename__ = "partners"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    partner_type: Mapped[str] = mapped_column(String(20), default=PartnerType.OTHER.value, nullable=False)
    contact_person: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    commission_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    commission_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    payment_method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    bank_account: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    ic: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    dic: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    vouchers: Mapped[List["Voucher"]] = relationship(back_populates="partner")
    commission_logs: Mapped[List["CommissionLog"]] = relationship(
        back_populates="partner", cascade="all, delete-orphan"
    )

    @validates("partner_type")
    def _validate_partner_type(self, key, value):
        return one_of(key, value, {t.value for t in PartnerType})

    @validates("payment_method")
    def _validate_payment_method(self, key, value):
        return one_of(key, value, {m.value for m in PartnerPaymentMethod})

    @validates("commission_rate")
    def _validate_rate(self, key, value):
        return percentage(key, value)

    @validates("commission_amount")
    def _validate_amount(self, key, value):
        return non_negative(key, value)


class Voucher(Base, TimestampMixin):
    """Discount code, optionally issued through a partner."""

    __tablename__ = "vouchers"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    partner_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("partners.id", ondelete="SET NULL"), nullable=True, index=True
    )
    voucher_type: Mapped[str] = mapped_column(String(20), nullable=False)
    discount_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    max_uses: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_uses: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    valid_from: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    valid_to: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    partner: Mapped[Optional["Partner"]] = relationship(back_populates="vouchers")
    redemptions: Mapped[List["VoucherRedemption"]] = relationship(
        back_populates="voucher", cascade="all, delete-orphan"
    )

    @validates("voucher_type")
    def _validate_voucher_type(self, key, value):
        return one_of(key, value, {t.value for t in VoucherType})

    @validates("discount_value", "current_uses")
    def _validate_non_negative(self, key, value):
        return non_negative(key, value)

    @validates("code")
    def _normalize_code(self, key, value):
        return value.strip().upper() if value else value

    @property
    def is_exhausted(self) -> bool:
        return self.max_uses is not None and self.current_uses >= self.max_uses

    def is_valid_on(self, day: date) -> bool:
        if self.valid_from and day < self.valid_from:
            return False
        if self.valid_to and day > self.valid_to:
            return False
        return True


class VoucherRedemption(Base):
    """One use of a voucher."""

    __tablename__ = "voucher_redemptions"

    id: Mapped[int] = mapped_column(primary_key=True)
    voucher_id: Mapped[int] = mapped_column(
        ForeignKey("vouchers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True, index=True
    )
    redeemed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    redeemed_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    original_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discount_applied: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    final_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    voucher: Mapped["Voucher"] = relationship(back_populates="redemptions")


class CommissionLog(Base, TimestampMixin):
    """Commission owed to a partner."""

    __tablename__ = "commission_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    partner_id: Mapped[int] = mapped_column(
        ForeignKey("partners.id", ondelete="CASCADE"), nullable=False, index=True
    )
    voucher_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("vouchers.id", ondelete="SET NULL"), nullable=True
    )
    reservation_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True
    )
    commission_type: Mapped[str] = mapped_column(String(30), nullable=False)
    base_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    commission_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    commission_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20), default=CommissionStatus.PENDING.value, nullable=False, index=True
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    partner: Mapped["Partner"] = relationship(back_populates="commission_logs")

    @validates("commission_type")
    def _validate_commission_type(self, key, value):
        return one_of(key, value, {t.value for t in CommissionType})

    @validates("payment_status")
    def _validate_payment_status(self, key, value):
        return one_of(key, value, {s.value for s in CommissionStatus})

    @validates("base_amount", "commission_amount")
    def _validate_amount(self, key, value):
        return non_negative(key, value)
