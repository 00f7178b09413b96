"""Voucher Service - voucher validation, redemption and partner commissions.

Money is rounded half-up to two decimals at every step:

* PERCENTAGE discount: amount * value / 100
* FIXED_AMOUNT discount: min(value, amount)
* FREE_ENTRY discount: the whole amount
* commission: final amount * partner rate / 100 + partner fixed amount
"""

import logging
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from folklore_admin.core.clock import local_today
from folklore_admin.models.partner import (
    CommissionLog,
    CommissionStatus,
    CommissionType,
    Partner,
    Voucher,
    VoucherRedemption,
    VoucherType,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_discount(voucher_type: str, discount_value, amount) -> Decimal:
    """Discount granted by a voucher on ``amount``; never more than the amount."""
    amount = Decimal(str(amount))
    value = Decimal(str(discount_value))
    if voucher_type == VoucherType.PERCENTAGE.value:
        discount = amount * value / Decimal("100")
    elif voucher_type == VoucherType.FIXED_AMOUNT.value:
        discount = min(value, amount)
    elif voucher_type == VoucherType.FREE_ENTRY.value:
        discount = amount
    else:
        raise ValueError(f"Unknown voucher type {voucher_type!r}")
    return money(min(discount, amount))


def compute_commission(base_amount, rate, fixed_amount) -> Decimal:
    base = Decimal(str(base_amount))
    return money(base * Decimal(str(rate or 0)) / Decimal("100") + Decimal(str(fixed_amount or 0)))


class VoucherRedemptionError(Exception):
    """Raised when a voucher cannot be used."""

    def __init__(self, code: str, reason: str):
        self.code = code
        self.reason = reason
        super().__init__(f"Voucher {code}: {reason}")


class CommissionStateError(Exception):
    """Raised when a commission status change is not allowed."""


class VoucherService:
    """Service for vouchers, redemptions and partner commissions."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_code(self, code: str) -> Optional[Voucher]:
        return self.db.query(Voucher).filter(Voucher.code == code.strip().upper()).first()

    def rejection_reason(self, voucher: Voucher, day: date) -> Optional[str]:
        if not voucher.is_active:
            return "inactive"
        if not voucher.is_valid_on(day):
            return "outside validity period"
        if voucher.is_exhausted:
            return "usage limit reached"
        return None

    def validate(self, code: str, day: Optional[date] = None) -> Dict[str, Any]:
        day = day or local_today()
        voucher = self.get_by_code(code)
        if voucher is None:
            return {"code": code.strip().upper(), "valid": False, "reason": "not found", "voucher": None}
        reason = self.rejection_reason(voucher, day)
        return {"code": voucher.code, "valid": reason is None, "reason": reason, "voucher": voucher}

    def redeem(
        self,
        code: str,
        original_amount,
        reservation_id: Optional[int] = None,
        notes: Optional[str] = None,
        redeemed_by: Optional[int] = None,
        day: Optional[date] = None,
    ) -> Tuple[VoucherRedemption, Optional[CommissionLog]]:
        """Use a voucher once, writing the redemption and the partner commission."""
        day = day or local_today()
        voucher = self.get_by_code(code)
        if voucher is None:
            raise LookupError(f"Voucher {code} not found")
        reason = self.rejection_reason(voucher, day)
        if reason:
            raise VoucherRedemptionError(voucher.code, reason)

        original = money(original_amount)
        discount = compute_discount(voucher.voucher_type, voucher.discount_value, original)
        final = money(original - discount)

        redemption = VoucherRedemption(
            voucher=voucher,
            reservation_id=reservation_id,
            redeemed_by=redeemed_by,
            original_amount=original,
            discount_applied=discount,
            final_amount=final,
            notes=notes,
        )
        self.db.add(redemption)
        voucher.current_uses = (voucher.current_uses or 0) + 1

        commission = None
        partner = voucher.partner
        if partner is not None:
            commission = CommissionLog(
                partner=partner,
                voucher_id=voucher.id,
                reservation_id=reservation_id,
                commission_type=CommissionType.VOUCHER_REDEMPTION.value,
                base_amount=final,
                commission_rate=partner.commission_rate,
                commission_amount=compute_commission(
                    final, partner.commission_rate, partner.commission_amount
                ),
                payment_status=CommissionStatus.PENDING.value,
            )
            self.db.add(commission)

        self.db.flush()
        logger.info(
            f"Voucher {voucher.code} redeemed ({voucher.current_uses}/{voucher.max_uses or '-'}): "
            f"{original} - {discount} = {final}"
        )
        return redemption, commission

    # ===== COMMISSIONS =====

    def create_commission(self, partner: Partner, data: Dict[str, Any]) -> CommissionLog:
        rate = data.get("commission_rate")
        if rate is None:
            rate = partner.commission_rate
        amount = data.get("commission_amount")
        if amount is None:
            amount = compute_commission(data["base_amount"], rate, partner.commission_amount)

        log = CommissionLog(
            partner=partner,
            voucher_id=data.get("voucher_id"),
            reservation_id=data.get("reservation_id"),
            commission_type=data.get("commission_type", CommissionType.BOOKING.value),
            base_amount=money(data["base_amount"]),
            commission_rate=rate,
            commission_amount=money(amount),
            payment_status=CommissionStatus.PENDING.value,
            notes=data.get("notes"),
        )
        self.db.add(log)
        self.db.flush()
        return log

    def mark_paid(self, log: CommissionLog, payment_method: Optional[str] = None) -> CommissionLog:
        if log.payment_status != CommissionStatus.PENDING.value:
            raise CommissionStateError(f"Commission {log.id} is already {log.payment_status}")
        log.payment_status = CommissionStatus.PAID.value
        log.payment_method = payment_method or log.partner.payment_method
        log.paid_at = datetime.now(timezone.utc)
        self.db.flush()
        logger.info(f"Commission {log.id} paid to partner {log.partner_id}: {log.commission_amount}")
        return log

    def cancel(self, log: CommissionLog) -> CommissionLog:
        if log.payment_status == CommissionStatus.PAID.value:
            raise CommissionStateError(f"Commission {log.id} is already paid")
        log.payment_status = CommissionStatus.CANCELLED.value
        self.db.flush()
        return log

    def partner_summary(self, partner: Partner) -> Dict[str, Any]:
        def commission_total(status: str) -> Decimal:
            total = (
                self.db.query(func.coalesce(func.sum(CommissionLog.commission_amount), 0))
                .filter(CommissionLog.partner_id == partner.id, CommissionLog.payment_status == status)
                .scalar()
            )
            return money(total or 0)

        voucher_count = (
            self.db.query(func.count(Voucher.id)).filter(Voucher.partner_id == partner.id).scalar()
        )
        redemption_count = (
            self.db.query(func.count(VoucherRedemption.id))
            .join(Voucher, VoucherRedemption.voucher_id == Voucher.id)
            .filter(Voucher.partner_id == partner.id)
            .scalar()
        )
        return {
            "partner_id": partner.id,
            "name": partner.name,
            "voucher_count": voucher_count or 0,
            "redemption_count": redemption_count or 0,
            "commission_pending": commission_total(CommissionStatus.PENDING.value),
            "commission_paid": commission_total(CommissionStatus.PAID.value),
        }
