"""Partner, voucher and commission routes."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from folklore_admin.api.deps import conflict, get_or_404
from folklore_admin.core.rate_limit import limiter
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.partner import CommissionLog, Partner, Voucher, VoucherType
from folklore_admin.schemas.partner import (
    CommissionLogCreate,
    CommissionLogResponse,
    CommissionMarkPaid,
    PartnerCreate,
    PartnerResponse,
    PartnerSummary,
    PartnerUpdate,
    VoucherCreate,
    VoucherRedeemRequest,
    VoucherRedemptionResponse,
    VoucherResponse,
    VoucherUpdate,
    VoucherValidation,
)
from folklore_admin.services.voucher_service import (
    CommissionStateError,
    VoucherRedemptionError,
    VoucherService,
)

logger = logging.getLogger(__name__)

router = APIRouter()
vouchers_router = APIRouter()
commissions_router = APIRouter()


# ============== Partners ==============

@router.get("/", response_model=List[PartnerResponse])
def list_partners(
    db: DbSession,
    current_user: CurrentUser,
    active: Optional[bool] = Query(None),
    partner_type: Optional[str] = Query(None),
):
    query = db.query(Partner)
    if active is not None:
        query = query.filter(Partner.is_active == active)
    if partner_type:
        query = query.filter(Partner.partner_type == partner_type)
    return query.order_by(Partner.name).all()


@router.get("/{partner_id}", response_model=PartnerResponse)
def get_partner(partner_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Partner, partner_id, "Partner")


@router.get("/{partner_id}/summary", response_model=PartnerSummary)
def partner_summary(partner_id: int, db: DbSession, current_user: CurrentUser):
    partner = get_or_404(db, Partner, partner_id, "Partner")
    return VoucherService(db).partner_summary(partner)


@router.post("/", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
def create_partner(data: PartnerCreate, db: DbSession, current_user: RequireManager):
    partner = Partner(**data.model_dump())
    db.add(partner)
    db.commit()
    db.refresh(partner)
    return partner


@router.put("/{partner_id}", response_model=PartnerResponse)
def update_partner(partner_id: int, data: PartnerUpdate, db: DbSession, current_user: RequireManager):
    partner = get_or_404(db, Partner, partner_id, "Partner")
    partner.apply_changes(data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(partner)
    return partner


@router.delete("/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_partner(partner_id: int, db: DbSession, current_user: RequireManager):
    """Delete a partner with its commissions; its vouchers stay without a partner."""
    partner = get_or_404(db, Partner, partner_id, "Partner")
    db.delete(partner)
    db.commit()
    logger.info(f"Partner {partner_id} deleted by {current_user.email}")


# ============== Vouchers ==============

def _check_code(db, code: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Voucher).filter(Voucher.code == code)
    if exclude_id:
        query = query.filter(Voucher.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Voucher code {code} already exists")


def _check_voucher(voucher: Voucher) -> None:
    if voucher.voucher_type == VoucherType.PERCENTAGE.value and voucher.discount_value > 100:
        raise HTTPException(
            status_code=422,
            detail="percentage discount cannot exceed 100",
        )
    if voucher.valid_from and voucher.valid_to and voucher.valid_to < voucher.valid_from:
        raise HTTPException(
            status_code=422,
            detail="valid_to must not be before valid_from",
        )


@vouchers_router.get("/", response_model=List[VoucherResponse])
def list_vouchers(
    db: DbSession,
    current_user: CurrentUser,
    partner_id: Optional[int] = Query(None),
    active: Optional[bool] = Query(None),
):
    query = db.query(Voucher)
    if partner_id:
        query = query.filter(Voucher.partner_id == partner_id)
    if active is not None:
        query = query.filter(Voucher.is_active == active)
    return query.order_by(Voucher.code).all()


@vouchers_router.get("/validate/{code}", response_model=VoucherValidation)
@limiter.limit("30/minute")
def validate_voucher(
    request: Request, code: str, db: DbSession, current_user: CurrentUser, on: Optional[date] = Query(None)
):
    """Check whether a code can be used on a day, today by default."""
    return VoucherService(db).validate(code, on)


@vouchers_router.post("/redeem", response_model=VoucherRedemptionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def redeem_voucher(request: Request, data: VoucherRedeemRequest, db: DbSession, current_user: RequireManager):
    try:
        redemption, commission = VoucherService(db).redeem(
            data.code,
            data.original_amount,
            reservation_id=data.reservation_id,
            notes=data.notes,
            redeemed_by=current_user.id,
        )
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except VoucherRedemptionError as e:
        raise conflict(e)
    db.commit()
    db.refresh(redemption)
    return VoucherRedemptionResponse.model_validate(redemption).model_copy(
        update={"commission_log_id": commission.id if commission else None}
    )


@vouchers_router.get("/{voucher_id}", response_model=VoucherResponse)
def get_voucher(voucher_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Voucher, voucher_id, "Voucher")


@vouchers_router.post("/", response_model=VoucherResponse, status_code=status.HTTP_201_CREATED)
def create_voucher(data: VoucherCreate, db: DbSession, current_user: RequireManager):
    _check_code(db, data.code)
    if data.partner_id:
        get_or_404(db, Partner, data.partner_id, "Partner")
    voucher = Voucher(**data.model_dump())
    db.add(voucher)
    db.commit()
    db.refresh(voucher)
    return voucher


@vouchers_router.put("/{voucher_id}", response_model=VoucherResponse)
def update_voucher(voucher_id: int, data: VoucherUpdate, db: DbSession, current_user: RequireManager):
    voucher = get_or_404(db, Voucher, voucher_id, "Voucher")
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("code"):
        _check_code(db, update_data["code"], exclude_id=voucher.id)
    if update_data.get("partner_id"):
        get_or_404(db, Partner, update_data["partner_id"], "Partner")
    voucher.apply_changes(update_data)
    _check_voucher(voucher)
    db.commit()
    db.refresh(voucher)
    return voucher


@vouchers_router.delete("/{voucher_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_voucher(voucher_id: int, db: DbSession, current_user: RequireManager):
    voucher = get_or_404(db, Voucher, voucher_id, "Voucher")
    db.delete(voucher)
    db.commit()


# ============== Commissions ==============

@commissions_router.get("/", response_model=List[CommissionLogResponse])
def list_commissions(
    db: DbSession,
    current_user: CurrentUser,
    partner_id: Optional[int] = Query(None),
    payment_status: Optional[str] = Query(None),
):
    query = db.query(CommissionLog)
    if partner_id:
        query = query.filter(CommissionLog.partner_id == partner_id)
    if payment_status:
        query = query.filter(CommissionLog.payment_status == payment_status)
    return query.order_by(CommissionLog.created_at.desc(), CommissionLog.id.desc()).all()


@commissions_router.get("/{log_id}", response_model=CommissionLogResponse)
def get_commission(log_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, CommissionLog, log_id, "Commission")


@commissions_router.post("/", response_model=CommissionLogResponse, status_code=status.HTTP_201_CREATED)
def create_commission(data: CommissionLogCreate, db: DbSession, current_user: RequireManager):
    partner = get_or_404(db, Partner, data.partner_id, "Partner")
    log = VoucherService(db).create_commission(partner, data.model_dump())
    db.commit()
    db.refresh(log)
    return log


@commissions_router.post("/{log_id}/mark-paid", response_model=CommissionLogResponse)
def mark_commission_paid(
    log_id: int, db: DbSession, current_user: RequireManager, data: Optional[CommissionMarkPaid] = None
):
    log = get_or_404(db, CommissionLog, log_id, "Commission")
    try:
        VoucherService(db).mark_paid(log, data.payment_method if data else None)
    except CommissionStateError as e:
        raise conflict(e)
    db.commit()
    db.refresh(log)
    return log


@commissions_router.post("/{log_id}/cancel", response_model=CommissionLogResponse)
def cancel_commission(log_id: int, db: DbSession, current_user: RequireManager):
    log = get_or_404(db, CommissionLog, log_id, "Commission")
    try:
        VoucherService(db).cancel(log)
    except CommissionStateError as e:
        raise conflict(e)
    db.commit()
    db.refresh(log)
    return log
