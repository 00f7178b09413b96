"""Staff member, attendance and staffing formula routes."""

import io
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import StreamingResponse

from folklore_admin.api.deps import bad_request, conflict, get_or_404
from folklore_admin.core.clock import local_today
from folklore_admin.core.rate_limit import limiter
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.staff import StaffAttendance, StaffingFormula, StaffMember
from folklore_admin.schemas.staff import (
    StaffAttendanceCreate,
    StaffAttendanceResponse,
    StaffAttendanceUpdate,
    StaffingCalculation,
    StaffingFormulaCreate,
    StaffingFormulaResponse,
    StaffingFormulaUpdate,
    StaffMemberCreate,
    StaffMemberResponse,
    StaffMemberUpdate,
)
from folklore_admin.services.export_service import XLSX_MEDIA_TYPE, staff_workbook
from folklore_admin.services.staff_service import AttendanceError, AttendanceLockedError, StaffService

logger = logging.getLogger(__name__)

router = APIRouter()
attendance_router = APIRouter()
formulas_router = APIRouter()


# ============== Staff members ==============

def _check_email(db, email: Optional[str], exclude_id: Optional[int] = None) -> None:
    if not email:
        return
    query = db.query(StaffMember).filter(StaffMember.email == email)
    if exclude_id:
        query = query.filter(StaffMember.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Email {email} is already used")


@router.get("/", response_model=List[StaffMemberResponse])
def list_staff(
    db: DbSession,
    current_user: CurrentUser,
    active: Optional[bool] = Query(None),
    role: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
):
    query = db.query(StaffMember)
    if active is not None:
        query = query.filter(StaffMember.is_active == active)
    if role:
        query = query.filter(StaffMember.role == role)
    if search:
        term = f"%{search}%"
        query = query.filter(StaffMember.first_name.ilike(term) | StaffMember.last_name.ilike(term))
    return query.order_by(StaffMember.last_name, StaffMember.first_name).all()


@router.get("/export")
@limiter.limit("10/minute")
def export_staff(request: Request, db: DbSession, current_user: RequireManager):
    """Download the staff list as an Excel workbook."""
    members = db.query(StaffMember).order_by(StaffMember.last_name, StaffMember.first_name).all()
    content = staff_workbook(members)
    filename = f"personal_{local_today().isoformat()}.xlsx"
    logger.info(f"Staff export ({len(members)} rows) by {current_user.email}")
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/{member_id}", response_model=StaffMemberResponse)
def get_staff_member(member_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, StaffMember, member_id, "Staff member")


@router.get("/{member_id}/attendance", response_model=List[StaffAttendanceResponse])
def staff_member_attendance(member_id: int, db: DbSession, current_user: CurrentUser):
    member = get_or_404(db, StaffMember, member_id, "Staff member")
    return member.attendance


@router.post("/", response_model=StaffMemberResponse, status_code=status.HTTP_201_CREATED)
def create_staff_member(data: StaffMemberCreate, db: DbSession, current_user: RequireManager):
    _check_email(db, data.email)
    member = StaffMember(**data.model_dump())
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


@router.put("/{member_id}", response_model=StaffMemberResponse)
def update_staff_member(member_id: int, data: StaffMemberUpdate, db: DbSession, current_user: RequireManager):
    member = get_or_404(db, StaffMember, member_id, "Staff member")
    update_data = data.model_dump(exclude_unset=True)
    _check_email(db, update_data.get("email"), exclude_id=member.id)
    member.apply_changes(update_data)
    db.commit()
    db.refresh(member)
    return member


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff_member(member_id: int, db: DbSession, current_user: RequireManager):
    member = get_or_404(db, StaffMember, member_id, "Staff member")
    db.delete(member)
    db.commit()
    logger.info(f"Staff member {member_id} deleted by {current_user.email}")


# ============== Attendance ==============

@attendance_router.get("/", response_model=List[StaffAttendanceResponse])
def list_attendance(
    db: DbSession,
    current_user: CurrentUser,
    staff_member_id: Optional[int] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    is_paid: Optional[bool] = Query(None),
):
    query = db.query(StaffAttendance)
    if staff_member_id:
        query = query.filter(StaffAttendance.staff_member_id == staff_member_id)
    if date_from:
        query = query.filter(StaffAttendance.attendance_date >= date_from)
    if date_to:
        query = query.filter(StaffAttendance.attendance_date <= date_to)
    if is_paid is not None:
        query = query.filter(StaffAttendance.is_paid == is_paid)
    return query.order_by(StaffAttendance.attendance_date.desc(), StaffAttendance.id.desc()).all()


@attendance_router.get("/{record_id}", response_model=StaffAttendanceResponse)
def get_attendance(record_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, StaffAttendance, record_id, "Attendance record")


@attendance_router.post("/", response_model=StaffAttendanceResponse, status_code=status.HTTP_201_CREATED)
def create_attendance(data: StaffAttendanceCreate, db: DbSession, current_user: RequireManager):
    member = get_or_404(db, StaffMember, data.staff_member_id, "Staff member")
    try:
        record = StaffService(db).record_attendance(member, data.model_dump())
    except AttendanceError as e:
        raise bad_request(e)
    db.commit()
    db.refresh(record)
    return record


@attendance_router.put("/{record_id}", response_model=StaffAttendanceResponse)
def update_attendance(record_id: int, data: StaffAttendanceUpdate, db: DbSession, current_user: RequireManager):
    record = get_or_404(db, StaffAttendance, record_id, "Attendance record")
    try:
        StaffService(db).update_attendance(record, data.model_dump(exclude_unset=True))
    except AttendanceLockedError as e:
        raise conflict(e)
    except AttendanceError as e:
        raise bad_request(e)
    db.commit()
    db.refresh(record)
    return record


@attendance_router.post("/{record_id}/mark-paid", response_model=StaffAttendanceResponse)
def mark_attendance_paid(record_id: int, db: DbSession, current_user: RequireManager):
    record = get_or_404(db, StaffAttendance, record_id, "Attendance record")
    try:
        StaffService(db).mark_paid(record)
    except AttendanceError as e:
        raise conflict(e)
    db.commit()
    db.refresh(record)
    return record


@attendance_router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attendance(record_id: int, db: DbSession, current_user: RequireManager):
    record = get_or_404(db, StaffAttendance, record_id, "Attendance record")
    db.delete(record)
    db.commit()


# ============== Staffing formulas ==============

@formulas_router.get("/", response_model=List[StaffingFormulaResponse])
def list_formulas(db: DbSession, current_user: CurrentUser):
    return db.query(StaffingFormula).order_by(StaffingFormula.id).all()


@formulas_router.get("/calculate", response_model=StaffingCalculation)
def calculate_staffing(db: DbSession, current_user: CurrentUser, guests: int = Query(..., ge=0)):
    """Staff needed per category for a guest count."""
    return StaffService(db).calculate_staffing(guests)


@formulas_router.get("/{formula_id}", response_model=StaffingFormulaResponse)
def get_formula(formula_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, StaffingFormula, formula_id, "Staffing formula")


@formulas_router.post("/", response_model=StaffingFormulaResponse, status_code=status.HTTP_201_CREATED)
def create_formula(data: StaffingFormulaCreate, db: DbSession, current_user: RequireManager):
    formula = StaffingFormula(**data.model_dump())
    db.add(formula)
    db.commit()
    db.refresh(formula)
    return formula


@formulas_router.put("/{formula_id}", response_model=StaffingFormulaResponse)
def update_formula(formula_id: int, data: StaffingFormulaUpdate, db: DbSession, current_user: RequireManager):
    formula = get_or_404(db, StaffingFormula, formula_id, "Staffing formula")
    formula.apply_changes(data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(formula)
    return formula


@formulas_router.delete("/{formula_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_formula(formula_id: int, db: DbSession, current_user: RequireManager):
    formula = get_or_404(db, StaffingFormula, formula_id, "Staffing formula")
    db.delete(formula)
    db.commit()
