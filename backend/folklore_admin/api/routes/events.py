"""Event routes: events, floor plan, guests, menu and staff assignments."""

import logging
from datetime import date
from typing import List, Optional, Type

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy.orm import Session

from folklore_admin.api.deps import bad_request, conflict, get_or_404
from folklore_admin.core.rbac import CurrentUser, RequireManager
from folklore_admin.db.session import DbSession
from folklore_admin.models.event import (
    Event,
    EventGuest,
    EventMenuItem,
    EventStaffAssignment,
    EventTable,
)
from folklore_admin.models.reservation import Reservation
from folklore_admin.schemas.cashbox import FinancialResult
from folklore_admin.schemas.event import (
    EventCreate,
    EventDetail,
    EventGuestCreate,
    EventGuestResponse,
    EventGuestUpdate,
    EventMenuItemCreate,
    EventMenuItemResponse,
    EventMenuItemUpdate,
    EventStaffAssignmentCreate,
    EventStaffAssignmentResponse,
    EventStaffing,
    EventTableCreate,
    EventTableResponse,
    EventTableUpdate,
    EventUpdate,
)
from folklore_admin.services.cashbox_service import CashboxService
from folklore_admin.services.event_service import (
    DuplicateAssignmentError,
    EventRuleError,
    EventService,
    TableCapacityError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _event_child(db: Session, model: Type, event_id: int, child_id: int, label: str):
    """Load a sub-resource and check it belongs to the event."""
    get_or_404(db, Event, event_id, "Event")
    child = db.get(model, child_id)
    if child is None or child.event_id != event_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return child


# ============== Events ==============

@router.get("/", response_model=List[EventDetail])
def list_events(
    db: DbSession,
    current_user: CurrentUser,
    status_filter: Optional[str] = Query(None, alias="status"),
    event_type: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
):
    query = db.query(Event)
    if status_filter:
        query = query.filter(Event.status == status_filter)
    if event_type:
        query = query.filter(Event.event_type == event_type)
    if date_from:
        query = query.filter(Event.event_date >= date_from)
    if date_to:
        query = query.filter(Event.event_date <= date_to)
    return query.order_by(Event.event_date, Event.event_time, Event.id).all()


@router.post("/from-reservation/{reservation_id}", response_model=EventDetail, status_code=status.HTTP_201_CREATED)
def create_event_from_reservation(reservation_id: int, db: DbSession, current_user: RequireManager):
    """Plan a folklore show seating every person of the reservation."""
    reservation = get_or_404(db, Reservation, reservation_id, "Reservation")
    event = EventService(db).from_reservation(reservation)
    db.commit()
    db.refresh(event)
    return event


@router.get("/{event_id}", response_model=EventDetail)
def get_event(event_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Event, event_id, "Event")


@router.post("/", response_model=EventDetail, status_code=status.HTTP_201_CREATED)
def create_event(data: EventCreate, db: DbSession, current_user: RequireManager):
    if data.reservation_id:
        get_or_404(db, Reservation, data.reservation_id, "Reservation")
    event = EventService(db).create(data.model_dump())
    db.commit()
    db.refresh(event)
    return event


@router.put("/{event_id}", response_model=EventDetail)
def update_event(event_id: int, data: EventUpdate, db: DbSession, current_user: RequireManager):
    event = get_or_404(db, Event, event_id, "Event")
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("reservation_id"):
        get_or_404(db, Reservation, update_data["reservation_id"], "Reservation")
    try:
        EventService(db).update(event, update_data)
    except EventRuleError as e:
        raise bad_request(e)
    db.commit()
    db.refresh(event)
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, db: DbSession, current_user: RequireManager):
    event = get_or_404(db, Event, event_id, "Event")
    db.delete(event)
    db.commit()
    logger.info(f"Event {event_id} deleted by {current_user.email}")


@router.get("/{event_id}/staffing", response_model=EventStaffing)
def event_staffing(event_id: int, db: DbSession, current_user: CurrentUser):
    event = get_or_404(db, Event, event_id, "Event")
    return EventService(db).staffing(event)


@router.get("/{event_id}/financial-result", response_model=FinancialResult)
def event_financial_result(event_id: int, db: DbSession, current_user: CurrentUser):
    get_or_404(db, Event, event_id, "Event")
    return CashboxService(db).financial_result(event_id=event_id)


# ============== Tables ==============

@router.get("/{event_id}/tables", response_model=List[EventTableResponse])
def list_tables(event_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Event, event_id, "Event").tables


@router.post("/{event_id}/tables", response_model=EventTableResponse, status_code=status.HTTP_201_CREATED)
def create_table(event_id: int, data: EventTableCreate, db: DbSession, current_user: RequireManager):
    event = get_or_404(db, Event, event_id, "Event")
    try:
        table = EventService(db).add_table(event, data.model_dump())
    except EventRuleError as e:
        raise bad_request(e)
    db.commit()
    db.refresh(table)
    return table


@router.put("/{event_id}/tables/{table_id}", response_model=EventTableResponse)
def update_table(
    event_id: int, table_id: int, data: EventTableUpdate, db: DbSession, current_user: RequireManager
):
    table = _event_child(db, EventTable, event_id, table_id, "Table")
    try:
        EventService(db).update_table(table, data.model_dump(exclude_unset=True))
    except EventRuleError as e:
        raise bad_request(e)
    except TableCapacityError as e:
        raise conflict(e)
    db.commit()
    db.refresh(table)
    return table


@router.delete("/{event_id}/tables/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(event_id: int, table_id: int, db: DbSession, current_user: RequireManager):
    table = _event_child(db, EventTable, event_id, table_id, "Table")
    EventService(db).delete_table(table)
    db.commit()


# ============== Guests ==============

@router.get("/{event_id}/guests", response_model=List[EventGuestResponse])
def list_guests(event_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Event, event_id, "Event").guests


@router.post("/{event_id}/guests", response_model=EventGuestResponse, status_code=status.HTTP_201_CREATED)
def create_guest(event_id: int, data: EventGuestCreate, db: DbSession, current_user: RequireManager):
    event = get_or_404(db, Event, event_id, "Event")
    try:
        guest = EventService(db).add_guest(event, data.model_dump())
    except EventRuleError as e:
        raise bad_request(e)
    except TableCapacityError as e:
        raise conflict(e)
    db.commit()
    db.refresh(guest)
    return guest


@router.put("/{event_id}/guests/{guest_id}", response_model=EventGuestResponse)
def update_guest(
    event_id: int, guest_id: int, data: EventGuestUpdate, db: DbSession, current_user: RequireManager
):
    guest = _event_child(db, EventGuest, event_id, guest_id, "Guest")
    try:
        EventService(db).update_guest(guest, data.model_dump(exclude_unset=True))
    except EventRuleError as e:
        raise bad_request(e)
    except TableCapacityError as e:
        raise conflict(e)
    db.commit()
    db.refresh(guest)
    return guest


@router.delete("/{event_id}/guests/{guest_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_guest(event_id: int, guest_id: int, db: DbSession, current_user: RequireManager):
    guest = _event_child(db, EventGuest, event_id, guest_id, "Guest")
    db.delete(guest)
    db.commit()


# ============== Menu ==============

@router.get("/{event_id}/menu-items", response_model=List[EventMenuItemResponse])
def list_menu_items(event_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Event, event_id, "Event").menu_items


@router.post("/{event_id}/menu-items", response_model=EventMenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(event_id: int, data: EventMenuItemCreate, db: DbSession, current_user: RequireManager):
    event = get_or_404(db, Event, event_id, "Event")
    item = EventService(db).add_menu_item(event, data.model_dump())
    db.commit()
    db.refresh(item)
    return item


@router.put("/{event_id}/menu-items/{item_id}", response_model=EventMenuItemResponse)
def update_menu_item(
    event_id: int, item_id: int, data: EventMenuItemUpdate, db: DbSession, current_user: RequireManager
):
    item = _event_child(db, EventMenuItem, event_id, item_id, "Menu item")
    EventService(db).update_menu_item(item, data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{event_id}/menu-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(event_id: int, item_id: int, db: DbSession, current_user: RequireManager):
    item = _event_child(db, EventMenuItem, event_id, item_id, "Menu item")
    db.delete(item)
    db.commit()


# ============== Staff assignments ==============

@router.get("/{event_id}/staff-assignments", response_model=List[EventStaffAssignmentResponse])
def list_staff_assignments(event_id: int, db: DbSession, current_user: CurrentUser):
    return get_or_404(db, Event, event_id, "Event").staff_assignments


@router.post(
    "/{event_id}/staff-assignments",
    response_model=EventStaffAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_staff_assignment(
    event_id: int, data: EventStaffAssignmentCreate, db: DbSession, current_user: RequireManager
):
    event = get_or_404(db, Event, event_id, "Event")
    try:
        assignment = EventService(db).assign_staff(event, data.model_dump())
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateAssignmentError as e:
        raise conflict(e)
    db.commit()
    db.refresh(assignment)
    return assignment


@router.delete("/{event_id}/staff-assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff_assignment(event_id: int, assignment_id: int, db: DbSession, current_user: RequireManager):
    assignment = _event_child(db, EventStaffAssignment, event_id, assignment_id, "Staff assignment")
    db.delete(assignment)
    db.commit()
