"""Event Service - events, floor plan seating, menu lines and staff assignments."""

import logging
from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from folklore_admin.core.config import settings
from folklore_admin.models.event import (
    Event,
    EventGuest,
    EventMenuItem,
    EventSpace,
    EventStaffAssignment,
    EventStatus,
    EventTable,
    EventType,
    GuestType,
)
from folklore_admin.models.reservation import PersonType, Reservation
from folklore_admin.models.staff import StaffMember
from folklore_admin.services.pricing_service import find_food
from folklore_admin.services.staff_service import StaffService

logger = logging.getLogger(__name__)


class EventRuleError(Exception):
    """Raised for requests that break the event floor plan rules."""


class TableCapacityError(Exception):
    """Raised when seating a guest at a full table."""

    def __init__(self, table: EventTable):
        self.table = table
        super().__init__(f"Table '{table.table_name}' is full (capacity {table.capacity})")


class DuplicateAssignmentError(Exception):
    """Raised when a staff member is assigned to the same event twice."""


def default_event_time() -> time:
    return datetime.strptime(settings.default_event_time, "%H:%M").time()


def menu_line_total(quantity: int, price_per_unit: Optional[Decimal]) -> Optional[Decimal]:
    if price_per_unit is None:
        return None
    return (Decimal(quantity) * Decimal(str(price_per_unit))).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )


class EventService:
    """Service for events and their sub-resources."""

    def __init__(self, db: Session):
        self.db = db

    # ===== EVENTS =====

    def create(self, data: Dict[str, Any]) -> Event:
        data = dict(data)
        if data.get("event_time") is None:
            data["event_time"] = default_event_time()
        event = Event(**data)
        self.db.add(event)
        self.db.flush()
        logger.info(f"Event {event.id} '{event.name}' created for {event.event_date}")
        return event

    def update(self, event: Event, data: Dict[str, Any]) -> Event:
        spaces = data.get("spaces")
        if spaces:
            stranded = sorted({t.room for t in event.tables if t.room not in spaces})
            if stranded:
                raise EventRuleError(
                    f"Event {event.id} still has tables in {', '.join(stranded)}"
                )
        event.apply_changes(data)
        self.db.flush()
        return event

    # ===== TABLES =====

    def _check_room(self, event: Event, room: str) -> None:
        if room not in (event.spaces or []):
            raise EventRuleError(
                f"Room '{room}' is not one of the event spaces ({', '.join(event.spaces or [])})"
            )

    def add_table(self, event: Event, data: Dict[str, Any]) -> EventTable:
        self._check_room(event, data["room"])
        table = EventTable(event=event, **data)
        self.db.add(table)
        self.db.flush()
        return table

    def update_table(self, table: EventTable, data: Dict[str, Any]) -> EventTable:
        if data.get("room") is not None:
            self._check_room(table.event, data["room"])
        capacity = data.get("capacity")
        if capacity is not None and capacity < len(table.guests):
            raise TableCapacityError(table)
        table.apply_changes(data)
        self.db.flush()
        return table

    def delete_table(self, table: EventTable) -> None:
        for guest in list(table.guests):
            guest.table = None
        self.db.delete(table)
        self.db.flush()

    # ===== GUESTS =====

    def _seat(self, event: Event, table_id: Optional[int], guest: Optional[EventGuest] = None):
        if table_id is None:
            return None
        table = self.db.get(EventTable, table_id)
        if table is None or table.event_id != event.id:
            raise EventRuleError(f"Table {table_id} does not belong to event {event.id}")
        seated = [g for g in table.guests if guest is None or g.id != guest.id]
        if len(seated) >= table.capacity:
            raise TableCapacityError(table)
        return table

    def add_guest(self, event: Event, data: Dict[str, Any]) -> EventGuest:
        data = dict(data)
        table = self._seat(event, data.pop("event_table_id", None))
        guest = EventGuest(event=event, table=table, **data)
        self.db.add(guest)
        self.db.flush()
        return guest

    def update_guest(self, guest: EventGuest, data: Dict[str, Any]) -> EventGuest:
        data = dict(data)
        if "event_table_id" in data:
            guest.table = self._seat(guest.event, data.pop("event_table_id"), guest)
        guest.apply_changes(data)
        self.db.flush()
        return guest

    # ===== MENU =====

    def add_menu_item(self, event: Event, data: Dict[str, Any]) -> EventMenuItem:
        item = EventMenuItem(event=event, **data)
        item.total_price = menu_line_total(item.quantity, item.price_per_unit)
        self.db.add(item)
        self.db.flush()
        return item

    def update_menu_item(self, item: EventMenuItem, data: Dict[str, Any]) -> EventMenuItem:
        item.apply_changes(data)
        item.total_price = menu_line_total(item.quantity, item.price_per_unit)
        self.db.flush()
        return item

    # ===== STAFF =====

    def assign_staff(self, event: Event, data: Dict[str, Any]) -> EventStaffAssignment:
        data = dict(data)
        member = self.db.get(StaffMember, data.pop("staff_member_id"))
        if member is None:
            raise LookupError("Staff member not found")
        if any(a.staff_member_id == member.id for a in event.staff_assignments):
            raise DuplicateAssignmentError(
                f"{member.full_name} is already assigned to event {event.id}"
            )
        assignment = EventStaffAssignment(event=event, staff_member=member, **data)
        self.db.add(assignment)
        self.db.flush()
        logger.info(f"{member.full_name} assigned to event {event.id}")
        return assignment

    def staffing(self, event: Event) -> Dict[str, Any]:
        result = StaffService(self.db).calculate_staffing(event.guests_total)
        result["event_id"] = event.id
        result["assigned"] = len(event.staff_assignments)
        return result

    # ===== FROM RESERVATION =====

    def _food_id(self, menu: Optional[str]) -> Optional[int]:
        food = find_food(self.db, menu)
        return food.id if food else None

    def from_reservation(self, reservation: Reservation) -> Event:
        """Planned folklore show seating every person of the reservation."""
        event = Event(
            name=f"Folklorní show - {reservation.contact_name}",
            event_type=EventType.FOLKLORE_SHOW.value,
            reservation_id=reservation.id,
            event_date=reservation.reservation_date,
            event_time=default_event_time(),
            guests_paid=len(reservation.persons),
            guests_free=0,
            spaces=[EventSpace.CELY_AREAL.value],
            organizer_name=reservation.contact_name,
            contact_person=reservation.contact_name,
            organizer_email=reservation.contact_email,
            organizer_phone=reservation.contact_phone,
            total_price=reservation.total_price,
            status=EventStatus.PLANNED.value,
            notes=reservation.contact_note,
        )
        for index, person in enumerate(reservation.persons):
            guest_type = (
                GuestType.ADULT.value
                if person.person_type == PersonType.ADULT.value
                else GuestType.CHILD.value
            )
            event.guests.append(
                EventGuest(
                    guest_type=guest_type,
                    nationality=reservation.contact_nationality,
                    is_paid=True,
                    reservation_id=reservation.id,
                    person_index=index,
                    menu_item_id=self._food_id(person.menu),
                )
            )
        self.db.add(event)
        self.db.flush()
        logger.info(
            f"Event {event.id} created from reservation {reservation.id} "
            f"({len(event.guests)} guests)"
        )
        return event
