"""Tests for events, floor plan seating, menu lines and staff assignments."""

import pytest
from datetime import date, time
from decimal import Decimal

from folklore_admin.models.event import Event, EventGuest
from folklore_admin.services.event_service import EventService, menu_line_total

EVENT_DAY = date(2026, 11, 14)


@pytest.fixture
def wedding(client, auth_headers):
    res = client.post("/api/events/", headers=auth_headers, json={
        "name": "Svatba Novákovi",
        "event_type": "svatba",
        "event_date": EVENT_DAY.isoformat(),
        "guests_paid": 40,
        "guests_free": 2,
        "spaces": ["roubenka", "terasa"],
        "organizer_name": "Karel Novák",
        "organizer_email": "karel.novak@example.cz",
        "language": "CZ",
    })
    assert res.status_code == 201
    return res.json()


def _table(client, headers, event_id, **payload):
    body = {"table_name": "Stůl 1", "room": "roubenka", "capacity": 2}
    body.update(payload)
    return client.post(f"/api/events/{event_id}/tables", headers=headers, json=body)


class TestMenuLineTotal:
    def test_quantity_times_price(self):
        assert menu_line_total(12, Decimal("350")) == Decimal("4200.00")

    def test_rounding(self):
        assert menu_line_total(3, Decimal("0.335")) == Decimal("1.01")

    def test_no_price(self):
        assert menu_line_total(5, None) is None


class TestEventAPI:
    def test_create_defaults(self, wedding):
        assert wedding["event_time"] == "18:00:00"
        assert wedding["status"] == "DRAFT"
        assert wedding["guests_total"] == 42
        assert wedding["tables"] == []
        assert wedding["duration_minutes"] == 120

    def test_spaces_deduplicated(self, client, auth_headers):
        res = client.post("/api/events/", headers=auth_headers, json={
            "name": "Firemní večírek", "event_type": "event", "event_date": EVENT_DAY.isoformat(),
            "event_time": "19:30:00", "spaces": ["stodolka", "stodolka"],
        })
        assert res.status_code == 201
        assert res.json()["spaces"] == ["stodolka"]
        assert res.json()["event_time"] == "19:30:00"

    def test_spaces_required(self, client, auth_headers):
        res = client.post("/api/events/", headers=auth_headers, json={
            "name": "Nowhere", "event_type": "privat", "event_date": EVENT_DAY.isoformat(), "spaces": [],
        })
        assert res.status_code == 422

    def test_unknown_type_and_space(self, client, auth_headers):
        base = {"name": "X", "event_date": EVENT_DAY.isoformat()}
        res = client.post("/api/events/", headers=auth_headers, json={**base, "event_type": "concert", "spaces": ["terasa"]})
        assert res.status_code == 422
        res = client.post("/api/events/", headers=auth_headers, json={**base, "event_type": "event", "spaces": ["sklep"]})
        assert res.status_code == 422

    def test_unknown_reservation(self, client, auth_headers):
        res = client.post("/api/events/", headers=auth_headers, json={
            "name": "X", "event_type": "event", "event_date": EVENT_DAY.isoformat(),
            "spaces": ["terasa"], "reservation_id": 999,
        })
        assert res.status_code == 404

    def test_list_filters(self, client, auth_headers, wedding):
        client.post("/api/events/", headers=auth_headers, json={
            "name": "Show", "event_type": "folklorni_show", "event_date": "2026-12-01",
            "spaces": ["cely_areal"], "status": "CONFIRMED",
        })
        res = client.get("/api/events/?event_type=svatba", headers=auth_headers)
        assert [e["id"] for e in res.json()] == [wedding["id"]]
        res = client.get("/api/events/?status=CONFIRMED", headers=auth_headers)
        assert [e["name"] for e in res.json()] == ["Show"]
        res = client.get("/api/events/?date_from=2026-11-20", headers=auth_headers)
        assert len(res.json()) == 1

    def test_update_status(self, client, auth_headers, wedding):
        res = client.put(f"/api/events/{wedding['id']}", headers=auth_headers, json={
            "status": "CONFIRMED", "deposit_amount": "20000", "deposit_paid": True,
        })
        assert res.status_code == 200
        assert res.json()["status"] == "CONFIRMED"
        assert res.json()["deposit_paid"] is True

    def test_user_role_read_only(self, client, user_headers, wedding):
        assert client.get(f"/api/events/{wedding['id']}", headers=user_headers).status_code == 200
        res = client.put(f"/api/events/{wedding['id']}", headers=user_headers, json={"name": "Hijack"})
        assert res.status_code == 403

    def test_delete_cascades(self, client, auth_headers, wedding, db_session):
        client.post(f"/api/events/{wedding['id']}/guests", headers=auth_headers, json={"first_name": "Eva"})
        assert client.delete(f"/api/events/{wedding['id']}", headers=auth_headers).status_code == 204
        assert db_session.query(EventGuest).count() == 0


class TestFloorPlan:
    def test_table_in_event_space(self, client, auth_headers, wedding):
        res = _table(client, auth_headers, wedding["id"], room="terasa", position_x=10, position_y=20)
        assert res.status_code == 201
        assert res.json()["room"] == "terasa"

    def test_table_outside_event_spaces(self, client, auth_headers, wedding):
        res = _table(client, auth_headers, wedding["id"], room="stodolka")
        assert res.status_code == 400

    def test_full_table(self, client, auth_headers, wedding):
        table = _table(client, auth_headers, wedding["id"]).json()
        for name in ("Eva", "Petr"):
            res = client.post(f"/api/events/{wedding['id']}/guests", headers=auth_headers, json={
                "first_name": name, "event_table_id": table["id"],
            })
            assert res.status_code == 201

        res = client.post(f"/api/events/{wedding['id']}/guests", headers=auth_headers, json={
            "first_name": "Jan", "event_table_id": table["id"],
        })
        assert res.status_code == 409

        detail = client.get(f"/api/events/{wedding['id']}", headers=auth_headers).json()
        assert len(detail["tables"][0]["guests"]) == 2
        assert detail["unseated_guests"] == []

    def test_moving_seated_guest_within_table(self, client, auth_headers, wedding):
        table = _table(client, auth_headers, wedding["id"], capacity=1).json()
        guest = client.post(f"/api/events/{wedding['id']}/guests", headers=auth_headers, json={
            "first_name": "Eva", "event_table_id": table["id"],
        }).json()
        res = client.put(f"/api/events/{wedding['id']}/guests/{guest['id']}", headers=auth_headers, json={
            "event_table_id": table["id"], "is_present": True,
        })
        assert res.status_code == 200
        assert res.json()["is_present"] is True

    def test_unseat_guest(self, client, auth_headers, wedding):
        table = _table(client, auth_headers, wedding["id"]).json()
        guest = client.post(f"/api/events/{wedding['id']}/guests", headers=auth_headers, json={
            "first_name": "Eva", "event_table_id": table["id"],
        }).json()
        res = client.put(f"/api/events/{wedding['id']}/guests/{guest['id']}", headers=auth_headers, json={
            "event_table_id": None,
        })
        assert res.json()["event_table_id"] is None
        detail = client.get(f"/api/events/{wedding['id']}", headers=auth_headers).json()
        assert [g["id"] for g in detail["unseated_guests"]] == [guest["id"]]

    def test_capacity_below_seated(self, client, auth_headers, wedding):
        table = _table(client, auth_headers, wedding["id"]).json()
        for name in ("Eva", "Petr"):
            client.post(f"/api/events/{wedding['id']}/guests", headers=auth_headers, json={
                "first_name": name, "event_table_id": table["id"],
            })
        res = client.put(f"/api/events/{wedding['id']}/tables/{table['id']}", headers=auth_headers, json={
            "capacity": 1,
        })
        assert res.status_code == 409
        res = client.put(f"/api/events/{wedding['id']}/tables/{table['id']}", headers=auth_headers, json={
            "capacity": 8, "table_name": "Hlavní stůl",
        })
        assert res.status_code == 200
        assert res.json()["capacity"] == 8

    def test_table_move_outside_spaces(self, client, auth_headers, wedding):
        table = _table(client, auth_headers, wedding["id"]).json()
        res = client.put(f"/api/events/{wedding['id']}/tables/{table['id']}", headers=auth_headers, json={
            "room": "cely_areal",
        })
        assert res.status_code == 400

    def test_spaces_update_strands_tables(self, client, auth_headers, wedding):
        _table(client, auth_headers, wedding["id"], room="terasa")
        res = client.put(f"/api/events/{wedding['id']}", headers=auth_headers, json={"spaces": ["roubenka"]})
        assert res.status_code == 400
        assert "terasa" in res.json()["detail"]

        res = client.put(f"/api/events/{wedding['id']}", headers=auth_headers, json={
            "spaces": ["terasa", "stodolka"],
        })
        assert res.status_code == 200

    def test_table_of_other_event(self, client, auth_headers, wedding):
        other = client.post("/api/events/", headers=auth_headers, json={
            "name": "Jiná akce", "event_type": "event", "event_date": EVENT_DAY.isoformat(), "spaces": ["roubenka"],
        }).json()
        foreign_table = _table(client, auth_headers, other["id"]).json()

        res = client.post(f"/api/events/{wedding['id']}/guests", headers=auth_headers, json={
            "first_name": "Eva", "event_table_id": foreign_table["id"],
        })
        assert res.status_code == 400

        res = client.put(f"/api/events/{wedding['id']}/tables/{foreign_table['id']}", headers=auth_headers, json={
            "capacity": 4,
        })
        assert res.status_code == 404

    def test_delete_table_unseats_guests(self, client, auth_headers, wedding, db_session):
        table = _table(client, auth_headers, wedding["id"]).json()
        guest = client.post(f"/api/events/{wedding['id']}/guests", headers=auth_headers, json={
            "first_name": "Eva", "event_table_id": table["id"],
        }).json()
        res = client.delete(f"/api/events/{wedding['id']}/tables/{table['id']}", headers=auth_headers)
        assert res.status_code == 204
        assert db_session.get(EventGuest, guest["id"]).event_table_id is None


class TestEventMenu:
    def test_line_total(self, client, auth_headers, wedding, kitchen_setup):
        res = client.post(f"/api/events/{wedding['id']}/menu-items", headers=auth_headers, json={
            "reservation_food_id": kitchen_setup["svickova"].id,
            "menu_name": "Svíčková",
            "quantity": 40,
            "price_per_unit": "350",
            "serving_time": "19:00:00",
        })
        assert res.status_code == 201
        item = res.json()
        assert Decimal(str(item["total_price"])) == Decimal("14000.00")

        res = client.put(f"/api/events/{wedding['id']}/menu-items/{item['id']}", headers=auth_headers, json={
            "quantity": 42,
        })
        assert Decimal(str(res.json()["total_price"])) == Decimal("14700.00")

    def test_quantity_must_be_positive(self, client, auth_headers, wedding):
        res = client.post(f"/api/events/{wedding['id']}/menu-items", headers=auth_headers, json={
            "menu_name": "Dort", "quantity": 0,
        })
        assert res.status_code == 422

    def test_delete(self, client, auth_headers, wedding):
        item = client.post(f"/api/events/{wedding['id']}/menu-items", headers=auth_headers, json={
            "menu_name": "Dort",
        }).json()
        assert item["total_price"] is None
        res = client.delete(f"/api/events/{wedding['id']}/menu-items/{item['id']}", headers=auth_headers)
        assert res.status_code == 204
        assert client.get(f"/api/events/{wedding['id']}/menu-items", headers=auth_headers).json() == []


class TestEventStaff:
    def test_assign(self, client, auth_headers, wedding, staff_members):
        petr = staff_members[1]
        res = client.post(f"/api/events/{wedding['id']}/staff-assignments", headers=auth_headers, json={
            "staff_member_id": petr.id, "role": "waiter",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["assignment_status"] == "ASSIGNED"
        assert data["staff_member"]["last_name"] == "Svoboda"

    def test_assign_twice(self, client, auth_headers, wedding, staff_members):
        payload = {"staff_member_id": staff_members[0].id}
        client.post(f"/api/events/{wedding['id']}/staff-assignments", headers=auth_headers, json=payload)
        res = client.post(f"/api/events/{wedding['id']}/staff-assignments", headers=auth_headers, json=payload)
        assert res.status_code == 409

    def test_unknown_member(self, client, auth_headers, wedding):
        res = client.post(f"/api/events/{wedding['id']}/staff-assignments", headers=auth_headers, json={
            "staff_member_id": 999,
        })
        assert res.status_code == 404

    def test_staffing(self, client, auth_headers, wedding, staff_members, default_formulas):
        client.post(f"/api/events/{wedding['id']}/staff-assignments", headers=auth_headers, json={
            "staff_member_id": staff_members[1].id,
        })
        data = client.get(f"/api/events/{wedding['id']}/staffing", headers=auth_headers).json()
        assert data["event_id"] == wedding["id"]
        assert data["guests"] == 42
        required = {r["category"]: r["required"] for r in data["requirements"]}
        assert required == {"cisniciWaiters": 2, "kuchariChefs": 1, "pomocneSilyHelpers": 2, "moderatoriHosts": 1}
        assert data["total_required"] == 6
        assert data["assigned"] == 1

    def test_remove_assignment(self, client, auth_headers, wedding, staff_members):
        assignment = client.post(f"/api/events/{wedding['id']}/staff-assignments", headers=auth_headers, json={
            "staff_member_id": staff_members[0].id,
        }).json()
        res = client.delete(
            f"/api/events/{wedding['id']}/staff-assignments/{assignment['id']}", headers=auth_headers
        )
        assert res.status_code == 204
        assert client.get(f"/api/events/{wedding['id']}/staff-assignments", headers=auth_headers).json() == []


class TestFromReservation:
    def test_plans_show(self, client, auth_headers, test_reservation, kitchen_setup):
        res = client.post(f"/api/events/from-reservation/{test_reservation.id}", headers=auth_headers)
        assert res.status_code == 201
        event = res.json()
        assert event["event_type"] == "folklorni_show"
        assert event["status"] == "PLANNED"
        assert event["reservation_id"] == test_reservation.id
        assert event["event_date"] == test_reservation.reservation_date.isoformat()
        assert event["event_time"] == "18:00:00"
        assert event["guests_paid"] == 3
        assert event["spaces"] == ["cely_areal"]
        assert event["organizer_name"] == "Anna Müller"
        assert Decimal(str(event["total_price"])) == Decimal("3300.00")

        guests = event["unseated_guests"]
        assert [g["person_index"] for g in guests] == [0, 1, 2]
        assert [g["guest_type"] for g in guests] == ["adult", "adult", "child"]
        assert [g["menu_item_id"] for g in guests] == [
            kitchen_setup["svickova"].id,
            kitchen_setup["svickova"].id,
            kitchen_setup["rizek"].id,
        ]

    def test_menu_matching_folds_accented_capitals(self, db_session, test_reservation, kitchen_setup):
        kitchen_setup["rizek"].name = "ŘÍZEK"
        test_reservation.persons[2].menu = " řízek "
        db_session.commit()
        event = EventService(db_session).from_reservation(test_reservation)
        by_index = {g.person_index: g.menu_item_id for g in event.guests}
        assert by_index[2] == kitchen_setup["rizek"].id

    def test_unknown_menu_left_empty(self, db_session, test_reservation):
        event = EventService(db_session).from_reservation(test_reservation)
        assert {g.menu_item_id for g in event.guests} == {None}
        assert all(g.reservation_id == test_reservation.id for g in event.guests)

    def test_missing_reservation(self, client, auth_headers):
        assert client.post("/api/events/from-reservation/999", headers=auth_headers).status_code == 404


class TestEventFinancialResult:
    def test_event_entries_only(self, client, auth_headers, wedding):
        for payload in (
            {"movement_type": "INCOME", "amount": "150000", "event_id": wedding["id"], "category": "TICKETS"},
            {"movement_type": "EXPENSE", "amount": "30000", "event_id": wedding["id"], "category": "FOOD"},
            {"movement_type": "INCOME", "amount": "500"},
        ):
            client.post("/api/cashbox/", headers=auth_headers, json=payload)

        data = client.get(f"/api/events/{wedding['id']}/financial-result", headers=auth_headers).json()
        assert data["event_id"] == wedding["id"]
        assert data["entry_count"] == 2
        assert Decimal(str(data["totals"]["CZK"]["net"])) == Decimal("120000")

    def test_missing_event(self, client, auth_headers):
        assert client.get("/api/events/999/financial-result", headers=auth_headers).status_code == 404


def test_event_model_rejects_unknown_space():
    with pytest.raises(ValueError):
        Event(name="X", event_type="event", event_date=EVENT_DAY, event_time=time(18, 0), spaces=["garaz"])
