"""Tests for per-person pricing, menu rules and the reservation calendar."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from folklore_admin.models.food import FoodItemAvailability, FoodItemPriceOverride, ReservationFood
from folklore_admin.models.pricing import DisabledDate
from folklore_admin.services.pricing_service import PricingService, pick_rule

DAY = date(2026, 12, 24)


def _rule(rule_id, date_from, date_to=None):
    rule = DisabledDate(date_from=date_from, date_to=date_to)
    rule.id = rule_id
    return rule


class TestPickRule:
    def test_no_match(self):
        assert pick_rule([_rule(1, DAY + timedelta(days=1))], DAY) is None

    def test_open_end_means_single_day(self):
        assert pick_rule([_rule(1, DAY - timedelta(days=1))], DAY) is None
        assert pick_rule([_rule(1, DAY)], DAY).id == 1

    def test_latest_start_wins(self):
        long_range = _rule(5, DAY - timedelta(days=30), DAY + timedelta(days=30))
        short_range = _rule(2, DAY - timedelta(days=1), DAY + timedelta(days=1))
        assert pick_rule([long_range, short_range], DAY) is short_range

    def test_tie_goes_to_newest(self):
        first = _rule(3, DAY, DAY + timedelta(days=3))
        second = _rule(4, DAY, DAY + timedelta(days=1))
        assert pick_rule([second, first], DAY) is second


class TestPersonPrices:
    def test_defaults_created_on_first_read(self, client, auth_headers):
        res = client.get("/api/pricing/defaults", headers=auth_headers)
        assert res.status_code == 200
        data = res.json()
        assert Decimal(str(data["adult_price"])) == Decimal("1250.00")
        assert Decimal(str(data["child_price"])) == Decimal("800.00")
        assert Decimal(str(data["infant_price"])) == Decimal("0.00")

    def test_update_defaults(self, client, auth_headers):
        res = client.put("/api/pricing/defaults", headers=auth_headers, json={"adult_price": "1300"})
        assert res.status_code == 200
        assert Decimal(str(res.json()["adult_price"])) == Decimal("1300")
        assert Decimal(str(res.json()["child_price"])) == Decimal("800.00")

    def test_negative_price_rejected(self, client, auth_headers):
        res = client.put("/api/pricing/defaults", headers=auth_headers, json={"child_price": "-1"})
        assert res.status_code == 422

    def test_for_date_uses_override(self, client, auth_headers):
        res = client.post("/api/pricing/date-overrides", headers=auth_headers, json={
            "override_date": DAY.isoformat(),
            "adult_price": "1500",
            "child_price": "900",
            "infant_price": "0",
            "reason": "Christmas Eve",
        })
        assert res.status_code == 201
        override_id = res.json()["id"]

        data = client.get(f"/api/pricing/for-date?on={DAY.isoformat()}", headers=auth_headers).json()
        assert data["source"] == "override"
        assert data["override_id"] == override_id
        assert Decimal(str(data["adult_price"])) == Decimal("1500")

        data = client.get(
            f"/api/pricing/for-date?on={(DAY + timedelta(days=1)).isoformat()}", headers=auth_headers
        ).json()
        assert data["source"] == "default"
        assert data["override_id"] is None

    def test_one_override_per_date(self, client, auth_headers):
        payload = {
            "override_date": DAY.isoformat(),
            "adult_price": "1500", "child_price": "900", "infant_price": "0",
        }
        assert client.post("/api/pricing/date-overrides", headers=auth_headers, json=payload).status_code == 201
        assert client.post("/api/pricing/date-overrides", headers=auth_headers, json=payload).status_code == 409


class TestFoods:
    def test_crud(self, client, auth_headers):
        res = client.post("/api/reservation-foods/", headers=auth_headers, json={
            "name": "Guláš", "price": "320.00", "description": "Beef goulash",
        })
        assert res.status_code == 201
        food_id = res.json()["id"]

        res = client.put(f"/api/reservation-foods/{food_id}", headers=auth_headers, json={"price": "340.00"})
        assert Decimal(str(res.json()["price"])) == Decimal("340.00")

        assert client.delete(f"/api/reservation-foods/{food_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/api/reservation-foods/{food_id}", headers=auth_headers).status_code == 404

    def test_duplicate_name(self, client, auth_headers, kitchen_setup):
        res = client.post("/api/reservation-foods/", headers=auth_headers, json={"name": "Svíčková", "price": "1"})
        assert res.status_code == 409


class TestMenuForDate:
    def test_override_applied(self, client, auth_headers, kitchen_setup):
        svickova = kitchen_setup["svickova"]
        res = client.post("/api/food-price-overrides/", headers=auth_headers, json={
            "reservation_food_id": svickova.id,
            "date_from": (DAY - timedelta(days=2)).isoformat(),
            "date_to": (DAY + timedelta(days=2)).isoformat(),
            "price": "420.00",
        })
        assert res.status_code == 201

        menu = client.get(f"/api/reservation-foods/menu?on={DAY.isoformat()}", headers=auth_headers).json()
        entry = next(e for e in menu if e["name"] == "Svíčková")
        assert Decimal(str(entry["base_price"])) == Decimal("350.00")
        assert Decimal(str(entry["price"])) == Decimal("420.00")
        assert entry["price_override_id"] == res.json()["id"]

        other = next(e for e in menu if e["name"] == "Řízek")
        assert other["price_override_id"] is None

    def test_unavailable_food_hidden(self, client, auth_headers, kitchen_setup):
        rizek = kitchen_setup["rizek"]
        res = client.post("/api/food-availability/", headers=auth_headers, json={
            "reservation_food_id": rizek.id,
            "date_from": DAY.isoformat(),
            "available": False,
            "reason": "No pork delivery",
        })
        assert res.status_code == 201

        names = [e["name"] for e in client.get(
            f"/api/reservation-foods/menu?on={DAY.isoformat()}", headers=auth_headers
        ).json()]
        assert names == ["Svíčková"]

        names = [e["name"] for e in client.get(
            f"/api/reservation-foods/menu?on={(DAY + timedelta(days=1)).isoformat()}", headers=auth_headers
        ).json()]
        assert "Řízek" in names

    def test_newer_rule_reopens(self, db_session, kitchen_setup):
        rizek = kitchen_setup["rizek"]
        db_session.add_all([
            FoodItemAvailability(
                reservation_food_id=rizek.id, date_from=DAY - timedelta(days=10),
                date_to=DAY + timedelta(days=10), available=False,
            ),
            FoodItemAvailability(reservation_food_id=rizek.id, date_from=DAY, available=True),
        ])
        db_session.commit()
        service = PricingService(db_session)
        assert service.is_food_available(rizek, DAY)
        assert not service.is_food_available(rizek, DAY + timedelta(days=1))

    def test_override_picks_latest_start(self, db_session, kitchen_setup):
        svickova = kitchen_setup["svickova"]
        season = FoodItemPriceOverride(
            reservation_food_id=svickova.id, date_from=DAY - timedelta(days=20),
            date_to=DAY + timedelta(days=20), price=Decimal("400"),
        )
        holiday = FoodItemPriceOverride(
            reservation_food_id=svickova.id, date_from=DAY - timedelta(days=1),
            date_to=DAY + timedelta(days=1), price=Decimal("450"),
        )
        db_session.add_all([holiday, season])
        db_session.commit()
        assert PricingService(db_session).food_price_override(svickova, DAY).price == Decimal("450")

    def test_unknown_food_for_rule(self, client, auth_headers):
        res = client.post("/api/food-price-overrides/", headers=auth_headers, json={
            "reservation_food_id": 999, "date_from": DAY.isoformat(), "price": "1",
        })
        assert res.status_code == 404

    def test_inverted_range_rejected(self, client, auth_headers, kitchen_setup):
        res = client.post("/api/food-price-overrides/", headers=auth_headers, json={
            "reservation_food_id": kitchen_setup["svickova"].id,
            "date_from": DAY.isoformat(),
            "date_to": (DAY - timedelta(days=1)).isoformat(),
            "price": "1",
        })
        assert res.status_code == 422

    def test_update_cannot_invert_range(self, client, auth_headers, db_session, kitchen_setup):
        rule = FoodItemPriceOverride(
            reservation_food_id=kitchen_setup["svickova"].id, date_from=DAY, price=Decimal("400"),
        )
        db_session.add(rule)
        db_session.commit()
        res = client.put(f"/api/food-price-overrides/{rule.id}", headers=auth_headers, json={
            "date_to": (DAY - timedelta(days=3)).isoformat(),
        })
        assert res.status_code == 422


class TestDisabledDates:
    def test_range_check(self, client, auth_headers):
        res = client.post("/api/disable-dates/", headers=auth_headers, json={
            "date_from": DAY.isoformat(),
            "date_to": (DAY + timedelta(days=2)).isoformat(),
            "reason": "Christmas closure",
        })
        assert res.status_code == 201
        assert res.json()["project"] == "reservations"

        data = client.get(
            f"/api/disable-dates/check?on={(DAY + timedelta(days=1)).isoformat()}", headers=auth_headers
        ).json()
        assert data["disabled"] is True
        assert data["reasons"] == ["Christmas closure"]

        data = client.get(
            f"/api/disable-dates/check?on={(DAY + timedelta(days=3)).isoformat()}", headers=auth_headers
        ).json()
        assert data["disabled"] is False

    def test_project_scoping(self, client, auth_headers, db_session):
        db_session.add(DisabledDate(date_from=DAY, project="events"))
        db_session.commit()
        data = client.get(f"/api/disable-dates/check?on={DAY.isoformat()}", headers=auth_headers).json()
        assert data["disabled"] is False
        data = client.get(
            f"/api/disable-dates/check?on={DAY.isoformat()}&project=events", headers=auth_headers
        ).json()
        assert data["disabled"] is True

    def test_delete_reopens(self, client, auth_headers, db_session):
        closed = DisabledDate(date_from=DAY)
        db_session.add(closed)
        db_session.commit()
        assert client.delete(f"/api/disable-dates/{closed.id}", headers=auth_headers).status_code == 204
        assert not PricingService(db_session).is_date_disabled(DAY)

    def test_list_filtered_by_project(self, client, auth_headers, db_session):
        db_session.add_all([DisabledDate(date_from=DAY), DisabledDate(date_from=DAY, project="events")])
        db_session.commit()
        res = client.get("/api/disable-dates/?project=events", headers=auth_headers)
        assert [d["project"] for d in res.json()] == ["events"]


def test_food_model_rejects_negative_price():
    with pytest.raises(ValueError):
        ReservationFood(name="Broken", price=Decimal("-5"))
