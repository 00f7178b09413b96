"""Tests for stock items, the movement ledger and recipe-driven deductions."""

import pytest
from decimal import Decimal

from folklore_admin.models.stock import StockItem, StockMovement
from folklore_admin.services.stock_service import InsufficientStockError, StockService


def _qty(value) -> Decimal:
    return Decimal(str(value))


# ============== Service ==============

class TestRecordMovement:
    def test_in_adds(self, db_session, kitchen_setup):
        beef = kitchen_setup["beef"]
        movement = StockService(db_session).record_movement(beef, "IN", "2.5", reason="Delivery")
        assert beef.quantity_available == Decimal("12.500")
        assert movement.balance_after == Decimal("12.500")

    def test_out_subtracts(self, db_session, kitchen_setup):
        beef = kitchen_setup["beef"]
        StockService(db_session).record_movement(beef, "OUT", "3")
        assert beef.quantity_available == Decimal("7.000")

    def test_out_beyond_stock_refused(self, db_session, kitchen_setup):
        beef = kitchen_setup["beef"]
        with pytest.raises(InsufficientStockError) as exc_info:
            StockService(db_session).record_movement(beef, "OUT", "11")
        assert exc_info.value.needed == Decimal("11.000")
        assert beef.quantity_available == Decimal("10")
        assert db_session.query(StockMovement).count() == 0

    def test_out_beyond_stock_allowed_on_request(self, db_session, kitchen_setup):
        beef = kitchen_setup["beef"]
        StockService(db_session).record_movement(beef, "OUT", "11", allow_negative=True)
        assert beef.quantity_available == Decimal("-1.000")

    def test_adjustment_sets_quantity(self, db_session, kitchen_setup):
        beef = kitchen_setup["beef"]
        StockService(db_session).record_movement(beef, "ADJUSTMENT", "4.2", reason="Inventory count")
        assert beef.quantity_available == Decimal("4.200")

    def test_quantity_rounded_to_grams(self, db_session, kitchen_setup):
        beef = kitchen_setup["beef"]
        movement = StockService(db_session).record_movement(beef, "IN", "0.12345")
        assert movement.quantity == Decimal("0.123")

    def test_unknown_type(self, db_session, kitchen_setup):
        with pytest.raises(ValueError):
            StockService(db_session).record_movement(kitchen_setup["beef"], "LOST", "1")


class TestLowStock:
    def test_low_stock_at_threshold(self, db_session, kitchen_setup):
        beef = kitchen_setup["beef"]
        service = StockService(db_session)
        assert not beef.is_low_stock
        service.record_movement(beef, "OUT", "8")
        assert beef.is_low_stock
        assert [i.name for i in service.low_stock_items()] == ["Hovězí zadní"]
        assert service.low_stock_count() == 1

    def test_no_minimum_never_low(self, kitchen_setup):
        pork = kitchen_setup["pork"]
        pork.quantity_available = Decimal("0")
        assert not pork.is_low_stock


class TestRecipes:
    def test_availability_reports_limiting_item(self, db_session, kitchen_setup):
        result = StockService(db_session).recipe_availability(kitchen_setup["svickova_recipe"])
        # 40 dumplings at 2 per portion beat 10 kg beef at 0.25 kg per portion
        assert result["portions_available"] == 20
        assert result["limiting_stock_item_name"] == "Knedlík"

    def test_availability_floors(self, db_session, kitchen_setup):
        result = StockService(db_session).recipe_availability(kitchen_setup["rizek_recipe"])
        assert result["portions_available"] == 33

    def test_consume_scales_by_portions(self, db_session, kitchen_setup):
        movements = StockService(db_session).consume_recipe(kitchen_setup["svickova_recipe"], 6)
        assert len(movements) == 2
        assert kitchen_setup["beef"].quantity_available == Decimal("8.500")
        assert kitchen_setup["dumplings"].quantity_available == Decimal("28.000")

    def test_consume_all_or_nothing(self, db_session, kitchen_setup):
        kitchen_setup["dumplings"].quantity_available = Decimal("3")
        db_session.commit()
        with pytest.raises(InsufficientStockError):
            StockService(db_session).consume_recipe(kitchen_setup["svickova_recipe"], 4)
        assert kitchen_setup["beef"].quantity_available == Decimal("10")
        assert db_session.query(StockMovement).count() == 0


class TestIssueForReservation:
    def test_issue(self, db_session, kitchen_setup, test_reservation):
        result = StockService(db_session).issue_for_reservation(test_reservation)
        assert result["issued"] == {"Svíčková": 2, "Řízek": 1}
        assert result["skipped"] == []
        assert len(result["movements"]) == 3
        assert kitchen_setup["beef"].quantity_available == Decimal("9.500")
        assert kitchen_setup["dumplings"].quantity_available == Decimal("36.000")
        assert kitchen_setup["pork"].quantity_available == Decimal("4.850")
        assert all(m.reservation_id == test_reservation.id for m in result["movements"])

    def test_menu_matching_ignores_case(self, db_session, kitchen_setup, test_reservation):
        for person in test_reservation.persons:
            person.menu = "  svíčková "
        db_session.commit()
        result = StockService(db_session).issue_for_reservation(test_reservation)
        assert result["issued"] == {"svíčková": 3}

    def test_menu_matching_folds_accented_capitals(self, db_session, kitchen_setup, test_reservation):
        kitchen_setup["rizek"].name = "ŘÍZEK"
        test_reservation.persons[2].menu = "řízek"
        db_session.commit()
        result = StockService(db_session).issue_for_reservation(test_reservation)
        assert result["issued"] == {"Svíčková": 2, "řízek": 1}
        assert result["skipped"] == []
        assert kitchen_setup["pork"].quantity_available == Decimal("4.850")

    def test_unknown_menu_skipped(self, db_session, kitchen_setup, test_reservation):
        test_reservation.persons[2].menu = "Vegetarian"
        db_session.commit()
        result = StockService(db_session).issue_for_reservation(test_reservation)
        assert result["skipped"] == ["Vegetarian"]
        assert kitchen_setup["pork"].quantity_available == Decimal("5")


# ============== API ==============

class TestStockItemAPI:
    def test_create_records_initial_movement(self, client, auth_headers, db_session):
        res = client.post("/api/stock-items/", headers=auth_headers, json={
            "name": "Smetana", "unit": "l", "quantity_available": "6", "min_quantity": "2",
        })
        assert res.status_code == 201
        data = res.json()
        assert _qty(data["quantity_available"]) == Decimal("6")
        assert data["is_low_stock"] is False

        movement = db_session.query(StockMovement).filter_by(stock_item_id=data["id"]).one()
        assert movement.movement_type == "IN"
        assert movement.reason == "Initial stock"

    def test_create_empty_has_no_movement(self, client, auth_headers, db_session):
        res = client.post("/api/stock-items/", headers=auth_headers, json={"name": "Sůl", "unit": "kg"})
        assert res.status_code == 201
        assert db_session.query(StockMovement).count() == 0

    def test_invalid_unit(self, client, auth_headers):
        res = client.post("/api/stock-items/", headers=auth_headers, json={"name": "Pivo", "unit": "barrel"})
        assert res.status_code == 422

    def test_update_ignores_quantity(self, client, auth_headers, kitchen_setup):
        beef = kitchen_setup["beef"]
        res = client.put(f"/api/stock-items/{beef.id}", headers=auth_headers, json={
            "supplier": "Maso Kladno", "quantity_available": "999",
        })
        assert res.status_code == 200
        assert res.json()["supplier"] == "Maso Kladno"
        assert _qty(res.json()["quantity_available"]) == Decimal("10")

    def test_low_stock_listing(self, client, auth_headers, kitchen_setup, db_session):
        kitchen_setup["beef"].quantity_available = Decimal("1")
        db_session.commit()
        names = [i["name"] for i in client.get("/api/stock-items/low-stock", headers=auth_headers).json()]
        assert names == ["Hovězí zadní"]
        names = [i["name"] for i in client.get("/api/stock-items/?low_stock=true", headers=auth_headers).json()]
        assert names == ["Hovězí zadní"]

    def test_user_role_cannot_create(self, client, user_headers):
        res = client.post("/api/stock-items/", headers=user_headers, json={"name": "Sůl", "unit": "kg"})
        assert res.status_code == 403


class TestMovementAPI:
    def test_out_movement(self, client, auth_headers, kitchen_setup):
        beef = kitchen_setup["beef"]
        res = client.post("/api/stock-movements/", headers=auth_headers, json={
            "stock_item_id": beef.id, "movement_type": "OUT", "quantity": "1.5", "reason": "Kitchen",
        })
        assert res.status_code == 201
        data = res.json()
        assert _qty(data["balance_after"]) == Decimal("8.5")
        assert data["stock_item_name"] == "Hovězí zadní"

        listed = client.get(f"/api/stock-movements/?stock_item_id={beef.id}", headers=auth_headers).json()
        assert [m["id"] for m in listed] == [data["id"]]

    def test_insufficient_stock(self, client, auth_headers, kitchen_setup):
        res = client.post("/api/stock-movements/", headers=auth_headers, json={
            "stock_item_id": kitchen_setup["pork"].id, "movement_type": "OUT", "quantity": "6",
        })
        assert res.status_code == 409
        assert "Vepřová kotleta" in res.json()["detail"]

    def test_zero_quantity_only_for_adjustment(self, client, auth_headers, kitchen_setup):
        payload = {"stock_item_id": kitchen_setup["pork"].id, "movement_type": "IN", "quantity": "0"}
        assert client.post("/api/stock-movements/", headers=auth_headers, json=payload).status_code == 422
        payload["movement_type"] = "ADJUSTMENT"
        assert client.post("/api/stock-movements/", headers=auth_headers, json=payload).status_code == 201

    def test_unknown_item(self, client, auth_headers):
        res = client.post("/api/stock-movements/", headers=auth_headers, json={
            "stock_item_id": 999, "movement_type": "IN", "quantity": "1",
        })
        assert res.status_code == 404


class TestRecipeAPI:
    def test_create_and_replace_ingredients(self, client, auth_headers, kitchen_setup):
        res = client.post("/api/recipes/", headers=auth_headers, json={
            "name": "Guláš",
            "portions": 10,
            "ingredients": [{"stock_item_id": kitchen_setup["beef"].id, "quantity_required": "2"}],
        })
        assert res.status_code == 201
        recipe = res.json()
        assert recipe["ingredients"][0]["stock_item_name"] == "Hovězí zadní"
        assert recipe["ingredients"][0]["unit"] == "kg"

        res = client.put(f"/api/recipes/{recipe['id']}", headers=auth_headers, json={
            "ingredients": [
                {"stock_item_id": kitchen_setup["beef"].id, "quantity_required": "2.5"},
                {"stock_item_id": kitchen_setup["dumplings"].id, "quantity_required": "20"},
            ],
        })
        assert res.status_code == 200
        assert len(res.json()["ingredients"]) == 2

    def test_duplicate_ingredient_rejected(self, client, auth_headers, kitchen_setup):
        line = {"stock_item_id": kitchen_setup["beef"].id, "quantity_required": "1"}
        res = client.post("/api/recipes/", headers=auth_headers, json={"name": "Dvojí", "ingredients": [line, line]})
        assert res.status_code == 422

    def test_availability_endpoint(self, client, auth_headers, kitchen_setup):
        recipe = kitchen_setup["svickova_recipe"]
        data = client.get(f"/api/recipes/{recipe.id}/availability", headers=auth_headers).json()
        assert data["portions_available"] == 20
        assert data["limiting_stock_item_id"] == kitchen_setup["dumplings"].id

    def test_consume_endpoint(self, client, auth_headers, kitchen_setup):
        recipe = kitchen_setup["rizek_recipe"]
        res = client.post(f"/api/recipes/{recipe.id}/consume", headers=auth_headers, json={"portions": "10"})
        assert res.status_code == 200
        assert _qty(res.json()["movements"][0]["balance_after"]) == Decimal("3.5")

    def test_consume_too_much(self, client, auth_headers, kitchen_setup):
        recipe = kitchen_setup["rizek_recipe"]
        res = client.post(f"/api/recipes/{recipe.id}/consume", headers=auth_headers, json={"portions": "100"})
        assert res.status_code == 409


class TestReservationIssueAPI:
    def test_issue(self, client, auth_headers, kitchen_setup, test_reservation):
        res = client.post(f"/api/stock-items/issue/reservation/{test_reservation.id}", headers=auth_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["reservation_id"] == test_reservation.id
        assert data["issued"] == {"Svíčková": 2, "Řízek": 1}
        assert len(data["movements"]) == 3

    def test_issue_short_stock(self, client, auth_headers, kitchen_setup, test_reservation, db_session):
        kitchen_setup["pork"].quantity_available = Decimal("0.1")
        db_session.commit()
        res = client.post(f"/api/stock-items/issue/reservation/{test_reservation.id}", headers=auth_headers)
        assert res.status_code == 409
        db_session.refresh(kitchen_setup["beef"])
        assert kitchen_setup["beef"].quantity_available == Decimal("10")

    def test_issue_missing_reservation(self, client, auth_headers):
        assert client.post("/api/stock-items/issue/reservation/999", headers=auth_headers).status_code == 404


def test_stock_item_rejects_unknown_unit():
    with pytest.raises(ValueError):
        StockItem(name="Víno", unit="barrel")
