"""Tests for partners, vouchers and commissions."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from folklore_admin.models.partner import CommissionLog, Partner, Voucher
from folklore_admin.services.voucher_service import (
    VoucherRedemptionError,
    VoucherService,
    compute_commission,
    compute_discount,
)


def _money(value) -> Decimal:
    return Decimal(str(value))


@pytest.fixture
def hotel(db_session) -> Partner:
    partner = Partner(
        name="Hotel Paříž",
        partner_type="HOTEL",
        email="recepce@hotel-paris.cz",
        commission_rate=Decimal("10"),
        commission_amount=Decimal("50"),
        payment_method="BANK_TRANSFER",
    )
    db_session.add(partner)
    db_session.commit()
    db_session.refresh(partner)
    return partner


@pytest.fixture
def hotel_voucher(db_session, hotel) -> Voucher:
    voucher = Voucher(
        code="paris20",
        partner=hotel,
        voucher_type="PERCENTAGE",
        discount_value=Decimal("20"),
        max_uses=2,
    )
    db_session.add(voucher)
    db_session.commit()
    db_session.refresh(voucher)
    return voucher


class TestDiscountMath:
    def test_percentage(self):
        assert compute_discount("PERCENTAGE", 20, Decimal("3300")) == Decimal("660.00")

    def test_percentage_rounds_half_up(self):
        assert compute_discount("PERCENTAGE", Decimal("12.5"), Decimal("0.20")) == Decimal("0.03")

    def test_fixed_amount_capped(self):
        assert compute_discount("FIXED_AMOUNT", 500, Decimal("3300")) == Decimal("500.00")
        assert compute_discount("FIXED_AMOUNT", 500, Decimal("300")) == Decimal("300.00")

    def test_free_entry(self):
        assert compute_discount("FREE_ENTRY", 0, Decimal("1250")) == Decimal("1250.00")

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            compute_discount("BOGO", 1, 100)

    def test_commission(self):
        assert compute_commission(Decimal("2640"), Decimal("10"), Decimal("50")) == Decimal("314.00")
        assert compute_commission(Decimal("100"), None, None) == Decimal("0.00")


class TestVoucherService:
    def test_validate_reasons(self, db_session, hotel_voucher):
        service = VoucherService(db_session)
        today = date(2026, 6, 1)

        assert service.validate("nope", today)["reason"] == "not found"
        assert service.validate(" paris20 ", today)["valid"] is True

        hotel_voucher.valid_to = today - timedelta(days=1)
        assert service.validate("PARIS20", today)["reason"] == "outside validity period"
        hotel_voucher.valid_to = None

        hotel_voucher.current_uses = 2
        assert service.validate("PARIS20", today)["reason"] == "usage limit reached"

        hotel_voucher.is_active = False
        assert service.validate("PARIS20", today)["reason"] == "inactive"

    def test_redeem_writes_commission(self, db_session, hotel_voucher, hotel):
        redemption, commission = VoucherService(db_session).redeem("paris20", "3300")
        assert redemption.discount_applied == Decimal("660.00")
        assert redemption.final_amount == Decimal("2640.00")
        assert hotel_voucher.current_uses == 1

        assert commission.partner_id == hotel.id
        assert commission.commission_type == "VOUCHER_REDEMPTION"
        assert commission.payment_status == "PENDING"
        assert commission.base_amount == Decimal("2640.00")
        assert commission.commission_amount == Decimal("314.00")

    def test_redeem_without_partner(self, db_session):
        db_session.add(Voucher(code="WELCOME", voucher_type="FIXED_AMOUNT", discount_value=Decimal("200")))
        db_session.commit()
        redemption, commission = VoucherService(db_session).redeem("welcome", "1250")
        assert redemption.final_amount == Decimal("1050.00")
        assert commission is None

    def test_redeem_exhausted(self, db_session, hotel_voucher):
        service = VoucherService(db_session)
        service.redeem("PARIS20", "100")
        service.redeem("PARIS20", "100")
        with pytest.raises(VoucherRedemptionError) as exc_info:
            service.redeem("PARIS20", "100")
        assert exc_info.value.reason == "usage limit reached"

    def test_redeem_unknown(self, db_session):
        with pytest.raises(LookupError):
            VoucherService(db_session).redeem("MISSING", "100")


# ============== API ==============

class TestPartnerAPI:
    def test_crud(self, client, auth_headers):
        res = client.post("/api/partners/", headers=auth_headers, json={
            "name": "Recepce Old Town",
            "partner_type": "RECEPTION",
            "commission_rate": "15",
        })
        assert res.status_code == 201
        partner_id = res.json()["id"]

        res = client.put(f"/api/partners/{partner_id}", headers=auth_headers, json={"is_active": False})
        assert res.json()["is_active"] is False

        assert client.get("/api/partners/?active=true", headers=auth_headers).json() == []
        assert client.delete(f"/api/partners/{partner_id}", headers=auth_headers).status_code == 204

    def test_rate_over_100(self, client, auth_headers):
        res = client.post("/api/partners/", headers=auth_headers, json={"name": "Greedy", "commission_rate": "150"})
        assert res.status_code == 422

    def test_summary(self, client, auth_headers, hotel, hotel_voucher):
        client.post("/api/vouchers/redeem", headers=auth_headers, json={"code": "PARIS20", "original_amount": "3300"})
        client.post("/api/vouchers/redeem", headers=auth_headers, json={"code": "PARIS20", "original_amount": "1000"})
        first = client.get(f"/api/commission-logs/?partner_id={hotel.id}", headers=auth_headers).json()[-1]
        client.post(f"/api/commission-logs/{first['id']}/mark-paid", headers=auth_headers)

        data = client.get(f"/api/partners/{hotel.id}/summary", headers=auth_headers).json()
        assert data["voucher_count"] == 1
        assert data["redemption_count"] == 2
        assert _money(data["commission_paid"]) == Decimal("314.00")
        # 800 * 10% + 50
        assert _money(data["commission_pending"]) == Decimal("130.00")

    def test_delete_keeps_vouchers(self, client, auth_headers, hotel, hotel_voucher, db_session):
        assert client.delete(f"/api/partners/{hotel.id}", headers=auth_headers).status_code == 204
        db_session.refresh(hotel_voucher)
        assert hotel_voucher.partner_id is None


class TestVoucherAPI:
    def test_code_normalized(self, client, auth_headers):
        res = client.post("/api/vouchers/", headers=auth_headers, json={
            "code": "  summer10 ", "voucher_type": "PERCENTAGE", "discount_value": "10",
        })
        assert res.status_code == 201
        assert res.json()["code"] == "SUMMER10"
        assert res.json()["current_uses"] == 0

    def test_code_too_short(self, client, auth_headers):
        res = client.post("/api/vouchers/", headers=auth_headers, json={
            "code": " ab ", "voucher_type": "FREE_ENTRY",
        })
        assert res.status_code == 422

    def test_duplicate_code(self, client, auth_headers, hotel_voucher):
        res = client.post("/api/vouchers/", headers=auth_headers, json={
            "code": "Paris20", "voucher_type": "FREE_ENTRY",
        })
        assert res.status_code == 409

    def test_percentage_over_100(self, client, auth_headers):
        res = client.post("/api/vouchers/", headers=auth_headers, json={
            "code": "HUGE", "voucher_type": "PERCENTAGE", "discount_value": "120",
        })
        assert res.status_code == 422

    def test_update_cannot_break_range(self, client, auth_headers, hotel_voucher):
        client.put(f"/api/vouchers/{hotel_voucher.id}", headers=auth_headers, json={"valid_from": "2026-06-01"})
        res = client.put(f"/api/vouchers/{hotel_voucher.id}", headers=auth_headers, json={"valid_to": "2026-05-01"})
        assert res.status_code == 422

    def test_unknown_partner(self, client, auth_headers):
        res = client.post("/api/vouchers/", headers=auth_headers, json={
            "code": "GHOST", "voucher_type": "FREE_ENTRY", "partner_id": 999,
        })
        assert res.status_code == 404

    def test_validate_endpoint(self, client, auth_headers, hotel_voucher):
        data = client.get("/api/vouchers/validate/paris20", headers=auth_headers).json()
        assert data["valid"] is True
        assert data["voucher"]["id"] == hotel_voucher.id

        data = client.get("/api/vouchers/validate/NOPE", headers=auth_headers).json()
        assert data == {"code": "NOPE", "valid": False, "reason": "not found", "voucher": None}

    def test_redeem_endpoint(self, client, auth_headers, hotel_voucher, test_reservation):
        res = client.post("/api/vouchers/redeem", headers=auth_headers, json={
            "code": "paris20", "original_amount": "3300", "reservation_id": test_reservation.id,
        })
        assert res.status_code == 201
        data = res.json()
        assert _money(data["final_amount"]) == Decimal("2640.00")
        assert data["commission_log_id"] is not None
        assert data["reservation_id"] == test_reservation.id

    def test_redeem_unknown(self, client, auth_headers):
        res = client.post("/api/vouchers/redeem", headers=auth_headers, json={"code": "NOPE", "original_amount": "1"})
        assert res.status_code == 404

    def test_redeem_inactive(self, client, auth_headers, hotel_voucher, db_session):
        hotel_voucher.is_active = False
        db_session.commit()
        res = client.post("/api/vouchers/redeem", headers=auth_headers, json={
            "code": "PARIS20", "original_amount": "100",
        })
        assert res.status_code == 409
        assert "inactive" in res.json()["detail"]


class TestCommissionAPI:
    def test_manual_commission_uses_partner_terms(self, client, auth_headers, hotel):
        res = client.post("/api/commission-logs/", headers=auth_headers, json={
            "partner_id": hotel.id, "base_amount": "1000",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["commission_type"] == "BOOKING"
        assert _money(data["commission_amount"]) == Decimal("150.00")

    def test_explicit_amount_wins(self, client, auth_headers, hotel):
        res = client.post("/api/commission-logs/", headers=auth_headers, json={
            "partner_id": hotel.id, "base_amount": "1000", "commission_amount": "99", "commission_type": "EVENT",
        })
        assert _money(res.json()["commission_amount"]) == Decimal("99.00")

    def test_mark_paid_once(self, client, auth_headers, hotel):
        log = client.post("/api/commission-logs/", headers=auth_headers, json={
            "partner_id": hotel.id, "base_amount": "1000",
        }).json()
        res = client.post(f"/api/commission-logs/{log['id']}/mark-paid", headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["payment_status"] == "PAID"
        assert res.json()["payment_method"] == "BANK_TRANSFER"
        assert res.json()["paid_at"] is not None

        assert client.post(f"/api/commission-logs/{log['id']}/mark-paid", headers=auth_headers).status_code == 409
        assert client.post(f"/api/commission-logs/{log['id']}/cancel", headers=auth_headers).status_code == 409

    def test_mark_paid_with_method(self, client, auth_headers, hotel):
        log = client.post("/api/commission-logs/", headers=auth_headers, json={
            "partner_id": hotel.id, "base_amount": "1000",
        }).json()
        res = client.post(
            f"/api/commission-logs/{log['id']}/mark-paid", headers=auth_headers, json={"payment_method": "CASH"}
        )
        assert res.json()["payment_method"] == "CASH"

    def test_cancel(self, client, auth_headers, hotel, db_session):
        log = client.post("/api/commission-logs/", headers=auth_headers, json={
            "partner_id": hotel.id, "base_amount": "1000",
        }).json()
        res = client.post(f"/api/commission-logs/{log['id']}/cancel", headers=auth_headers)
        assert res.json()["payment_status"] == "CANCELLED"
        assert client.post(f"/api/commission-logs/{log['id']}/mark-paid", headers=auth_headers).status_code == 409
        assert db_session.get(CommissionLog, log["id"]).payment_status == "CANCELLED"
