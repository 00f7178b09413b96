"""Tests for reservations and their payments."""

import pytest
from datetime import timedelta
from decimal import Decimal

from folklore_admin.models.pricing import DisabledDate
from folklore_admin.models.reservation import Payment, Reservation


@pytest.fixture
def sent_links(monkeypatch):
    sent = []

    def fake_send(to, reservation_id, amount, payment_url):
        sent.append({"to": to, "reservation_id": reservation_id, "amount": amount, "url": payment_url})
        return True

    monkeypatch.setattr("folklore_admin.services.reservation_service.send_payment_link_email", fake_send)
    return sent


class TestReservationCreate:
    def test_create(self, client, auth_headers, reservation_payload):
        res = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)
        assert res.status_code == 201
        data = res.json()
        assert data["status"] == "RECEIVED"
        assert len(data["persons"]) == 3
        assert Decimal(str(data["total_price"])) == Decimal("3300.00")

    def test_invoice_copies_contact(self, client, auth_headers, reservation_payload):
        reservation_payload["invoice_same_as_contact"] = True
        reservation_payload["invoice_name"] = "Something Else Ltd"
        data = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload).json()
        assert data["invoice_name"] == "John Smith"
        assert data["invoice_email"] == "john.smith@example.org"
        assert data["invoice_phone"] == reservation_payload["contact_phone"]

    def test_separate_invoice_kept(self, client, auth_headers, reservation_payload):
        reservation_payload["invoice_same_as_contact"] = False
        reservation_payload["invoice_name"] = "Smith Travel Ltd"
        reservation_payload["invoice_email"] = "billing@example.org"
        data = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload).json()
        assert data["invoice_name"] == "Smith Travel Ltd"
        assert data["invoice_email"] == "billing@example.org"

    def test_persons_required(self, client, auth_headers, reservation_payload):
        reservation_payload["persons"] = []
        res = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)
        assert res.status_code == 422

    def test_agreement_required(self, client, auth_headers, reservation_payload):
        reservation_payload["agreement"] = False
        res = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)
        assert res.status_code == 422

    def test_transfer_needs_count_and_address(self, client, auth_headers, reservation_payload):
        reservation_payload["transfer_selected"] = True
        res = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)
        assert res.status_code == 422

        reservation_payload["transfer_count"] = 2
        reservation_payload["transfer_address"] = "Hotel Paříž, U Obecního domu 1"
        res = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)
        assert res.status_code == 201
        assert res.json()["transfer_count"] == 2

    def test_unknown_person_type(self, client, auth_headers, reservation_payload):
        reservation_payload["persons"][0]["person_type"] = "senior"
        res = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)
        assert res.status_code == 422

    def test_disabled_date_blocks(self, client, auth_headers, reservation_payload, db_session, show_date):
        db_session.add(DisabledDate(date_from=show_date, reason="Private wedding"))
        db_session.commit()

        res = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)
        assert res.status_code == 409
        assert "Private wedding" in res.json()["detail"]

        res = client.post(
            "/api/reservations/?ignore_disabled_dates=true", headers=auth_headers, json=reservation_payload
        )
        assert res.status_code == 201

    def test_disabled_range_of_other_project(self, client, auth_headers, reservation_payload, db_session, show_date):
        db_session.add(DisabledDate(date_from=show_date, project="events"))
        db_session.commit()
        res = client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)
        assert res.status_code == 201

    def test_user_role_cannot_create(self, client, user_headers, reservation_payload):
        res = client.post("/api/reservations/", headers=user_headers, json=reservation_payload)
        assert res.status_code == 403


class TestReservationQueries:
    def test_list_and_filter(self, client, auth_headers, test_reservation, reservation_payload):
        client.post("/api/reservations/", headers=auth_headers, json=reservation_payload)

        assert len(client.get("/api/reservations/", headers=auth_headers).json()) == 2

        res = client.get("/api/reservations/?search=müller", headers=auth_headers)
        assert [r["id"] for r in res.json()] == [test_reservation.id]

        res = client.get("/api/reservations/?status=PAID", headers=auth_headers)
        assert res.json() == []

    def test_get(self, client, auth_headers, test_reservation):
        res = client.get(f"/api/reservations/{test_reservation.id}", headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["contact_name"] == "Anna Müller"

    def test_get_missing(self, client, auth_headers):
        assert client.get("/api/reservations/9999", headers=auth_headers).status_code == 404


class TestReservationUpdate:
    def test_replace_persons(self, client, auth_headers, test_reservation):
        res = client.put(f"/api/reservations/{test_reservation.id}", headers=auth_headers, json={
            "persons": [{"person_type": "adult", "menu": "Vegetarian", "price": "1100.00"}],
        })
        assert res.status_code == 200
        data = res.json()
        assert len(data["persons"]) == 1
        assert Decimal(str(data["total_price"])) == Decimal("1100.00")

    def test_move_to_disabled_date(self, client, auth_headers, test_reservation, db_session, show_date):
        closed = show_date + timedelta(days=1)
        db_session.add(DisabledDate(date_from=closed, reason="Maintenance"))
        db_session.commit()
        res = client.put(f"/api/reservations/{test_reservation.id}", headers=auth_headers, json={
            "reservation_date": closed.isoformat(),
        })
        assert res.status_code == 409

    def test_transfer_rule_on_update(self, client, auth_headers, test_reservation):
        res = client.put(f"/api/reservations/{test_reservation.id}", headers=auth_headers, json={
            "transfer_selected": True,
        })
        assert res.status_code == 400

    def test_invoice_follows_contact_change(self, client, auth_headers, test_reservation):
        res = client.put(f"/api/reservations/{test_reservation.id}", headers=auth_headers, json={
            "contact_email": "anna@example.de",
        })
        assert res.json()["invoice_email"] == "anna@example.de"

    def test_delete_keeps_payments(self, client, auth_headers, test_reservation, db_session):
        db_session.add(Payment(
            transaction_id="FG-TEST-1", reservation=test_reservation,
            reservation_reference=str(test_reservation.id), amount=Decimal("3300"),
        ))
        db_session.commit()
        res = client.delete(f"/api/reservations/{test_reservation.id}", headers=auth_headers)
        assert res.status_code == 204

        payment = db_session.query(Payment).filter_by(transaction_id="FG-TEST-1").one()
        assert payment.reservation_id is None
        assert payment.reservation_reference == str(test_reservation.id)


class TestPaymentLink:
    def test_send_payment_email(self, client, auth_headers, test_reservation, sent_links):
        res = client.post(f"/api/reservations/{test_reservation.id}/send-payment-email", headers=auth_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["email_sent"] is True
        assert data["reservation_status"] == "WAITING_PAYMENT"
        assert data["payment"]["status"] == "CREATED"
        assert data["payment"]["transaction_id"].startswith(f"FG{test_reservation.id}-")
        assert Decimal(str(data["payment"]["amount"])) == Decimal("3300.00")
        assert data["payment_url"].endswith(data["payment"]["transaction_id"])

        assert sent_links[0]["to"] == "anna.mueller@example.de"
        assert sent_links[0]["amount"] == "3300.00"

    def test_cancelled_reservation(self, client, auth_headers, test_reservation, db_session, sent_links):
        test_reservation.status = "CANCELLED"
        db_session.commit()
        res = client.post(f"/api/reservations/{test_reservation.id}/send-payment-email", headers=auth_headers)
        assert res.status_code == 409
        assert sent_links == []

    def test_nothing_to_pay(self, client, auth_headers, test_reservation, db_session, sent_links):
        for person in test_reservation.persons:
            person.price = Decimal("0")
        db_session.commit()
        res = client.post(f"/api/reservations/{test_reservation.id}/send-payment-email", headers=auth_headers)
        assert res.status_code == 409

    def test_mail_failure_still_opens_payment(self, client, auth_headers, test_reservation, monkeypatch):
        monkeypatch.setattr(
            "folklore_admin.services.reservation_service.send_payment_link_email",
            lambda **kwargs: False,
        )
        res = client.post(f"/api/reservations/{test_reservation.id}/send-payment-email", headers=auth_headers)
        assert res.status_code == 200
        assert res.json()["email_sent"] is False


class TestPaymentStatus:
    @pytest.fixture
    def payment(self, client, auth_headers, test_reservation, sent_links):
        res = client.post(f"/api/reservations/{test_reservation.id}/send-payment-email", headers=auth_headers)
        return res.json()["payment"]

    def test_paid_propagates(self, client, auth_headers, payment, test_reservation, db_session):
        res = client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "PAID"})
        assert res.status_code == 200
        assert res.json()["status"] == "PAID"
        db_session.refresh(test_reservation)
        assert test_reservation.status == "PAID"

    def test_authorized_propagates(self, client, auth_headers, payment, test_reservation, db_session):
        client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "AUTHORIZED"})
        db_session.refresh(test_reservation)
        assert test_reservation.status == "AUTHORIZED"

    def test_authorized_does_not_downgrade_paid(self, client, auth_headers, payment, test_reservation, db_session):
        test_reservation.status = "PAID"
        db_session.commit()
        client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "AUTHORIZED"})
        db_session.refresh(test_reservation)
        assert test_reservation.status == "PAID"

    def test_final_status_is_locked(self, client, auth_headers, payment):
        client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "CANCELLED"})
        res = client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "PAID"})
        assert res.status_code == 409

    def test_same_status_is_noop(self, client, auth_headers, payment):
        client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "PAID"})
        res = client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "PAID"})
        assert res.status_code == 200

    def test_paid_reservation_refuses_new_link(self, client, auth_headers, payment, test_reservation):
        client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "PAID"})
        res = client.post(f"/api/reservations/{test_reservation.id}/send-payment-email", headers=auth_headers)
        assert res.status_code == 409

    def test_unknown_status(self, client, auth_headers, payment):
        res = client.patch(f"/api/payment/{payment['id']}", headers=auth_headers, json={"status": "REFUNDED"})
        assert res.status_code == 422

    def test_list_and_get(self, client, auth_headers, payment):
        res = client.get("/api/payment/list", headers=auth_headers)
        assert [p["id"] for p in res.json()] == [payment["id"]]
        assert client.get("/api/payment/list?status=PAID", headers=auth_headers).json() == []
        assert client.get(f"/api/payment/{payment['id']}", headers=auth_headers).status_code == 200


class TestReservationModel:
    def test_total_price(self, test_reservation):
        assert test_reservation.total_price == Decimal("3300.00")

    def test_billing_email_prefers_invoice(self, test_reservation):
        assert test_reservation.billing_email == "anna.mueller@example.de"
        test_reservation.invoice_email = "accounts@example.de"
        assert test_reservation.billing_email == "accounts@example.de"

    def test_rejects_unknown_status(self):
        with pytest.raises(ValueError):
            Reservation(status="LOST")
