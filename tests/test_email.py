from datetime import date

import pytest
import resend

from catering import email_service
from catering.domain.bookings.schemas import BookingRecord
from catering.email_templates import booking_confirmation_template, guest_label


@pytest.fixture
def sent_emails(monkeypatch):
    sent = []

    def fake_send(params):
        sent.append(params)
        return {"id": f"email-{len(sent)}"}

    monkeypatch.setattr(resend, "api_key", "re_test_key")
    monkeypatch.setattr(resend.Emails, "send", fake_send)
    monkeypatch.setattr(email_service, "compile_mjml_to_html", lambda mjml: f"<html>{mjml}</html>")
    return sent


def test_not_configured(client, create_booking):
    booking = create_booking()

    response = client.post("/emails/send", json={"type": "confirmation", "bookingId": booking["id"]})

    assert response.status_code == 503


def test_send_confirmation(client, create_booking, sent_emails):
    booking = create_booking()

    response = client.post("/emails/send", json={"type": "confirmation", "bookingId": booking["id"]})

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert len(sent_emails) == 1
    assert sent_emails[0]["to"] == ["dana@example.com"]
    assert sent_emails[0]["subject"] == "Booking Confirmed - 2099-06-06"
    assert "Dana Reyes" in sent_emails[0]["html"]


def test_send_receipt(client, create_booking, sent_emails):
    booking = create_booking()

    incomplete = client.post("/emails/send", json={"type": "receipt", "bookingId": booking["id"], "amount": 324})
    assert incomplete.status_code == 400

    response = client.post(
        "/emails/send",
        json={"type": "receipt", "bookingId": booking["id"], "amount": 324, "method": "Card"},
    )
    assert response.status_code == 200
    assert sent_emails[0]["subject"] == "Payment Received - $324.00"


def test_send_errors(client, create_booking, sent_emails):
    booking = create_booking()
    no_email = create_booking(customerEmail=None)

    assert client.post("/emails/send", json={"type": "confirmation", "bookingId": "nope"}).status_code == 404
    assert client.post("/emails/send", json={"type": "reminder", "bookingId": booking["id"]}).status_code == 400

    response = client.post("/emails/send", json={"type": "confirmation", "bookingId": no_email["id"]})
    assert response.status_code == 400
    assert response.json()["detail"] == "No customer email on this booking"
    assert sent_emails == []


def test_delivery_failure(client, create_booking, sent_emails, monkeypatch):
    def failing_send(params):
        raise RuntimeError("rate limited")

    monkeypatch.setattr(resend.Emails, "send", failing_send)
    booking = create_booking()

    response = client.post("/emails/send", json={"type": "confirmation", "bookingId": booking["id"]})

    assert response.status_code == 500
    assert response.json()["detail"] == "Email send failed"


def test_proposal_email(client, create_booking, sent_emails):
    booking = create_booking()

    response = client.post("/proposals/create", json={"bookingId": booking["id"], "sendEmail": True})

    assert response.status_code == 200
    assert sent_emails[0]["to"] == ["dana@example.com"]
    assert response.json()["url"] in sent_emails[0]["html"]


def test_proposal_link_survives_email_failure(client, create_booking):
    booking = create_booking()

    response = client.post("/proposals/create", json={"bookingId": booking["id"], "sendEmail": True})

    assert response.status_code == 200
    assert client.get(f"/proposals/{response.json()['token']}").status_code == 200


def test_template_escapes_customer_values():
    booking = BookingRecord(
        event_date=date(2099, 6, 6),
        customer_name="<script>alert(1)</script>",
        notes="Fish & chips",
        adults=4,
        total=500,
    )

    mjml = booking_confirmation_template(booking, "Test Kitchen")

    assert "<script>" not in mjml
    assert "&lt;script&gt;" in mjml
    assert "Fish &amp; chips" in mjml
    assert "$500.00" in mjml


@pytest.mark.parametrize(
    "adults, children, label",
    [(1, 0, "1 guest"), (2, 0, "2 adults"), (2, 1, "2 adults + 1 child"), (1, 3, "1 adult + 3 children")],
)
def test_guest_label(adults, children, label):
    assert guest_label(adults, children) == label
