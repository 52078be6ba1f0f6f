from catering.domain.rules import DEFAULT_RULES
from catering.models import StaffMember


def _confirm(client, booking_id):
    response = client.post(f"/bookings/{booking_id}/confirm")
    assert response.status_code == 200, response.text
    return response.json()


def _create_staff(client, **overrides):
    payload = {"name": "Sam Cook", "email": "sam@example.com", "primaryRole": "lead-chef", **overrides}
    response = client.post("/staff", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


# ============================================================================
# CREATE / READ
# ============================================================================


def test_create_booking_prices_and_normalizes(create_booking):
    booking = create_booking()

    assert booking["eventTime"] == "18:00"
    assert booking["pricingSlot"] == "primary"
    assert booking["subtotal"] == 900
    assert booking["gratuity"] == 180
    assert booking["distanceFee"] == 0
    assert booking["total"] == 1080
    assert booking["status"] == "pending"
    assert booking["serviceStatus"] == "pending"
    assert booking["paymentStatus"] == "deposit-due"
    assert booking["pipelineStatus"] == "quote_sent"
    assert booking["depositAmount"] == 324
    assert booking["balanceDueAmount"] == 1080
    assert booking["prepPurchaseByDate"] == "2099-06-04"
    assert booking["locked"] is False

    snapshot = booking["pricingSnapshot"]
    assert snapshot["adult_base_price"] == 60
    assert snapshot["total_charged"] == 1080


def test_discount_reduces_subtotal_only(create_booking):
    booking = create_booking(discountType="percent", discountValue=10)

    assert booking["subtotal"] == 810
    assert booking["gratuity"] == 180
    assert booking["total"] == 990
    assert booking["depositAmount"] == 297
    assert booking["pricingSnapshot"]["subtotal"] == 810


def test_inquiry_booking_and_distance_fee(create_booking):
    booking = create_booking(source="inquiry", distanceMiles=26, eventType="buffet", adults=30)

    assert booking["pipelineStatus"] == "inquiry"
    assert booking["pricingSlot"] == "secondary"
    assert booking["distanceFee"] == 100
    assert booking["total"] == 960 + 192 + 100


def test_invalid_event_time_rejected(client, booking_payload):
    response = client.post("/bookings", json={**booking_payload, "eventTime": "dinner time"})
    assert response.status_code == 422


def test_deposit_percent_out_of_range_rejected(client, booking_payload):
    response = client.post("/bookings", json={**booking_payload, "depositPercent": 150})
    assert response.status_code == 422


def test_list_and_filter_bookings(client, create_booking):
    create_booking(eventDate="2099-07-01")
    create_booking(eventDate="2099-05-01")

    dates = [b["eventDate"] for b in client.get("/bookings").json()]
    assert dates == ["2099-05-01", "2099-07-01"]

    filtered = client.get("/bookings", params={"start_date": "2099-06-01"}).json()
    assert [b["eventDate"] for b in filtered] == ["2099-07-01"]


def test_missing_booking(client):
    assert client.get("/bookings/does-not-exist").status_code == 404
    assert client.post("/bookings/does-not-exist/confirm").status_code == 404


def test_delete_booking(client, create_booking):
    booking = create_booking()

    assert client.delete(f"/bookings/{booking['id']}").json() == {"message": "Booking deleted"}
    assert client.get(f"/bookings/{booking['id']}").status_code == 404


# ============================================================================
# UPDATE / REPRICE
# ============================================================================


def test_snapshot_survives_rules_change(client, create_booking):
    booking = create_booking()
    rules = DEFAULT_RULES.model_dump()
    rules["pricing"]["primary_base_price"] = 70
    assert client.put("/rules", json=rules).status_code == 200

    unchanged = client.put(f"/bookings/{booking['id']}", json={"notes": "Nut allergy"}).json()
    assert unchanged["notes"] == "Nut allergy"
    assert unchanged["total"] == 1080
    assert unchanged["pricingSnapshot"] == booking["pricingSnapshot"]

    repriced = client.post(f"/bookings/{booking['id']}/reprice").json()
    assert repriced["subtotal"] == 1050
    assert repriced["total"] == 1260
    assert repriced["depositAmount"] == 378
    assert repriced["pricingSnapshot"]["adult_base_price"] == 70


def test_guest_change_reprices(client, create_booking):
    booking = create_booking()

    updated = client.put(f"/bookings/{booking['id']}", json={"adults": 20}).json()

    assert updated["subtotal"] == 1200
    assert updated["total"] == 1440
    assert updated["depositAmount"] == 432


def test_event_date_change_moves_derived_dates(client, create_booking):
    booking = create_booking()

    updated = client.put(f"/bookings/{booking['id']}", json={"eventDate": "2099-08-10"}).json()

    assert updated["balanceDueDate"] == "2099-08-10"
    assert updated["prepPurchaseByDate"] == "2099-08-08"
    assert updated["total"] == 1080


# ============================================================================
# WORKFLOW
# ============================================================================


def test_confirm_sets_deposit_terms(client, create_booking):
    booking = _confirm(client, create_booking()["id"])

    assert booking["status"] == "confirmed"
    assert booking["pipelineStatus"] == "booked"
    assert booking["paymentStatus"] == "deposit-due"
    assert booking["depositAmount"] == 324
    assert booking["depositDueDate"] is not None
    assert booking["confirmedAt"] is not None


def test_payments_move_payment_status(client, create_booking):
    booking_id = _confirm(client, create_booking()["id"])["id"]

    deposit = client.post(f"/bookings/{booking_id}/payments", json={"amount": 324}).json()
    assert deposit["paymentStatus"] == "deposit-paid"
    assert deposit["amountPaid"] == 324
    assert deposit["balanceDueAmount"] == 756

    balance = client.post(f"/bookings/{booking_id}/payments", json={"amount": 756}).json()
    assert balance["paymentStatus"] == "paid-in-full"
    assert balance["balanceDueAmount"] == 0


def test_non_positive_payment_rejected(client, create_booking):
    booking = create_booking()
    assert client.post(f"/bookings/{booking['id']}/payments", json={"amount": 0}).status_code == 422


def test_refund(client, create_booking):
    booking_id = create_booking()["id"]
    client.post(f"/bookings/{booking_id}/payments", json={"amount": 324})

    too_much = client.post(f"/bookings/{booking_id}/refunds", json={"amount": 500})
    assert too_much.status_code == 400
    assert too_much.json()["detail"] == "Refund amount exceeds the amount paid"

    refunded = client.post(f"/bookings/{booking_id}/refunds", json={"amount": 100}).json()
    assert refunded["status"] == "cancelled"
    assert refunded["paymentStatus"] == "refunded"
    assert refunded["amountPaid"] == 224

    payment = client.post(f"/bookings/{booking_id}/payments", json={"amount": 10})
    assert payment.status_code == 400


def test_invalid_status_transition(client, create_booking):
    booking_id = create_booking()["id"]

    response = client.post(f"/bookings/{booking_id}/status", json={"status": "completed"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid status transition from 'pending' to 'completed'"


def test_completed_booking_is_locked(client, create_booking):
    booking_id = create_booking()["id"]
    assert client.post(f"/bookings/{booking_id}/status", json={"status": "confirmed"}).status_code == 200

    completed = client.post(f"/bookings/{booking_id}/status", json={"status": "completed"}).json()
    assert completed["locked"] is True
    assert completed["pipelineStatus"] == "completed"

    assert client.put(f"/bookings/{booking_id}", json={"adults": 4}).status_code == 409
    assert client.post(f"/bookings/{booking_id}/reprice").status_code == 409
    assert client.post(f"/bookings/{booking_id}/refunds", json={"amount": 1}).status_code == 409
    assert client.post(f"/bookings/{booking_id}/confirm").status_code == 400


# ============================================================================
# STAFF ASSIGNMENT
# ============================================================================


def test_assign_available_staff(client, create_booking):
    booking_id = create_booking()["id"]
    chef = _create_staff(client)

    response = client.put(
        f"/bookings/{booking_id}/staff",
        json={"assignments": [{"staffId": chef["id"], "role": "lead-chef", "estimatedPay": 234}]},
    )

    assert response.status_code == 200, response.text
    assert response.json()["staffAssignments"] == [
        {"staffId": chef["id"], "role": "lead-chef", "estimatedPay": 234, "status": "scheduled"}
    ]


def test_assign_blacked_out_staff(client, create_booking, booking_payload):
    booking_id = create_booking()["id"]
    chef = _create_staff(client, unavailableDates=[booking_payload["eventDate"]])

    response = client.put(
        f"/bookings/{booking_id}/staff",
        json={"assignments": [{"staffId": chef["id"], "role": "lead-chef"}]},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Sam Cook is not available on 2099-06-06 at 18:00"
    assert client.get(f"/bookings/{booking_id}").json()["staffAssignments"] == []


def test_assign_staff_with_stored_day_flags(client, create_booking, db_session, booking_payload):
    booking_id = create_booking()["id"]
    db_session.add(
        StaffMember(
            id="legacy-chef",
            name="Sam Cook",
            primary_role="lead-chef",
            weekly_availability={"saturday": True, "sunday": True},
            unavailable_dates=[booking_payload["eventDate"]],
        )
    )
    db_session.commit()

    response = client.put(
        f"/bookings/{booking_id}/staff",
        json={"assignments": [{"staffId": "legacy-chef", "role": "lead-chef"}]},
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Sam Cook is not available on 2099-06-06 at 18:00"


def test_assign_outside_hour_window(client, create_booking):
    booking_id = create_booking()["id"]
    chef = _create_staff(
        client, weeklyAvailability={"saturday": {"available": True, "window": {"start": "08:00", "end": "14:00"}}}
    )

    response = client.put(
        f"/bookings/{booking_id}/staff",
        json={"assignments": [{"staffId": chef["id"], "role": "lead-chef"}]},
    )
    assert response.status_code == 409


def test_assign_inactive_or_unknown_staff(client, create_booking):
    booking_id = create_booking()["id"]
    inactive = _create_staff(client, status="inactive")

    unknown = client.put(
        f"/bookings/{booking_id}/staff",
        json={"assignments": [{"staffId": "nobody", "role": "assistant"}]},
    )
    assert unknown.status_code == 404

    response = client.put(
        f"/bookings/{booking_id}/staff",
        json={"assignments": [{"staffId": inactive["id"], "role": "lead-chef"}]},
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "Sam Cook is not active"
