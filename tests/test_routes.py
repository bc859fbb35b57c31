from datetime import date, timedelta

from models.audit_log import AuditLog
from scheduling.timeutil import day_name


def _next_week():
    start = date.today() + timedelta(days=1)
    return start, start + timedelta(days=6)


def _create_template(client, **overrides):
    start, _ = _next_week()
    body = {
        "therapistId": "t-42",
        "dayOfWeek": day_name(start).value,
        "startTime": "09:00",
        "endTime": "10:10",
        "sessionDuration": 30,
        "breakTime": 10,
    }
    body.update(overrides)
    return client.post("/api/templates", json=body)


def _generate(client, template_id):
    start, end = _next_week()
    return client.post("/api/timeslots/generate", json={
        "templateId": template_id,
        "startDate": start.isoformat(),
        "endDate": end.isoformat(),
    })


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "OK"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_template_crud(client):
    resp = _create_template(client)
    assert resp.status_code == 201
    template = resp.get_json()
    assert template["startTime"] == "09:00"

    resp = client.put(f"/api/templates/{template['id']}", json={"breakTime": 0})
    assert resp.status_code == 200
    assert resp.get_json()["breakTime"] == 0

    listed = client.get("/api/templates/therapist/t-42").get_json()
    assert [t["id"] for t in listed] == [template["id"]]

    assert client.delete(f"/api/templates/{template['id']}").status_code == 200
    assert client.get("/api/templates/therapist/t-42").get_json() == []
    assert client.delete(f"/api/templates/{template['id']}").status_code == 404


def test_template_validation_errors(client):
    assert _create_template(client, sessionDuration=5).status_code == 400
    assert _create_template(client, endTime="08:00").status_code == 400
    assert client.post("/api/templates", json={"therapistId": "t-42"}).status_code == 400

    template_id = _create_template(client).get_json()["id"]
    resp = client.put(f"/api/templates/{template_id}", json={"therapistId": "other"})
    assert resp.status_code == 400


def test_generate_and_list_slots(client):
    template_id = _create_template(client).get_json()["id"]

    resp = _generate(client, template_id)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "Generated 2 time slots"
    assert [s["startTime"] for s in body["generatedSlots"]] == ["09:00", "09:40"]
    assert body["skippedSlots"] == []

    again = _generate(client, template_id).get_json()
    assert again["generatedSlots"] == []
    assert len(again["skippedSlots"]) == 2

    available = client.get("/api/timeslots/available/t-42").get_json()
    assert [s["endTime"] for s in available] == ["09:30", "10:10"]
    assert client.get("/api/timeslots/therapist/t-42?isBooked=true").get_json() == []

    assert _generate(client, 999).status_code == 404
    assert client.post("/api/timeslots/generate", json={"templateId": template_id}).status_code == 400


def test_booking_lifecycle_over_http(client):
    template_id = _create_template(client).get_json()["id"]
    slot_id = _generate(client, template_id).get_json()["generatedSlots"][0]["id"]

    resp = client.post("/api/bookings", json={"patientId": "p-1", "timeSlotId": slot_id, "notes": "hi"})
    assert resp.status_code == 201
    booking = resp.get_json()
    assert booking["status"] == "confirmed"
    assert booking["sessionStartTime"] == "09:00"

    clash = client.post("/api/bookings", json={"patientId": "p-2", "timeSlotId": slot_id})
    assert clash.status_code == 409
    assert clash.get_json()["error"] == "Time slot already booked"

    booked = client.get("/api/timeslots/therapist/t-42?isBooked=true").get_json()
    assert [s["bookedBy"] for s in booked] == ["p-1"]

    assert client.get(f"/api/bookings/{booking['id']}").get_json()["bookingId"] == booking["bookingId"]
    assert client.get(f"/api/bookings/ref/{booking['bookingId']}").status_code == 200
    assert client.get("/api/bookings/9999").status_code == 404

    resp = client.put(f"/api/bookings/{booking['id']}/cancel", json={})
    assert resp.status_code == 400
    resp = client.put(f"/api/bookings/{booking['id']}/cancel",
                      json={"cancellationReason": "sick", "cancelledBy": "p-1"})
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "cancelled"
    again = client.put(f"/api/bookings/{booking['id']}/cancel",
                       json={"cancellationReason": "sick", "cancelledBy": "p-1"})
    assert again.status_code == 409

    rebook = client.post("/api/bookings", json={"patientId": "p-2", "timeSlotId": slot_id})
    assert rebook.status_code == 201
    new_id = rebook.get_json()["id"]

    resp = client.put(f"/api/bookings/{new_id}/status", json={"status": "completed"})
    assert resp.status_code == 200
    assert client.put(f"/api/bookings/{new_id}/status", json={"status": "cancelled"}).status_code == 400

    mine = client.get("/api/bookings/patient/p-2?status=completed").get_json()
    assert [b["id"] for b in mine] == [new_id]
    theirs = client.get("/api/bookings/therapist/t-42").get_json()
    assert [b["status"] for b in theirs] == ["cancelled", "completed"]

    actions = [row.action for row in AuditLog.query.order_by(AuditLog.id).all()]
    assert "BOOKING_CREATE" in actions
    assert "BOOKING_FAIL_ALREADY_BOOKED" in actions
    assert "BOOKING_CANCEL" in actions


def test_booking_request_validation(client):
    assert client.post("/api/bookings", json={"patientId": "p-1"}).status_code == 400
    assert client.post("/api/bookings", json={"patientId": "p-1", "timeSlotId": "abc"}).status_code == 400
    assert client.post("/api/bookings", json={"patientId": "p-1", "timeSlotId": 12345}).status_code == 404
    assert client.post("/api/bookings", json={"patientId": "p-1", "timeSlotId": ""}).status_code == 400


def test_zero_ids_are_looked_up_not_reported_missing(client):
    resp = client.post("/api/bookings", json={"patientId": "p-1", "timeSlotId": 0})
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Time slot not found"

    start, end = _next_week()
    resp = client.post("/api/timeslots/generate", json={
        "templateId": 0,
        "startDate": start.isoformat(),
        "endDate": end.isoformat(),
    })
    assert resp.status_code == 404


def test_slot_edit_and_delete_over_http(client):
    template_id = _create_template(client).get_json()["id"]
    first, second = _generate(client, template_id).get_json()["generatedSlots"]

    resp = client.put(f"/api/timeslots/{first['id']}", json={"startTime": "08:00", "endTime": "08:30"})
    assert resp.status_code == 200
    assert resp.get_json()["startTime"] == "08:00"
    assert client.put(f"/api/timeslots/{first['id']}", json={"isBooked": True}).status_code == 400

    client.post("/api/bookings", json={"patientId": "p-1", "timeSlotId": second["id"]})
    assert client.delete(f"/api/timeslots/{second['id']}").status_code == 409
    assert client.delete(f"/api/timeslots/{first['id']}").status_code == 200
    assert client.delete(f"/api/timeslots/{first['id']}").status_code == 404
