from flask import Blueprint, request, jsonify

from routes.serializers import booking_json
from scheduling import bookings as booking_service
from scheduling.errors import Conflict
from utils.audit import log_event

bookings_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


def _filters():
    return {
        "status": request.args.get("status") or None,
        "start_date": request.args.get("startDate") or None,
        "end_date": request.args.get("endDate") or None,
    }


# ---------- PATIENTS: book slot (DOUBLE-BOOKING SAFE) ----------
@bookings_bp.post("")
def create_booking():
    data = request.get_json(silent=True) or {}
    patient_id = data.get("patientId")
    slot_id = data.get("timeSlotId")
    if not patient_id or slot_id in (None, ""):
        return jsonify(error="patientId and timeSlotId are required"), 400
    try:
        slot_id = int(slot_id)
    except (TypeError, ValueError):
        return jsonify(error="timeSlotId must be an integer"), 400

    try:
        booking = booking_service.create_booking(patient_id, slot_id, data.get("notes") or "")
    except Conflict:
        log_event("BOOKING_FAIL_ALREADY_BOOKED", actor_id=patient_id, entity="slot", entity_id=slot_id)
        raise

    log_event(
        "BOOKING_CREATE", actor_id=patient_id, entity="booking", entity_id=booking.id,
        metadata={"slot_id": slot_id, "booking_ref": booking.booking_ref},
    )
    return jsonify(booking_json(booking)), 201


@bookings_bp.get("/patient/<patient_id>")
def patient_bookings(patient_id):
    rows = booking_service.list_patient_bookings(patient_id, **_filters())
    return jsonify([booking_json(b) for b in rows]), 200


@bookings_bp.get("/therapist/<therapist_id>")
def therapist_bookings(therapist_id):
    rows = booking_service.list_therapist_bookings(therapist_id, **_filters())
    return jsonify([booking_json(b) for b in rows]), 200


@bookings_bp.get("/<int:booking_id>")
def get_booking(booking_id: int):
    return jsonify(booking_json(booking_service.get_booking(booking_id))), 200


@bookings_bp.get("/ref/<booking_ref>")
def get_booking_by_ref(booking_ref):
    return jsonify(booking_json(booking_service.get_booking_by_ref(booking_ref))), 200


@bookings_bp.put("/<int:booking_id>/cancel")
def cancel_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    reason = (data.get("cancellationReason") or "").strip()
    cancelled_by = data.get("cancelledBy")
    if not reason or not cancelled_by:
        return jsonify(error="cancellationReason and cancelledBy are required"), 400

    booking = booking_service.cancel_booking(booking_id, reason, cancelled_by)
    log_event(
        "BOOKING_CANCEL", actor_id=cancelled_by, entity="booking", entity_id=booking_id,
        metadata={"reason": reason},
    )
    return jsonify(booking_json(booking)), 200


@bookings_bp.put("/<int:booking_id>/status")
def update_status(booking_id: int):
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if not status:
        return jsonify(error="status required"), 400

    booking = booking_service.update_booking_status(booking_id, status)
    log_event("BOOKING_STATUS", entity="booking", entity_id=booking_id, metadata={"status": booking.status})
    return jsonify(booking_json(booking)), 200
