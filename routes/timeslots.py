from flask import Blueprint, request, jsonify

from routes.serializers import slot_json
from scheduling import timeslots as slot_service
from utils.audit import log_event

timeslots_bp = Blueprint("timeslots", __name__, url_prefix="/api/timeslots")


def _bool_arg(name):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    return raw.strip().lower() in ("1", "true", "yes")


# ---------- THERAPIST/ADMIN: generate slots from a template ----------
@timeslots_bp.post("/generate")
def generate_slots():
    data = request.get_json(silent=True) or {}
    template_id = data.get("templateId")
    start_date = data.get("startDate")
    end_date = data.get("endDate")
    if template_id in (None, "") or not start_date or not end_date:
        return jsonify(error="templateId, startDate, endDate are required"), 400
    try:
        template_id = int(template_id)
    except (TypeError, ValueError):
        return jsonify(error="templateId must be an integer"), 400

    result = slot_service.generate_slots(template_id, start_date, end_date)

    log_event(
        "SLOTS_GENERATE", entity="template", entity_id=template_id,
        metadata={"generated": len(result.generated), "skipped": len(result.skipped)},
    )
    return jsonify(
        message=f"Generated {len(result.generated)} time slots",
        generatedSlots=[slot_json(s) for s in result.generated],
        skippedSlots=[c.as_dict() for c in result.skipped],
    ), 201


@timeslots_bp.get("/therapist/<therapist_id>")
def list_therapist_slots(therapist_id):
    slots = slot_service.list_all(
        therapist_id,
        start_date=request.args.get("startDate"),
        end_date=request.args.get("endDate"),
        is_booked=_bool_arg("isBooked"),
    )
    return jsonify([slot_json(s) for s in slots]), 200


# ---------- PATIENTS: view bookable slots ----------
@timeslots_bp.get("/available/<therapist_id>")
def list_available_slots(therapist_id):
    slots = slot_service.list_available(
        therapist_id,
        start_date=request.args.get("startDate"),
        end_date=request.args.get("endDate"),
    )
    return jsonify([slot_json(s) for s in slots]), 200


@timeslots_bp.put("/<int:slot_id>")
def update_slot(slot_id: int):
    data = request.get_json(silent=True) or {}
    keys = {"date": "date", "startTime": "start_time", "endTime": "end_time"}
    unknown = [k for k in data if k not in keys]
    if unknown:
        return jsonify(error=f"Cannot update: {', '.join(unknown)}"), 400

    slot = slot_service.update_slot(slot_id, {keys[k]: v for k, v in data.items()})
    log_event("SLOT_UPDATE", entity="slot", entity_id=slot_id, metadata=data)
    return jsonify(slot_json(slot)), 200


@timeslots_bp.delete("/<int:slot_id>")
def delete_slot(slot_id: int):
    slot_service.delete_slot(slot_id)
    log_event("SLOT_DELETE", entity="slot", entity_id=slot_id)
    return jsonify(message="Time slot deleted successfully"), 200
