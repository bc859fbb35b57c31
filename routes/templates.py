from flask import Blueprint, request, jsonify

from routes.serializers import template_json
from scheduling import templates as template_service
from utils.audit import log_event

templates_bp = Blueprint("templates", __name__, url_prefix="/api/templates")

# request key -> template field
_FIELDS = {
    "dayOfWeek": "day_of_week",
    "startTime": "start_time",
    "endTime": "end_time",
    "sessionDuration": "session_duration",
    "breakTime": "break_time",
}


@templates_bp.post("")
def create_template():
    data = request.get_json(silent=True) or {}
    required = ["therapistId", "dayOfWeek", "startTime", "endTime", "sessionDuration", "breakTime"]
    missing = [k for k in required if data.get(k) in (None, "")]
    if missing:
        return jsonify(error=f"{', '.join(missing)} required"), 400

    t = template_service.create_template(
        therapist_id=data["therapistId"],
        day_of_week=data["dayOfWeek"],
        start_time=data["startTime"],
        end_time=data["endTime"],
        session_duration=data["sessionDuration"],
        break_time=data["breakTime"],
    )
    log_event("TEMPLATE_CREATE", actor_id=t.therapist_id, entity="template", entity_id=t.id)
    return jsonify(template_json(t)), 201


@templates_bp.get("/therapist/<therapist_id>")
def list_templates(therapist_id):
    return jsonify([template_json(t) for t in template_service.list_templates(therapist_id)]), 200


@templates_bp.put("/<int:template_id>")
def update_template(template_id: int):
    data = request.get_json(silent=True) or {}
    unknown = [k for k in data if k not in _FIELDS]
    if unknown:
        return jsonify(error=f"Cannot update: {', '.join(unknown)}"), 400

    changes = {_FIELDS[k]: v for k, v in data.items()}
    t = template_service.update_template(template_id, changes)
    log_event("TEMPLATE_UPDATE", actor_id=t.therapist_id, entity="template", entity_id=t.id, metadata=data)
    return jsonify(template_json(t)), 200


@templates_bp.delete("/<int:template_id>")
def delete_template(template_id: int):
    t = template_service.delete_template(template_id)
    log_event("TEMPLATE_DELETE", actor_id=t.therapist_id, entity="template", entity_id=template_id)
    return jsonify(message="Template deleted successfully"), 200
