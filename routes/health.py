from flask import Blueprint, jsonify

from utils.clock import utcnow

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    return jsonify(status="OK", service="therapyslot", timestamp=utcnow().isoformat()), 200
