"""Blueprint for the /health endpoint."""

from flask import Blueprint, Response, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health() -> tuple[Response, int]:
    """Liveness probe. Open to unauthenticated callers, so it reports nothing
    beyond the process being up."""
    return jsonify({"status": "ok"}), 200
