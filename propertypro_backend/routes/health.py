from flask import Blueprint, jsonify

from ..utils.dates import utcnow

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    return jsonify(
        {
            "status": "ok",
            "time": utcnow().isoformat() + "Z",
            "service": "propertypro-backend",
        }
    ), 200
