from flask import Blueprint, jsonify, request

from ..errors import ValidationError
from ..payloads import PaymentDetails
from ..security import LANDLORD_ROLES, current_landlord_id, roles_required
from ..services import payment_service
from ..utils.dates import parse_date

bp = Blueprint("payments", __name__)


def _date_arg(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_date(value)
    except (ValueError, OverflowError):
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")


@bp.get("/payments")
@roles_required(*LANDLORD_ROLES)
def list_payments():
    """Get the caller's payments with optional filtering"""
    lease_id = request.args.get("lease_id")
    if lease_id is not None and not lease_id.isdigit():
        raise ValidationError("lease_id must be an integer")

    payments = payment_service.list_payments(
        current_landlord_id(),
        lease_id=int(lease_id) if lease_id else None,
        status=request.args.get("status"),
        date_from=_date_arg("from"),
        date_to=_date_arg("to"),
    )
    return jsonify(payments), 200


@bp.get("/payments/<int:payment_id>")
@roles_required(*LANDLORD_ROLES)
def get_payment(payment_id):
    return jsonify(payment_service.get_payment(payment_id, current_landlord_id())), 200


@bp.post("/payments")
@roles_required(*LANDLORD_ROLES)
def create_payment():
    """Record a payment and assign its receipt number"""
    details = PaymentDetails.from_json(request.get_json(silent=True))
    return jsonify(payment_service.create_payment(current_landlord_id(), details)), 201


@bp.put("/payments/<int:payment_id>")
@roles_required(*LANDLORD_ROLES)
def update_payment(payment_id):
    details = PaymentDetails.from_json(request.get_json(silent=True))
    return jsonify(payment_service.update_payment(payment_id, current_landlord_id(), details)), 200


@bp.delete("/payments/<int:payment_id>")
@roles_required(*LANDLORD_ROLES)
def delete_payment(payment_id):
    payment_service.delete_payment(payment_id, current_landlord_id())
    return "", 204
