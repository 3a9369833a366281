from flask import Blueprint, jsonify, request

from ..payloads import LeaseTerms
from ..security import LANDLORD_ROLES, current_landlord_id, roles_required
from ..services import lease_service, payment_service

bp = Blueprint("leases", __name__)


@bp.get("/leases")
@roles_required(*LANDLORD_ROLES)
def list_leases():
    """List the caller's leases, optionally filtered by search text and status"""
    leases = lease_service.list_leases(
        current_landlord_id(),
        search=request.args.get("search"),
        status=request.args.get("status"),
    )
    return jsonify(leases), 200


@bp.get("/leases/<int:lease_id>")
@roles_required(*LANDLORD_ROLES)
def get_lease(lease_id):
    return jsonify(lease_service.get_lease(lease_id, current_landlord_id())), 200


@bp.post("/leases")
@roles_required(*LANDLORD_ROLES)
def create_lease():
    """Create a new lease in Pending status"""
    terms = LeaseTerms.from_json(request.get_json(silent=True))
    lease = lease_service.create_lease(current_landlord_id(), terms)
    return jsonify(lease), 201


@bp.put("/leases/<int:lease_id>")
@roles_required(*LANDLORD_ROLES)
def update_lease(lease_id):
    terms = LeaseTerms.from_json(request.get_json(silent=True))
    return jsonify(lease_service.update_lease(lease_id, current_landlord_id(), terms)), 200


@bp.delete("/leases/<int:lease_id>")
@roles_required(*LANDLORD_ROLES)
def delete_lease(lease_id):
    lease_service.delete_lease(lease_id, current_landlord_id())
    return "", 204


@bp.post("/leases/<int:lease_id>/status")
@roles_required(*LANDLORD_ROLES)
def change_lease_status(lease_id):
    """Transition a lease to the requested status"""
    data = request.get_json(silent=True) or {}
    lease = lease_service.change_lease_status(lease_id, current_landlord_id(), data.get("status"))
    return jsonify(lease), 200


@bp.get("/leases/<int:lease_id>/payments")
@roles_required(*LANDLORD_ROLES)
def list_lease_payments(lease_id):
    return jsonify(payment_service.list_payments_for_lease(lease_id, current_landlord_id())), 200
