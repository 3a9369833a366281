# propertypro_backend/security.py
from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

LANDLORD_ROLES = ("Landlord", "Admin")


def _claimed_roles(claims):
    roles = claims.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    role = claims.get("role")
    if role:
        roles = list(roles) + [role]
    return set(roles)


def roles_required(*allowed):
    """Usage: @roles_required("Landlord", "Admin")"""
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if not _claimed_roles(get_jwt()) & set(allowed):
                return jsonify({"msg": "forbidden"}), 403
            return fn(*args, **kwargs)
        return wrapper
    return deco


def current_landlord_id() -> int:
    # identity is the user id, stored as a string in "sub"
    return int(get_jwt_identity())
