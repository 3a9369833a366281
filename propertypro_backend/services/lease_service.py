"""Lease lifecycle: CRUD, status transitions and unit/tenant occupancy.

Every public function is one unit of work. Lease, Unit, Tenant and the
activity row are mutated in the same session and committed together; any
failure rolls the whole set back.
"""
from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ..errors import InvalidTransition, UnitConflict
from ..extensions import db
from ..models import Lease, LeaseActivity, Tenant, Unit
from ..statuses import CREATION_MARKER, LeaseStatus, UnitStatus, is_transition_allowed
from ..utils.dates import today_utc
from .lease_filters import filter_leases
from .ownership import owned_lease, owned_tenant, owned_unit


def _with_display_relations(query):
    return query.options(
        selectinload(Lease.tenant),
        selectinload(Lease.unit).selectinload(Unit.property),
        selectinload(Lease.activities),
    )


def _commit():
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        message = str(exc.orig)
        # a concurrent activation won the partial unique index
        if "uq_leases_unit_active" in message or "leases.unit_id" in message:
            raise UnitConflict("This unit already has an active lease.") from exc
        raise
    except Exception:
        db.session.rollback()
        raise


def _other_active_lease(unit_id, lease_id):
    return (
        Lease.query
        .filter(Lease.unit_id == unit_id,
                Lease.status == LeaseStatus.ACTIVE.value,
                Lease.id != lease_id)
        .first()
    )


def _log_activity(lease, old_status, new_status, landlord_id):
    lease.activities.append(LeaseActivity(
        old_status=getattr(old_status, "value", old_status),
        new_status=getattr(new_status, "value", new_status),
        changed_by_user_id=landlord_id,
    ))


# ----------------------------------------------------------------- occupancy

def _occupy(unit_id, tenant_id):
    unit = db.session.get(Unit, unit_id)
    if unit is not None:
        unit.status = UnitStatus.OCCUPIED.value
    tenant = db.session.get(Tenant, tenant_id)
    if tenant is not None:
        tenant.unit_id = unit_id


def _release_unit(unit_id, lease_id):
    """Mark the unit Available unless another Active lease still holds it."""
    if _other_active_lease(unit_id, lease_id) is not None:
        return
    unit = db.session.get(Unit, unit_id)
    if unit is not None:
        unit.status = UnitStatus.AVAILABLE.value
        current_app.logger.info("Unit %s released by lease %s", unit_id, lease_id)


def _clear_tenant_pointer(tenant_id, unit_id):
    tenant = db.session.get(Tenant, tenant_id)
    if tenant is not None and tenant.unit_id == unit_id:
        tenant.unit_id = None


# --------------------------------------------------------------- transitions

def _activate(lease):
    # serialize competing activations on the same unit where the backend can
    Unit.query.filter_by(id=lease.unit_id).with_for_update().first()
    if _other_active_lease(lease.unit_id, lease.id) is not None:
        raise UnitConflict("This unit already has an active lease.")
    lease.status = LeaseStatus.ACTIVE.value
    _occupy(lease.unit_id, lease.tenant_id)


def _terminate(lease):
    lease.status = LeaseStatus.TERMINATED.value
    _release_unit(lease.unit_id, lease.id)
    _clear_tenant_pointer(lease.tenant_id, lease.unit_id)


def _reset_to_pending(lease):
    lease.status = LeaseStatus.PENDING.value


TRANSITION_EFFECTS = {
    LeaseStatus.ACTIVE: _activate,
    LeaseStatus.TERMINATED: _terminate,
    LeaseStatus.PENDING: _reset_to_pending,
}


# -------------------------------------------------------------------- reads

def list_leases(landlord_id, search=None, status=None, today=None):
    today = today or today_utc()
    query = _with_display_relations(Lease.query.filter(Lease.landlord_id == landlord_id))
    query = filter_leases(query, search=search, status=status, today=today)
    leases = query.order_by(Lease.created_at.desc(), Lease.id.desc()).all()
    return [lease.serialize(today) for lease in leases]


def get_lease(lease_id, landlord_id, today=None):
    return owned_lease(lease_id, landlord_id).serialize(today)


# ------------------------------------------------------------------- writes

def create_lease(landlord_id, terms):
    """Create a Pending lease and its creation activity."""
    owned_tenant(terms.tenant_id, landlord_id)
    owned_unit(terms.unit_id, landlord_id)

    lease = Lease(
        landlord_id=landlord_id,
        tenant_id=terms.tenant_id,
        unit_id=terms.unit_id,
        start_date=terms.start_date,
        end_date=terms.end_date,
        monthly_rent=terms.monthly_rent,
        security_deposit=terms.security_deposit,
        payment_frequency=terms.payment_frequency,
        status=LeaseStatus.PENDING.value,
        notes=terms.notes,
    )
    _log_activity(lease, CREATION_MARKER, LeaseStatus.PENDING, landlord_id)
    db.session.add(lease)
    _commit()

    current_app.logger.info("Lease %s created for unit %s by landlord %s", lease.id, lease.unit_id, landlord_id)
    return lease.serialize()


def update_lease(lease_id, landlord_id, terms):
    """Replace the lease terms; status is left alone.

    An Active lease carries its occupancy along when it moves to another
    unit or tenant.
    """
    lease = owned_lease(lease_id, landlord_id)
    new_tenant = owned_tenant(terms.tenant_id, landlord_id)
    owned_unit(terms.unit_id, landlord_id, lock=lease.is_active)

    old_tenant_id, old_unit_id = lease.tenant_id, lease.unit_id

    if lease.is_active and old_unit_id != terms.unit_id:
        if _other_active_lease(terms.unit_id, lease.id) is not None:
            raise UnitConflict("The new unit already has an active lease.")
        _release_unit(old_unit_id, lease.id)
        _clear_tenant_pointer(old_tenant_id, old_unit_id)
        _occupy(terms.unit_id, new_tenant.id)
        current_app.logger.info("Lease %s moved from unit %s to unit %s", lease.id, old_unit_id, terms.unit_id)
    elif lease.is_active and old_tenant_id != terms.tenant_id:
        _clear_tenant_pointer(old_tenant_id, old_unit_id)
        new_tenant.unit_id = old_unit_id

    lease.tenant_id = terms.tenant_id
    lease.unit_id = terms.unit_id
    lease.start_date = terms.start_date
    lease.end_date = terms.end_date
    lease.monthly_rent = terms.monthly_rent
    lease.security_deposit = terms.security_deposit
    lease.payment_frequency = terms.payment_frequency
    lease.notes = terms.notes
    _commit()

    return lease.serialize()


def delete_lease(lease_id, landlord_id):
    lease = owned_lease(lease_id, landlord_id)
    if lease.is_active:
        _release_unit(lease.unit_id, lease.id)
        _clear_tenant_pointer(lease.tenant_id, lease.unit_id)

    db.session.delete(lease)
    _commit()
    current_app.logger.info("Lease %s deleted by landlord %s", lease_id, landlord_id)


def change_lease_status(lease_id, landlord_id, new_status, today=None):
    """Move a lease to ``new_status`` if the transition table allows it."""
    today = today or today_utc()
    lease = owned_lease(lease_id, landlord_id)

    current = lease.effective_status(today)
    target = LeaseStatus.parse(new_status)
    if not is_transition_allowed(current, target):
        raise InvalidTransition(current, new_status)

    TRANSITION_EFFECTS[target](lease)
    _log_activity(lease, current, target, landlord_id)
    _commit()

    current_app.logger.info(
        "Lease %s status %s -> %s by landlord %s", lease_id, current.value, target.value, landlord_id
    )
    return lease.serialize(today)
