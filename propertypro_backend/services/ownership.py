"""Owner-scoped lookups for the tenant, unit and lease collaborators."""
from ..errors import NotFound, NotOwned
from ..models import Lease, Property, Tenant, Unit


def owned_tenant(tenant_id, landlord_id):
    tenant = Tenant.query.filter_by(id=tenant_id, landlord_id=landlord_id).first()
    if tenant is None:
        raise NotOwned("Tenant not found or not owned by you.")
    return tenant


def owned_unit(unit_id, landlord_id, lock=False):
    query = Unit.query.join(Property).filter(Unit.id == unit_id, Property.landlord_id == landlord_id)
    if lock:
        query = query.with_for_update(of=Unit)
    unit = query.first()
    if unit is None:
        raise NotOwned("Unit not found or not owned by you.")
    return unit


def owned_lease(lease_id, landlord_id):
    lease = Lease.query.filter_by(id=lease_id, landlord_id=landlord_id).first()
    if lease is None:
        raise NotFound("Lease not found.")
    return lease


def lease_is_owned(lease_id, landlord_id):
    return Lease.query.filter_by(id=lease_id, landlord_id=landlord_id).first() is not None
