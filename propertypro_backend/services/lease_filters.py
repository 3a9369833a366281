"""Read-side predicates over leases and payments.

Effective status is never stored, so the Month-to-Month and Active filters
are expressed against ``status`` and ``end_date`` for the given day.
"""
from sqlalchemy import and_, func, or_

from ..models import Lease, Payment, Property, Tenant, Unit
from ..statuses import LeaseStatus


def status_predicate(status, today):
    if status == LeaseStatus.MONTH_TO_MONTH.value:
        return and_(Lease.status == LeaseStatus.ACTIVE.value, Lease.end_date <= today)
    if status == LeaseStatus.ACTIVE.value:
        return and_(Lease.status == LeaseStatus.ACTIVE.value, Lease.end_date > today)
    return Lease.status == status


def search_predicate(term):
    term = term.strip().lower()
    return or_(
        func.lower(Tenant.first_name).contains(term, autoescape=True),
        func.lower(Tenant.last_name).contains(term, autoescape=True),
        func.lower(Unit.unit_number).contains(term, autoescape=True),
        func.lower(Property.name).contains(term, autoescape=True),
    )


def filter_leases(query, search=None, status=None, today=None):
    """Apply the optional status and free-text filters to a Lease query."""
    if status and status.strip():
        query = query.filter(status_predicate(status.strip(), today))
    if search and search.strip():
        query = (
            query.join(Tenant, Lease.tenant_id == Tenant.id)
            .join(Unit, Lease.unit_id == Unit.id)
            .join(Property, Unit.property_id == Property.id)
            .filter(search_predicate(search))
        )
    return query


def filter_payments(query, lease_id=None, status=None, date_from=None, date_to=None):
    if lease_id is not None:
        query = query.filter(Payment.lease_id == lease_id)
    if status and status.strip():
        query = query.filter(Payment.status == status.strip())
    if date_from is not None:
        query = query.filter(Payment.payment_date >= date_from)
    if date_to is not None:
        query = query.filter(Payment.payment_date <= date_to)
    return query
