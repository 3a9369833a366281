"""Payments recorded against owned leases. Never touches occupancy."""
from flask import current_app
from sqlalchemy.orm import selectinload

from ..errors import NotFound, NotOwned
from ..extensions import db
from ..models import Lease, Payment, Unit
from ..utils.dates import today_utc
from .lease_filters import filter_payments
from .ownership import lease_is_owned
from .receipts import next_receipt_number


def _with_display_relations(query):
    return query.options(
        selectinload(Payment.lease).selectinload(Lease.tenant),
        selectinload(Payment.lease).selectinload(Lease.unit).selectinload(Unit.property),
    )


def _owned_payment(payment_id, landlord_id):
    payment = Payment.query.filter_by(id=payment_id, landlord_id=landlord_id).first()
    if payment is None:
        raise NotFound("Payment not found.")
    return payment


def _require_owned_lease(lease_id, landlord_id):
    if not lease_is_owned(lease_id, landlord_id):
        raise NotOwned("Lease not found or not owned by you.")


def _commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def list_payments(landlord_id, lease_id=None, status=None, date_from=None, date_to=None):
    query = _with_display_relations(Payment.query.filter(Payment.landlord_id == landlord_id))
    query = filter_payments(query, lease_id=lease_id, status=status, date_from=date_from, date_to=date_to)
    payments = query.order_by(Payment.payment_date.desc(), Payment.id.desc()).all()
    return [payment.serialize() for payment in payments]


def list_payments_for_lease(lease_id, landlord_id):
    """Payments of one lease; a lease the caller does not own yields []."""
    if not lease_is_owned(lease_id, landlord_id):
        return []
    return list_payments(landlord_id, lease_id=lease_id)


def get_payment(payment_id, landlord_id):
    return _owned_payment(payment_id, landlord_id).serialize()


def create_payment(landlord_id, details, today=None):
    _require_owned_lease(details.lease_id, landlord_id)

    payment = Payment(
        lease_id=details.lease_id,
        landlord_id=landlord_id,
        amount_paid=details.amount_paid,
        payment_date=details.payment_date,
        payment_method=details.payment_method,
        status=details.status,
        period_month=details.period_month,
        period_year=details.period_year,
        late_fee=details.late_fee,
        notes=details.notes,
        receipt_number=next_receipt_number(landlord_id, today or today_utc()),
    )
    db.session.add(payment)
    _commit()

    current_app.logger.info(
        "Payment %s recorded on lease %s with receipt %s", payment.id, payment.lease_id, payment.receipt_number
    )
    return payment.serialize()


def update_payment(payment_id, landlord_id, details):
    """Replace payment fields; the receipt number is kept."""
    payment = _owned_payment(payment_id, landlord_id)
    _require_owned_lease(details.lease_id, landlord_id)

    payment.lease_id = details.lease_id
    payment.amount_paid = details.amount_paid
    payment.payment_date = details.payment_date
    payment.payment_method = details.payment_method
    payment.status = details.status
    payment.period_month = details.period_month
    payment.period_year = details.period_year
    payment.late_fee = details.late_fee
    payment.notes = details.notes
    _commit()

    return payment.serialize()


def delete_payment(payment_id, landlord_id):
    payment = _owned_payment(payment_id, landlord_id)
    db.session.delete(payment)
    _commit()
    current_app.logger.info("Payment %s deleted by landlord %s", payment_id, landlord_id)
