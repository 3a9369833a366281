from . import db
from ..statuses import DEFAULT_PAYMENT_METHOD, PaymentStatus
from ..utils.dates import isoformat_or_none, utcnow


class Payment(db.Model):
    __tablename__ = 'payments'

    id = db.Column(db.Integer, primary_key=True)
    lease_id = db.Column(db.Integer, db.ForeignKey('leases.id', ondelete='CASCADE'), nullable=False, index=True)
    landlord_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True)

    # Payment details
    amount_paid = db.Column(db.Numeric(10, 2), nullable=False)
    payment_date = db.Column(db.Date, nullable=False, index=True)
    payment_method = db.Column(db.String(30), nullable=False, default=DEFAULT_PAYMENT_METHOD)
    status = db.Column(db.String(20), nullable=False, default=PaymentStatus.PAID.value)  # Paid, Partial, Late, Pending

    # Billing period the payment applies to
    period_month = db.Column(db.Integer, nullable=False)
    period_year = db.Column(db.Integer, nullable=False)

    late_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    notes = db.Column(db.String(500), nullable=True)
    receipt_number = db.Column(db.String(30), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    lease = db.relationship('Lease', back_populates='payments')

    __table_args__ = (
        db.UniqueConstraint('landlord_id', 'receipt_number', name='uq_payments_landlord_receipt'),
        db.CheckConstraint('period_month BETWEEN 1 AND 12', name='ck_payments_period_month'),
    )

    def __repr__(self):
        return f'<Payment {self.id}: {self.receipt_number} ${self.amount_paid} - {self.status}>'

    def serialize(self):
        lease = self.lease
        tenant = lease.tenant if lease else None
        unit = lease.unit if lease else None
        return {
            "id": self.id,
            "lease_id": self.lease_id,
            "tenant_id": lease.tenant_id if lease else None,
            "tenant_first_name": tenant.first_name if tenant else None,
            "tenant_last_name": tenant.last_name if tenant else None,
            "unit_id": lease.unit_id if lease else None,
            "unit_number": unit.unit_number if unit else None,
            "property_name": unit.property.name if unit and unit.property else None,
            "amount_paid": float(self.amount_paid),
            "payment_date": self.payment_date.isoformat(),
            "payment_method": self.payment_method,
            "status": self.status,
            "period_month": self.period_month,
            "period_year": self.period_year,
            "late_fee": float(self.late_fee or 0),
            "notes": self.notes,
            "receipt_number": self.receipt_number,
            "created_at": isoformat_or_none(self.created_at),
        }


class ReceiptCounter(db.Model):
    """Per-landlord, per-day receipt sequence."""

    __tablename__ = 'receipt_counters'

    landlord_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True)
    day = db.Column(db.Date, primary_key=True)
    last_seq = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<ReceiptCounter {self.landlord_id} {self.day}: {self.last_seq}>'
