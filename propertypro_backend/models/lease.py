from . import db
from ..statuses import DEFAULT_PAYMENT_FREQUENCY, LeaseStatus, effective_status
from ..utils.dates import isoformat_or_none, today_utc, utcnow

ACTIVE_ONLY = db.text("status = 'Active'")


class Lease(db.Model):
    __tablename__ = 'leases'

    id = db.Column(db.Integer, primary_key=True)
    landlord_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id', ondelete='RESTRICT'), nullable=False, index=True)
    unit_id = db.Column(db.Integer, db.ForeignKey('units.id', ondelete='RESTRICT'), nullable=False, index=True)

    # Lease Terms
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)

    # Financial Terms
    monthly_rent = db.Column(db.Numeric(10, 2), nullable=False)
    security_deposit = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    payment_frequency = db.Column(db.String(20), nullable=False, default=DEFAULT_PAYMENT_FREQUENCY)

    # Stored status: Pending, Active, Terminated. Month-to-Month is derived on read.
    status = db.Column(db.String(20), nullable=False, default=LeaseStatus.PENDING.value)

    notes = db.Column(db.String(1000), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    # Relationships
    tenant = db.relationship('Tenant', foreign_keys=[tenant_id])
    unit = db.relationship('Unit', foreign_keys=[unit_id])
    activities = db.relationship(
        'LeaseActivity', back_populates='lease', lazy=True, cascade='all, delete-orphan',
        order_by=lambda: [LeaseActivity.changed_at.desc(), LeaseActivity.id.desc()],
    )
    payments = db.relationship('Payment', back_populates='lease', lazy=True, cascade='all, delete-orphan')

    __table_args__ = (
        # At most one Active lease per unit, enforced by the database
        db.Index('uq_leases_unit_active', 'unit_id', unique=True,
                 sqlite_where=ACTIVE_ONLY, postgresql_where=ACTIVE_ONLY),
        db.CheckConstraint("status IN ('Pending', 'Active', 'Terminated')", name='ck_leases_status'),
    )

    def __repr__(self):
        return f'<Lease {self.id}: unit {self.unit_id} {self.status}>'

    def effective_status(self, today=None):
        return effective_status(self.status, self.end_date, today or today_utc())

    @property
    def is_active(self):
        return self.status == LeaseStatus.ACTIVE.value

    def serialize(self, today=None):
        unit = self.unit
        tenant = self.tenant
        activities = sorted(self.activities, key=lambda a: (a.changed_at, a.id or 0), reverse=True)
        return {
            'id': self.id,
            'tenant_id': self.tenant_id,
            'tenant_first_name': tenant.first_name if tenant else None,
            'tenant_last_name': tenant.last_name if tenant else None,
            'tenant_email': tenant.email if tenant else None,
            'unit_id': self.unit_id,
            'unit_number': unit.unit_number if unit else None,
            'property_id': unit.property_id if unit else None,
            'property_name': unit.property.name if unit and unit.property else None,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'monthly_rent': float(self.monthly_rent),
            'security_deposit': float(self.security_deposit or 0),
            'payment_frequency': self.payment_frequency,
            'status': self.effective_status(today).value,
            'notes': self.notes,
            'created_at': isoformat_or_none(self.created_at),
            'activities': [activity.serialize() for activity in activities],
        }


class LeaseActivity(db.Model):
    """Append-only record of one lease status change."""

    __tablename__ = 'lease_activities'

    id = db.Column(db.Integer, primary_key=True)
    lease_id = db.Column(db.Integer, db.ForeignKey('leases.id', ondelete='CASCADE'), nullable=False, index=True)
    old_status = db.Column(db.String(30), nullable=False)
    new_status = db.Column(db.String(30), nullable=False)
    changed_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    changed_by_user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True)

    lease = db.relationship('Lease', back_populates='activities')

    def __repr__(self):
        return f'<LeaseActivity {self.id}: {self.old_status} -> {self.new_status}>'

    def serialize(self):
        return {
            'id': self.id,
            'old_status': self.old_status,
            'new_status': self.new_status,
            'changed_at': isoformat_or_none(self.changed_at),
            'changed_by_user_id': self.changed_by_user_id,
        }
