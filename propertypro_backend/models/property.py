from . import db
from ..statuses import UnitStatus
from ..utils.dates import utcnow


class Property(db.Model):
    __tablename__ = 'properties'

    id = db.Column(db.Integer, primary_key=True)
    landlord_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True)

    name = db.Column(db.String(100), nullable=False)
    address = db.Column(db.String(255), nullable=False, default='')
    city = db.Column(db.String(100), nullable=False, default='')
    province = db.Column(db.String(50), nullable=False, default='')
    postal_code = db.Column(db.String(10), nullable=False, default='')
    property_type = db.Column(db.String(50), nullable=False, default='Apartment')  # Apartment, House, Condo, Commercial

    created_at = db.Column(db.DateTime, default=utcnow)

    # Relationships
    units = db.relationship('Unit', backref='property', lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Property {self.id}: {self.name}>'


class Unit(db.Model):
    __tablename__ = 'units'

    id = db.Column(db.Integer, primary_key=True)
    property_id = db.Column(db.Integer, db.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False, index=True)
    unit_number = db.Column(db.String(20), nullable=False)

    # Unit details
    bedrooms = db.Column(db.Integer, nullable=False, default=0)
    bathrooms = db.Column(db.Numeric(3, 1), nullable=False, default=0)
    rent_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    square_feet = db.Column(db.Integer, nullable=True)

    # Maintained by the lease engine: Available, Occupied, UnderMaintenance
    status = db.Column(db.String(20), nullable=False, default=UnitStatus.AVAILABLE.value)

    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (db.UniqueConstraint('property_id', 'unit_number'),)

    def __repr__(self):
        return f'<Unit {self.id}: {self.unit_number} at Property {self.property_id}>'
