"""
Pytest fixtures for the lease core test suite.

Provides:
- an app built from TestingConfig on in-memory SQLite
- a test client and JWT headers for landlords
- small factories for landlords, units and tenants
"""
from datetime import date
from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from propertypro_backend import create_app
from propertypro_backend.config import TestingConfig
from propertypro_backend.extensions import db
from propertypro_backend.models import Property, Tenant, Unit, User
from propertypro_backend.payloads import LeaseTerms, PaymentDetails


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_landlord(app):
    counter = {"n": 0}

    def _make(role="Landlord"):
        counter["n"] += 1
        user = User(email=f"landlord{counter['n']}@example.com", first_name="Lana",
                    last_name=f"Lord{counter['n']}", role=role)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def landlord(make_landlord):
    return make_landlord()


@pytest.fixture
def other_landlord(make_landlord):
    return make_landlord()


@pytest.fixture
def make_unit(app):
    def _make(owner, unit_number="101", property_name="Maple Court"):
        prop = Property.query.filter_by(landlord_id=owner.id, name=property_name).first()
        if prop is None:
            prop = Property(landlord_id=owner.id, name=property_name, address="12 Maple St",
                            city="Toronto", province="ON", postal_code="M5V1A1")
            db.session.add(prop)
            db.session.flush()
        unit = Unit(property_id=prop.id, unit_number=unit_number, rent_amount=Decimal("1500.00"))
        db.session.add(unit)
        db.session.commit()
        return unit

    return _make


@pytest.fixture
def make_tenant(app):
    def _make(owner, first_name="Ava", last_name="Chen"):
        tenant = Tenant(landlord_id=owner.id, first_name=first_name, last_name=last_name,
                        email=f"{first_name.lower()}.{last_name.lower()}@example.com")
        db.session.add(tenant)
        db.session.commit()
        return tenant

    return _make


@pytest.fixture
def unit(landlord, make_unit):
    return make_unit(landlord)


@pytest.fixture
def tenant(landlord, make_tenant):
    return make_tenant(landlord)


@pytest.fixture
def terms():
    def _terms(tenant, unit, start=date(2026, 1, 1), end=date(2026, 12, 31), rent="1500.00", **extra):
        return LeaseTerms(
            tenant_id=tenant.id,
            unit_id=unit.id,
            start_date=start,
            end_date=end,
            monthly_rent=Decimal(rent),
            **extra,
        )

    return _terms


@pytest.fixture
def payment_details():
    def _details(lease_id, amount="1500.00", paid_on=date(2026, 2, 1), **extra):
        values = dict(lease_id=lease_id, amount_paid=Decimal(amount), payment_date=paid_on,
                      period_month=paid_on.month, period_year=paid_on.year)
        values.update(extra)
        return PaymentDetails(**values)

    return _details


@pytest.fixture
def auth_headers(app):
    def _headers(user, role=None):
        token = create_access_token(identity=str(user.id), additional_claims={"role": role or user.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers
