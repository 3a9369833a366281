# propertypro_backend/cli.py
# Development helpers: `flask seed-demo`, `flask issue-token`.
from decimal import Decimal

import click
from flask_jwt_extended import create_access_token

from .extensions import db
from .models import Property, Tenant, Unit, User

DEMO_EMAIL = "landlord@example.com"


def ensure_demo_data():
    """Upsert a demo landlord with one property, two units and two tenants."""
    landlord = User.query.filter_by(email=DEMO_EMAIL).first()
    if not landlord:
        landlord = User(email=DEMO_EMAIL, first_name="Demo", last_name="Landlord", role="Landlord")
        db.session.add(landlord)
        db.session.flush()

    prop = Property.query.filter_by(landlord_id=landlord.id, name="Maple Court").first()
    if not prop:
        prop = Property(
            landlord_id=landlord.id, name="Maple Court", address="12 Maple St",
            city="Toronto", province="ON", postal_code="M5V 1A1", property_type="Apartment",
        )
        prop.units = [
            Unit(unit_number="101", bedrooms=1, bathrooms=Decimal("1.0"), rent_amount=Decimal("1500.00")),
            Unit(unit_number="102", bedrooms=2, bathrooms=Decimal("1.5"), rent_amount=Decimal("1900.00")),
        ]
        db.session.add(prop)

    for first, last in (("Ava", "Chen"), ("Liam", "Patel")):
        email = f"{first.lower()}.{last.lower()}@example.com"
        if not Tenant.query.filter_by(landlord_id=landlord.id, email=email).first():
            db.session.add(Tenant(landlord_id=landlord.id, first_name=first, last_name=last, email=email))

    db.session.commit()
    return landlord


def register_cli(app):
    @app.cli.command("seed-demo")
    def seed_demo():
        """Create demo landlord data and print an access token."""
        landlord = ensure_demo_data()
        token = create_access_token(identity=str(landlord.id), additional_claims={"role": landlord.role})
        click.echo(f"Demo landlord ensured: {landlord.email} (id={landlord.id})")
        click.echo(f"Access token: {token}")

    @app.cli.command("issue-token")
    @click.argument("user_id", type=int)
    @click.option("--role", default=None, help="Override the role claim.")
    def issue_token(user_id, role):
        """Mint a development access token for an existing user."""
        user = db.session.get(User, user_id)
        if user is None:
            raise click.ClickException(f"User {user_id} not found")
        click.echo(create_access_token(identity=str(user.id), additional_claims={"role": role or user.role}))
