from . import db
from ..utils.dates import utcnow


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    email = db.Column(db.String(100), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(50), nullable=False, default="")
    last_name = db.Column(db.String(50), nullable=False, default="")

    # Landlord | Admin | Tenant
    role = db.Column(db.String(20), nullable=False, default="Landlord")

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
