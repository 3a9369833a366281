from ..extensions import db

from . import hooks  # noqa: F401

# Collaborator models
from .user import User
from .property import Property, Unit
from .tenant import Tenant

# Lease core
from .lease import Lease, LeaseActivity
from .payment import Payment, ReceiptCounter

__all__ = [
    "db", "User", "Property", "Unit", "Tenant",
    "Lease", "LeaseActivity", "Payment", "ReceiptCounter",
]
