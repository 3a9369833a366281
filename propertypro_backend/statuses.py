"""Closed status vocabularies and the lease transition table.

Stored lease statuses are Pending, Active and Terminated. Month-to-Month is
never stored: it is the effective status of an Active lease whose end date
has been reached, recomputed on every read.
"""
from datetime import date
from enum import Enum
from typing import FrozenSet, Optional


class LeaseStatus(str, Enum):
    PENDING = "Pending"
    ACTIVE = "Active"
    TERMINATED = "Terminated"
    MONTH_TO_MONTH = "Month-to-Month"

    @classmethod
    def parse(cls, value) -> Optional["LeaseStatus"]:
        try:
            return cls(value)
        except ValueError:
            return None


STORED_LEASE_STATUSES = (LeaseStatus.PENDING, LeaseStatus.ACTIVE, LeaseStatus.TERMINATED)

# Creation activities use this as their old status.
CREATION_MARKER = "—"

LEASE_TRANSITIONS = {
    LeaseStatus.PENDING: frozenset({LeaseStatus.ACTIVE}),
    LeaseStatus.ACTIVE: frozenset({LeaseStatus.TERMINATED}),
    LeaseStatus.MONTH_TO_MONTH: frozenset({LeaseStatus.TERMINATED}),
    LeaseStatus.TERMINATED: frozenset({LeaseStatus.ACTIVE, LeaseStatus.PENDING}),
}


class UnitStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    UNDER_MAINTENANCE = "UnderMaintenance"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    PARTIAL = "Partial"
    LATE = "Late"
    PENDING = "Pending"


PAYMENT_METHODS = ("E-Transfer", "Cash", "Cheque", "Bank Transfer", "Credit Card", "Other")
DEFAULT_PAYMENT_METHOD = "E-Transfer"
DEFAULT_PAYMENT_FREQUENCY = "Monthly"


def effective_status(status, end_date: date, today: date) -> LeaseStatus:
    """Status shown to users: Active leases on or past their end date read as Month-to-Month."""
    status = LeaseStatus(status)
    if status is LeaseStatus.ACTIVE and end_date <= today:
        return LeaseStatus.MONTH_TO_MONTH
    return status


def allowed_targets(current: LeaseStatus) -> FrozenSet[LeaseStatus]:
    return LEASE_TRANSITIONS.get(current, frozenset())


def is_transition_allowed(current: LeaseStatus, target: Optional[LeaseStatus]) -> bool:
    return target is not None and target in allowed_targets(current)
