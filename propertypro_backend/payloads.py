"""Request body parsing for the lease and payment endpoints.

Each ``from_json`` raises ``ValidationError`` with a message naming the
offending field, so routes can hand the parsed object straight to a service.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from .errors import ValidationError
from .statuses import (
    DEFAULT_PAYMENT_FREQUENCY,
    DEFAULT_PAYMENT_METHOD,
    PAYMENT_METHODS,
    PaymentStatus,
)
from .utils.dates import parse_date

MONEY_LIMIT = Decimal("100000000")
PAYMENT_STATUSES = tuple(s.value for s in PaymentStatus)


def _require(data, fields):
    for field in fields:
        if field not in data or data[field] is None or data[field] == "":
            raise ValidationError(f"{field} is required")


def _int(data, field):
    value = data[field]
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer")


def _money(data, field, default=None):
    value = data.get(field)
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field} is required")
        return default
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field} must be a non-negative number")
    try:
        amount = amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError(f"{field} must be less than {MONEY_LIMIT:,}")
    # Numeric(10, 2) columns
    if amount >= MONEY_LIMIT:
        raise ValidationError(f"{field} must be less than {MONEY_LIMIT:,}")
    return amount


def _choice(data, field, allowed, default):
    value = data.get(field)
    if value is None or value == "":
        return default
    if not isinstance(value, str) or value not in allowed:
        raise ValidationError(f"{field} must be one of: {', '.join(allowed)}")
    return value


def _date(data, field):
    try:
        return parse_date(data[field])
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD)")


def _text(data, field, max_length):
    value = data.get(field)
    if value is None:
        return None
    value = str(value).strip()
    if len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value or None


@dataclass
class LeaseTerms:
    tenant_id: int
    unit_id: int
    start_date: date
    end_date: date
    monthly_rent: Decimal
    security_deposit: Decimal = Decimal("0.00")
    payment_frequency: str = DEFAULT_PAYMENT_FREQUENCY
    notes: Optional[str] = None

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, dict):
            raise ValidationError("request body must be a JSON object")
        _require(data, ["tenant_id", "unit_id", "start_date", "end_date", "monthly_rent"])

        start_date = _date(data, "start_date")
        end_date = _date(data, "end_date")
        if start_date >= end_date:
            raise ValidationError("End date must be after start date")

        frequency = _text(data, "payment_frequency", 20) or DEFAULT_PAYMENT_FREQUENCY
        return cls(
            tenant_id=_int(data, "tenant_id"),
            unit_id=_int(data, "unit_id"),
            start_date=start_date,
            end_date=end_date,
            monthly_rent=_money(data, "monthly_rent"),
            security_deposit=_money(data, "security_deposit", Decimal("0.00")),
            payment_frequency=frequency,
            notes=_text(data, "notes", 1000),
        )


@dataclass
class PaymentDetails:
    lease_id: int
    amount_paid: Decimal
    payment_date: date
    period_month: int
    period_year: int
    payment_method: str = DEFAULT_PAYMENT_METHOD
    status: str = PaymentStatus.PAID.value
    late_fee: Decimal = Decimal("0.00")
    notes: Optional[str] = None

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, dict):
            raise ValidationError("request body must be a JSON object")
        _require(data, ["lease_id", "amount_paid", "payment_date", "period_month", "period_year"])

        period_month = _int(data, "period_month")
        if not 1 <= period_month <= 12:
            raise ValidationError("period_month must be between 1 and 12")
        period_year = _int(data, "period_year")
        if not 1900 <= period_year <= 9999:
            raise ValidationError("period_year is out of range")

        method = _choice(data, "payment_method", PAYMENT_METHODS, DEFAULT_PAYMENT_METHOD)
        status = _choice(data, "status", PAYMENT_STATUSES, PaymentStatus.PAID.value)

        return cls(
            lease_id=_int(data, "lease_id"),
            amount_paid=_money(data, "amount_paid"),
            payment_date=_date(data, "payment_date"),
            period_month=period_month,
            period_year=period_year,
            payment_method=method,
            status=status,
            late_fee=_money(data, "late_fee", Decimal("0.00")),
            notes=_text(data, "notes", 500),
        )
