"""Receipt numbers: ``RCP-YYYYMMDD-NNN`` with a per-landlord daily sequence.

The sequence lives in ``receipt_counters`` and is advanced with a single
``UPDATE ... SET last_seq = last_seq + 1`` so two payments recorded at the
same time never draw the same number. The first payment of the day inserts
the row inside a savepoint; if a concurrent request inserted it first, the
update is retried.
"""
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import ReceiptCounter

RECEIPT_PREFIX = "RCP"


def format_receipt_number(day, seq):
    return f"{RECEIPT_PREFIX}-{day:%Y%m%d}-{seq:03d}"


def _bump(landlord_id, day):
    stmt = (
        update(ReceiptCounter)
        .where(ReceiptCounter.landlord_id == landlord_id, ReceiptCounter.day == day)
        .values(last_seq=ReceiptCounter.last_seq + 1)
        .execution_options(synchronize_session=False)
    )
    return db.session.execute(stmt).rowcount


def next_sequence(landlord_id, day):
    """Advance and return the landlord's counter for ``day`` (first call returns 1)."""
    if not _bump(landlord_id, day):
        try:
            with db.session.begin_nested():
                db.session.add(ReceiptCounter(landlord_id=landlord_id, day=day, last_seq=1))
            return 1
        except IntegrityError:
            _bump(landlord_id, day)

    return db.session.execute(
        select(ReceiptCounter.last_seq)
        .where(ReceiptCounter.landlord_id == landlord_id, ReceiptCounter.day == day)
    ).scalar_one()


def next_receipt_number(landlord_id, day):
    return format_receipt_number(day, next_sequence(landlord_id, day))
