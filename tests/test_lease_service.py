"""
Tests for services.lease_service: lifecycle and unit occupancy.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from propertypro_backend.errors import InvalidTransition, NotFound, NotOwned, UnitConflict
from propertypro_backend.extensions import db
from propertypro_backend.models import Lease, LeaseActivity, Tenant, Unit
from propertypro_backend.services import lease_service
from propertypro_backend.utils.dates import today_utc

MID_TERM = date(2026, 6, 1)


def _fresh(model, pk):
    db.session.expire_all()
    return db.session.get(model, pk)


def _activate(lease_id, landlord):
    return lease_service.change_lease_status(lease_id, landlord.id, "Active", today=MID_TERM)


def _assert_occupancy_consistent():
    """Unit is Occupied exactly when some Active lease references it."""
    db.session.expire_all()
    for unit in Unit.query.all():
        has_active = Lease.query.filter_by(unit_id=unit.id, status="Active").count() > 0
        assert (unit.status == "Occupied") == has_active, unit


# ---------------------------------------------------------------------------
# Create / get
# ---------------------------------------------------------------------------

def test_create_lease_starts_pending_with_one_activity(landlord, tenant, unit, terms):
    created = lease_service.create_lease(landlord.id, terms(tenant, unit))

    fetched = lease_service.get_lease(created["id"], landlord.id, today=MID_TERM)
    assert fetched["status"] == "Pending"
    assert fetched["tenant_id"] == tenant.id
    assert fetched["unit_id"] == unit.id
    assert fetched["monthly_rent"] == 1500.0
    assert fetched["tenant_first_name"] == "Ava"
    assert fetched["unit_number"] == "101"
    assert fetched["property_name"] == "Maple Court"
    assert len(fetched["activities"]) == 1
    assert fetched["activities"][0]["old_status"] == "—"
    assert fetched["activities"][0]["new_status"] == "Pending"
    assert fetched["activities"][0]["changed_by_user_id"] == landlord.id


def test_create_lease_ignores_dates_and_never_occupies(landlord, tenant, unit, terms):
    today = today_utc()
    lease = lease_service.create_lease(
        landlord.id, terms(tenant, unit, start=today - timedelta(days=30), end=today + timedelta(days=300))
    )
    assert lease["status"] == "Pending"
    assert _fresh(Unit, unit.id).status == "Available"
    assert _fresh(Tenant, tenant.id).unit_id is None


def test_create_lease_rejects_foreign_tenant(landlord, other_landlord, make_tenant, unit, terms):
    stranger = make_tenant(other_landlord, first_name="Sam")
    with pytest.raises(NotOwned):
        lease_service.create_lease(landlord.id, terms(stranger, unit))
    assert Lease.query.count() == 0


def test_create_lease_rejects_foreign_unit(landlord, other_landlord, make_unit, tenant, terms):
    foreign_unit = make_unit(other_landlord, property_name="Elm House")
    with pytest.raises(NotOwned):
        lease_service.create_lease(landlord.id, terms(tenant, foreign_unit))
    assert LeaseActivity.query.count() == 0


def test_get_lease_of_another_landlord_is_not_found(landlord, other_landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    with pytest.raises(NotFound):
        lease_service.get_lease(lease["id"], other_landlord.id)


# ---------------------------------------------------------------------------
# Scenarios A, B, C
# ---------------------------------------------------------------------------

def test_activation_occupies_unit_and_points_tenant(landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))

    result = _activate(lease["id"], landlord)

    assert result["status"] == "Active"
    assert _fresh(Unit, unit.id).status == "Occupied"
    assert _fresh(Tenant, tenant.id).unit_id == unit.id
    assert len(result["activities"]) == 2
    newest = result["activities"][0]
    assert (newest["old_status"], newest["new_status"]) == ("Pending", "Active")


def test_second_lease_on_occupied_unit_cannot_activate(landlord, tenant, make_tenant, unit, terms):
    first = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(first["id"], landlord)
    other_tenant = make_tenant(landlord, first_name="Liam", last_name="Patel")
    second = lease_service.create_lease(landlord.id, terms(other_tenant, unit))

    with pytest.raises(UnitConflict):
        _activate(second["id"], landlord)
    db.session.rollback()

    assert _fresh(Lease, first["id"]).status == "Active"
    assert _fresh(Lease, second["id"]).status == "Pending"
    assert _fresh(Tenant, tenant.id).unit_id == unit.id
    assert _fresh(Tenant, other_tenant.id).unit_id is None
    assert len(lease_service.get_lease(second["id"], landlord.id)["activities"]) == 1


def test_termination_frees_unit_and_clears_tenant(landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(lease["id"], landlord)

    result = lease_service.change_lease_status(lease["id"], landlord.id, "Terminated", today=MID_TERM)

    assert result["status"] == "Terminated"
    assert _fresh(Unit, unit.id).status == "Available"
    assert _fresh(Tenant, tenant.id).unit_id is None
    newest = result["activities"][0]
    assert (newest["old_status"], newest["new_status"]) == ("Active", "Terminated")
    assert [a["new_status"] for a in result["activities"]] == ["Terminated", "Active", "Pending"]


# ---------------------------------------------------------------------------
# Transition law and derived status
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("target", ["Terminated", "Pending", "Month-to-Month", "Expired", None])
def test_illegal_transition_from_pending_changes_nothing(landlord, tenant, unit, terms, target):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))

    with pytest.raises(InvalidTransition) as excinfo:
        lease_service.change_lease_status(lease["id"], landlord.id, target, today=MID_TERM)

    assert excinfo.value.from_status == "Pending"
    assert excinfo.value.to_status == str(target)
    assert _fresh(Lease, lease["id"]).status == "Pending"
    assert _fresh(Unit, unit.id).status == "Available"
    assert LeaseActivity.query.filter_by(lease_id=lease["id"]).count() == 1


def test_month_to_month_lease_can_only_be_terminated(landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(lease["id"], landlord)
    after_end = date(2027, 2, 1)

    assert lease_service.get_lease(lease["id"], landlord.id, today=after_end)["status"] == "Month-to-Month"
    with pytest.raises(InvalidTransition) as excinfo:
        lease_service.change_lease_status(lease["id"], landlord.id, "Active", today=after_end)
    assert excinfo.value.from_status == "Month-to-Month"

    result = lease_service.change_lease_status(lease["id"], landlord.id, "Terminated", today=after_end)
    assert result["activities"][0]["old_status"] == "Month-to-Month"
    assert _fresh(Unit, unit.id).status == "Available"


def test_derived_status_uses_end_date(landlord, tenant, make_tenant, unit, make_unit, terms):
    today = today_utc()
    expired = lease_service.create_lease(
        landlord.id, terms(tenant, unit, start=today - timedelta(days=365), end=today - timedelta(days=1)))
    other_unit = make_unit(landlord, unit_number="102")
    current = lease_service.create_lease(
        landlord.id, terms(make_tenant(landlord, first_name="Liam"), other_unit,
                           start=today - timedelta(days=30), end=today + timedelta(days=1)))
    lease_service.change_lease_status(expired["id"], landlord.id, "Active")
    lease_service.change_lease_status(current["id"], landlord.id, "Active")

    assert lease_service.get_lease(expired["id"], landlord.id)["status"] == "Month-to-Month"
    assert lease_service.get_lease(current["id"], landlord.id)["status"] == "Active"

    by_id = {lease["id"]: lease["status"] for lease in lease_service.list_leases(landlord.id)}
    assert by_id == {expired["id"]: "Month-to-Month", current["id"]: "Active"}


def test_terminated_lease_can_be_reset_to_pending_without_side_effects(landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(lease["id"], landlord)
    lease_service.change_lease_status(lease["id"], landlord.id, "Terminated", today=MID_TERM)

    result = lease_service.change_lease_status(lease["id"], landlord.id, "Pending", today=MID_TERM)

    assert result["status"] == "Pending"
    assert _fresh(Unit, unit.id).status == "Available"
    assert _fresh(Tenant, tenant.id).unit_id is None


def test_terminated_lease_reactivation_respects_unit_exclusivity(landlord, tenant, make_tenant, unit, terms):
    first = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(first["id"], landlord)
    lease_service.change_lease_status(first["id"], landlord.id, "Terminated", today=MID_TERM)
    second = lease_service.create_lease(landlord.id, terms(make_tenant(landlord, first_name="Liam"), unit))
    _activate(second["id"], landlord)

    with pytest.raises(UnitConflict):
        _activate(first["id"], landlord)
    db.session.rollback()
    assert _fresh(Lease, first["id"]).status == "Terminated"


def test_database_rejects_two_active_leases_on_one_unit(landlord, tenant, make_tenant, unit, terms):
    first = lease_service.create_lease(landlord.id, terms(tenant, unit))
    second = lease_service.create_lease(landlord.id, terms(make_tenant(landlord, first_name="Liam"), unit))

    db.session.get(Lease, first["id"]).status = "Active"
    db.session.get(Lease, second["id"]).status = "Active"
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def test_update_replaces_terms_and_keeps_status(landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))

    updated = lease_service.update_lease(
        lease["id"], landlord.id,
        terms(tenant, unit, rent="1650.00", security_deposit=Decimal("800.00"), notes="renewed"))

    assert updated["monthly_rent"] == 1650.0
    assert updated["security_deposit"] == 800.0
    assert updated["notes"] == "renewed"
    assert _fresh(Lease, lease["id"]).status == "Pending"


def test_update_active_lease_moves_occupancy_to_new_unit(landlord, tenant, unit, make_unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(lease["id"], landlord)
    new_unit = make_unit(landlord, unit_number="202")

    lease_service.update_lease(lease["id"], landlord.id, terms(tenant, new_unit))

    assert _fresh(Unit, unit.id).status == "Available"
    assert _fresh(Unit, new_unit.id).status == "Occupied"
    assert _fresh(Tenant, tenant.id).unit_id == new_unit.id
    _assert_occupancy_consistent()


def test_update_active_lease_onto_occupied_unit_conflicts(landlord, tenant, make_tenant, unit, make_unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(lease["id"], landlord)
    busy_unit = make_unit(landlord, unit_number="202")
    other = lease_service.create_lease(landlord.id, terms(make_tenant(landlord, first_name="Liam"), busy_unit))
    _activate(other["id"], landlord)

    with pytest.raises(UnitConflict):
        lease_service.update_lease(lease["id"], landlord.id, terms(tenant, busy_unit))
    db.session.rollback()

    assert _fresh(Lease, lease["id"]).unit_id == unit.id
    assert _fresh(Unit, unit.id).status == "Occupied"
    assert _fresh(Tenant, tenant.id).unit_id == unit.id


def test_update_active_lease_swaps_tenant_pointer(landlord, tenant, make_tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(lease["id"], landlord)
    newcomer = make_tenant(landlord, first_name="Liam", last_name="Patel")

    lease_service.update_lease(lease["id"], landlord.id, terms(newcomer, unit))

    assert _fresh(Tenant, tenant.id).unit_id is None
    assert _fresh(Tenant, newcomer.id).unit_id == unit.id
    assert _fresh(Unit, unit.id).status == "Occupied"


def test_update_pending_lease_does_not_touch_occupancy(landlord, tenant, unit, make_unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    new_unit = make_unit(landlord, unit_number="202")

    lease_service.update_lease(lease["id"], landlord.id, terms(tenant, new_unit))

    assert _fresh(Unit, new_unit.id).status == "Available"
    assert _fresh(Tenant, tenant.id).unit_id is None


def test_update_missing_lease_is_not_found(landlord, tenant, unit, terms):
    with pytest.raises(NotFound):
        lease_service.update_lease(999, landlord.id, terms(tenant, unit))


def test_update_with_foreign_unit_is_not_owned(landlord, other_landlord, tenant, unit, make_unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    foreign_unit = make_unit(other_landlord, property_name="Elm House")
    with pytest.raises(NotOwned):
        lease_service.update_lease(lease["id"], landlord.id, terms(tenant, foreign_unit))


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

def test_delete_active_lease_frees_unit_and_cascades(landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    _activate(lease["id"], landlord)

    lease_service.delete_lease(lease["id"], landlord.id)

    assert _fresh(Lease, lease["id"]) is None
    assert LeaseActivity.query.filter_by(lease_id=lease["id"]).count() == 0
    assert _fresh(Unit, unit.id).status == "Available"
    assert _fresh(Tenant, tenant.id).unit_id is None


def test_delete_foreign_lease_is_not_found(landlord, other_landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit))
    with pytest.raises(NotFound):
        lease_service.delete_lease(lease["id"], other_landlord.id)
    assert _fresh(Lease, lease["id"]) is not None


# ---------------------------------------------------------------------------
# Occupancy invariant over a sequence of operations
# ---------------------------------------------------------------------------

def test_occupancy_stays_consistent_across_operations(landlord, make_tenant, make_unit, terms):
    units = [make_unit(landlord, unit_number=n) for n in ("1", "2", "3")]
    tenants = [make_tenant(landlord, first_name=n) for n in ("Ann", "Ben", "Cal")]

    a = lease_service.create_lease(landlord.id, terms(tenants[0], units[0]))
    b = lease_service.create_lease(landlord.id, terms(tenants[1], units[1]))
    c = lease_service.create_lease(landlord.id, terms(tenants[2], units[0]))
    _assert_occupancy_consistent()

    _activate(a["id"], landlord)
    _activate(b["id"], landlord)
    _assert_occupancy_consistent()

    lease_service.update_lease(b["id"], landlord.id, terms(tenants[1], units[2]))
    _assert_occupancy_consistent()

    lease_service.change_lease_status(a["id"], landlord.id, "Terminated", today=MID_TERM)
    _activate(c["id"], landlord)
    _assert_occupancy_consistent()

    lease_service.delete_lease(c["id"], landlord.id)
    lease_service.delete_lease(b["id"], landlord.id)
    _assert_occupancy_consistent()
    assert {u.status for u in Unit.query.all()} == {"Available"}


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

def test_list_leases_newest_first_with_id_tiebreak(landlord, make_tenant, make_unit, terms):
    leases = [
        lease_service.create_lease(
            landlord.id, terms(make_tenant(landlord, first_name=name), make_unit(landlord, unit_number=number)))
        for name, number in (("Ann", "1"), ("Ben", "2"), ("Cal", "3"))
    ]
    first, second, third = (db.session.get(Lease, lease["id"]) for lease in leases)
    first.created_at = second.created_at = datetime(2026, 3, 1, 9, 0)
    third.created_at = datetime(2026, 3, 2, 9, 0)
    db.session.commit()

    listed = [lease["id"] for lease in lease_service.list_leases(landlord.id, today=MID_TERM)]
    again = [lease["id"] for lease in lease_service.list_leases(landlord.id, today=MID_TERM)]

    assert listed == [third.id, second.id, first.id]
    assert again == listed


def test_lease_ending_today_filters_as_month_to_month(landlord, tenant, unit, terms):
    lease = lease_service.create_lease(landlord.id, terms(tenant, unit, end=MID_TERM))
    _activate(lease["id"], landlord)

    assert lease_service.get_lease(lease["id"], landlord.id, today=MID_TERM)["status"] == "Month-to-Month"
    month_to_month = lease_service.list_leases(landlord.id, status="Month-to-Month", today=MID_TERM)
    assert [l["id"] for l in month_to_month] == [lease["id"]]
    assert lease_service.list_leases(landlord.id, status="Active", today=MID_TERM) == []

    day_before = MID_TERM - timedelta(days=1)
    active = lease_service.list_leases(landlord.id, status="Active", today=day_before)
    assert [l["id"] for l in active] == [lease["id"]]
