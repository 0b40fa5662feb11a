"""Tests for the maintenance ledger and the last-maintenance-date rule."""

import sys
from pathlib import Path

import pytest
from sqlalchemy import func, select

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from machine_manager.core.errors import NotFoundError, ValidationError
from machine_manager.crud.machines import create_machine, get_machine
from machine_manager.crud.maintenance import (
    create_maintenance_record,
    delete_maintenance_record,
    get_maintenance_record,
    list_machine_maintenance,
    list_maintenance_records,
    update_maintenance_record,
)
from machine_manager.db.session import Database
from machine_manager.models.maintenance import MaintenanceRecord


@pytest.fixture()
def db_session():
    database = Database("sqlite://")
    database.create_all()
    session = database.session()
    try:
        yield session
    finally:
        session.close()
        database.dispose()


@pytest.fixture()
def mower(db_session):
    return create_machine(
        db_session,
        {
            "name": "John Deere X350",
            "model": "X350",
            "serial_number": "JD-X350-2023-001",
            "type": "Mower",
            "status": "Active",
            "purchase_date": "2023-05-15",
            "purchase_price": 3499.99,
        },
    )


def _record(machine_id, **overrides):
    payload = {
        "machine_id": machine_id,
        "type": "OilChange",
        "description": "Regular oil change",
        "performed_date": "2024-01-15",
        "performed_by": "John Smith",
        "cost": 25.0,
    }
    payload.update(overrides)
    return payload


def test_create_sets_last_maintenance_date(db_session, mower):
    record = create_maintenance_record(db_session, _record(mower.id, next_due_date="2024-04-15"))

    assert record.id is not None
    assert record.next_due_date == "2024-04-15"
    machine = get_machine(db_session, mower.id)
    assert machine.last_maintenance_date == "2024-01-15"
    assert machine.updated_at is not None


def test_create_takes_the_latest_created_date_even_if_older(db_session, mower):
    create_maintenance_record(db_session, _record(mower.id, performed_date="2024-03-01"))
    create_maintenance_record(db_session, _record(mower.id, performed_date="2024-02-01"))

    assert get_machine(db_session, mower.id).last_maintenance_date == "2024-02-01"


def test_create_against_unknown_machine_writes_nothing(db_session):
    with pytest.raises(NotFoundError) as excinfo:
        create_maintenance_record(db_session, _record(999))

    assert str(excinfo.value) == "Machine not found"
    count = db_session.execute(select(func.count()).select_from(MaintenanceRecord)).scalar_one()
    assert count == 0


def test_create_requires_fields(db_session, mower):
    with pytest.raises(ValidationError) as excinfo:
        create_maintenance_record(db_session, _record(mower.id, performed_by="", cost=None))

    assert "PerformedBy" in str(excinfo.value)
    assert "Cost" in str(excinfo.value)
    assert get_machine(db_session, mower.id).last_maintenance_date is None


def test_zero_cost_is_accepted(db_session, mower):
    record = create_maintenance_record(db_session, _record(mower.id, cost=0))
    assert record.cost == 0


def test_list_all_is_annotated_and_newest_first(db_session, mower):
    trimmer = create_machine(
        db_session,
        {
            "name": "Stihl FS 56 RC-E",
            "model": "FS 56 RC-E",
            "serial_number": "STIHL-FS56-2023-002",
            "type": "Trimmer",
            "status": "Active",
            "purchase_date": "2023-06-01",
            "purchase_price": 199.99,
        },
    )
    create_maintenance_record(db_session, _record(mower.id, performed_date="2024-01-15"))
    create_maintenance_record(db_session, _record(trimmer.id, performed_date="2024-02-20"))

    records = list_maintenance_records(db_session)

    assert [r.performed_date for r in records] == ["2024-02-20", "2024-01-15"]
    assert records[0].machine_name == "Stihl FS 56 RC-E"
    assert records[0].machine_model == "FS 56 RC-E"
    assert records[1].machine_name == "John Deere X350"
    assert [r.machine_id for r in list_machine_maintenance(db_session, trimmer.id)] == [trimmer.id]
    assert list_machine_maintenance(db_session, 12345) == []


def test_update_overwrites_without_recomputing_machine_date(db_session, mower):
    record = create_maintenance_record(db_session, _record(mower.id))

    updated = update_maintenance_record(
        db_session,
        record.id,
        _record(mower.id, performed_date="2024-05-01", description="Oil and filter", notes="Synthetic"),
    )

    assert updated.performed_date == "2024-05-01"
    assert updated.description == "Oil and filter"
    assert updated.notes == "Synthetic"
    assert get_machine(db_session, mower.id).last_maintenance_date == "2024-01-15"


def test_update_unknown_record_or_machine_is_not_found(db_session, mower):
    with pytest.raises(NotFoundError) as excinfo:
        update_maintenance_record(db_session, 404, _record(mower.id))
    assert str(excinfo.value) == "Maintenance record not found"

    record = create_maintenance_record(db_session, _record(mower.id))
    with pytest.raises(NotFoundError):
        update_maintenance_record(db_session, record.id, _record(999))
    assert get_maintenance_record(db_session, record.id).machine_id == mower.id


def test_delete_keeps_machine_date(db_session, mower):
    record = create_maintenance_record(db_session, _record(mower.id))

    delete_maintenance_record(db_session, record.id)

    with pytest.raises(NotFoundError):
        get_maintenance_record(db_session, record.id)
    assert get_machine(db_session, mower.id).last_maintenance_date == "2024-01-15"


def test_delete_unknown_record_is_not_found(db_session):
    with pytest.raises(NotFoundError):
        delete_maintenance_record(db_session, 1)
