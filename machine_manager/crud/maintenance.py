"""Maintenance ledger with the last-maintenance-date bookkeeping."""

from __future__ import annotations

import logging

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, ValidationError, require_fields
from ..models.machine import Machine
from ..models.maintenance import MaintenanceRecord
from ..services.aggregates import record_maintenance_date, utcnow
from .machines import MACHINE_NOT_FOUND

logger = logging.getLogger(__name__)

RECORD_NOT_FOUND = "Maintenance record not found"

REQUIRED_FIELDS = {
    "machine_id": "MachineId",
    "type": "Type",
    "description": "Description",
    "performed_date": "PerformedDate",
    "performed_by": "PerformedBy",
    "cost": "Cost",
}
OPTIONAL_FIELDS = ("next_due_date", "notes")


def _clean(payload: dict) -> dict:
    data: dict = {}
    for key in (*REQUIRED_FIELDS, *OPTIONAL_FIELDS):
        value = payload.get(key)
        if isinstance(value, str):
            value = value.strip()
            if key in OPTIONAL_FIELDS and not value:
                value = None
        data[key] = value
    require_fields(data, REQUIRED_FIELDS)
    try:
        data["machine_id"] = int(data["machine_id"])
    except (TypeError, ValueError) as exc:
        raise ValidationError("MachineId must be an integer") from exc
    try:
        data["cost"] = float(data["cost"])
    except (TypeError, ValueError) as exc:
        raise ValidationError("Cost must be a number") from exc
    if data["cost"] < 0:
        raise ValidationError("Cost must not be negative")
    return data


def _ensure_machine(db: Session, machine_id: int) -> None:
    if db.get(Machine, machine_id) is None:
        raise NotFoundError(MACHINE_NOT_FOUND)


def list_maintenance_records(db: Session) -> list[MaintenanceRecord]:
    """Every record across all machines, newest performed date first.

    Each row exposes ``machine_name``/``machine_model`` through the joined
    ``machine`` relationship.
    """

    stmt = select(MaintenanceRecord).order_by(desc(MaintenanceRecord.performed_date), desc(MaintenanceRecord.id))
    return db.execute(stmt).scalars().unique().all()


def list_machine_maintenance(db: Session, machine_id: int) -> list[MaintenanceRecord]:
    stmt = (
        select(MaintenanceRecord)
        .where(MaintenanceRecord.machine_id == machine_id)
        .order_by(desc(MaintenanceRecord.performed_date), desc(MaintenanceRecord.id))
    )
    return db.execute(stmt).scalars().unique().all()


def get_maintenance_record(db: Session, record_id: int) -> MaintenanceRecord:
    record = db.get(MaintenanceRecord, record_id)
    if not record:
        raise NotFoundError(RECORD_NOT_FOUND)
    return record


def create_maintenance_record(db: Session, payload: dict) -> MaintenanceRecord:
    """Log a service event and stamp its date onto the machine.

    The record and the machine's ``last_maintenance_date`` are committed
    together; if either write fails neither is kept.
    """

    data = _clean(payload)
    _ensure_machine(db, data["machine_id"])

    record = MaintenanceRecord(**data, created_at=utcnow())
    try:
        db.add(record)
        db.flush()
        record_maintenance_date(db, record.machine_id, record.performed_date)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    logger.info(
        "maintenance.created",
        extra={"extra_data": {"record_id": record.id, "machine_id": record.machine_id}},
    )
    return record


def update_maintenance_record(db: Session, record_id: int, payload: dict) -> MaintenanceRecord:
    # The machine's last_maintenance_date is deliberately left as it is here.
    record = get_maintenance_record(db, record_id)
    data = _clean(payload)
    if data["machine_id"] != record.machine_id:
        _ensure_machine(db, data["machine_id"])

    for key, value in data.items():
        setattr(record, key, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    logger.info("maintenance.updated", extra={"extra_data": {"record_id": record.id}})
    return record


def delete_maintenance_record(db: Session, record_id: int) -> None:
    record = get_maintenance_record(db, record_id)
    db.delete(record)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("maintenance.deleted", extra={"extra_data": {"record_id": record_id}})
