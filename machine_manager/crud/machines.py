"""Equipment registry: create, read, update and delete machine records."""

from __future__ import annotations

import logging

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import ConflictError, NotFoundError, ValidationError, require_fields
from ..models.machine import Machine
from ..models.maintenance import MaintenanceRecord
from ..models.usage_log import UsageLog
from ..services.aggregates import utcnow

logger = logging.getLogger(__name__)

MACHINE_NOT_FOUND = "Machine not found"
SERIAL_CONFLICT = "Serial number already exists"

# attribute -> wire name, in the order errors should list them
REQUIRED_FIELDS = {
    "name": "Name",
    "model": "Model",
    "serial_number": "SerialNumber",
    "type": "Type",
    "status": "Status",
    "purchase_date": "PurchaseDate",
    "purchase_price": "PurchasePrice",
}
OPTIONAL_FIELDS = ("notes",)


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
        data["purchase_price"] = float(data["purchase_price"])
    except (TypeError, ValueError) as exc:
        raise ValidationError("PurchasePrice must be a number") from exc
    if data["purchase_price"] < 0:
        raise ValidationError("PurchasePrice must not be negative")
    return data


def _serial_owner(db: Session, serial_number: str) -> int | None:
    stmt = select(Machine.id).where(Machine.serial_number == serial_number)
    return db.execute(stmt).scalars().first()


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        # serial_number is the only unique column a client can collide on
        if "unique" in str(exc.orig).lower():
            raise ConflictError(SERIAL_CONFLICT) from exc
        raise


def list_machines(db: Session) -> list[Machine]:
    stmt = select(Machine).order_by(Machine.name)
    return db.execute(stmt).scalars().all()


def get_machine(db: Session, machine_id: int) -> Machine:
    machine = db.get(Machine, machine_id)
    if not machine:
        raise NotFoundError(MACHINE_NOT_FOUND)
    return machine


def get_machine_detail(db: Session, machine_id: int) -> Machine:
    """Fetch a machine together with its full maintenance and usage history.

    The histories are attached as ``maintenance_history`` (newest performed
    date first) and ``usage_history`` (newest start time first).
    """
    machine = get_machine(db, machine_id)
    maintenance = db.execute(
        select(MaintenanceRecord)
        .where(MaintenanceRecord.machine_id == machine.id)
        .order_by(desc(MaintenanceRecord.performed_date), desc(MaintenanceRecord.id))
    ).scalars().all()
    usage = db.execute(
        select(UsageLog)
        .where(UsageLog.machine_id == machine.id)
        .order_by(desc(UsageLog.start_time), desc(UsageLog.id))
    ).scalars().all()
    setattr(machine, "maintenance_history", list(maintenance))
    setattr(machine, "usage_history", list(usage))
    return machine


def get_machine_by_serial(db: Session, serial_number: str) -> Machine:
    stmt = select(Machine).where(Machine.serial_number == serial_number)
    machine = db.execute(stmt).scalars().first()
    if not machine:
        raise NotFoundError(MACHINE_NOT_FOUND)
    return machine


def create_machine(db: Session, payload: dict) -> Machine:
    data = _clean(payload)
    if _serial_owner(db, data["serial_number"]) is not None:
        raise ConflictError(SERIAL_CONFLICT)

    machine = Machine(
        **data,
        operating_hours=0,
        last_maintenance_date=None,
        created_at=utcnow(),
    )
    db.add(machine)
    _commit(db)
    db.refresh(machine)
    logger.info(
        "machine.created",
        extra={"extra_data": {"machine_id": machine.id, "serial_number": machine.serial_number}},
    )
    return machine


def update_machine(db: Session, machine_id: int, payload: dict) -> Machine:
    """Overwrite every client-editable field of a machine.

    ``operating_hours`` and ``last_maintenance_date`` belong to the ledgers
    and are left alone even if the payload carries them.
    """
    machine = get_machine(db, machine_id)
    data = _clean(payload)
    owner = _serial_owner(db, data["serial_number"])
    if owner is not None and owner != machine.id:
        raise ConflictError(SERIAL_CONFLICT)

    for key, value in data.items():
        setattr(machine, key, value)
    machine.updated_at = utcnow()
    _commit(db)
    db.refresh(machine)
    logger.info("machine.updated", extra={"extra_data": {"machine_id": machine.id}})
    return machine


def delete_machine(db: Session, machine_id: int) -> None:
    """Delete a machine; its maintenance records and usage logs go with it."""
    machine = get_machine(db, machine_id)
    db.delete(machine)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("machine.deleted", extra={"extra_data": {"machine_id": machine_id}})
