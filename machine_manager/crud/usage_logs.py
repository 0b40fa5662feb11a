"""Usage ledger with the operating-hours bookkeeping."""

from __future__ import annotations

import logging

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError, ValidationError, require_fields
from ..models.machine import Machine
from ..models.usage_log import UsageLog
from ..services.aggregates import adjust_operating_hours, apply_usage_hours, revert_usage_hours, round_hours, utcnow
from .machines import MACHINE_NOT_FOUND

logger = logging.getLogger(__name__)

LOG_NOT_FOUND = "Usage log not found"

REQUIRED_FIELDS = {
    "machine_id": "MachineId",
    "operator_name": "OperatorName",
    "start_time": "StartTime",
    "end_time": "EndTime",
    "hours_used": "HoursUsed",
    "job_description": "JobDescription",
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
        data["machine_id"] = int(data["machine_id"])
    except (TypeError, ValueError) as exc:
        raise ValidationError("MachineId must be an integer") from exc
    try:
        data["hours_used"] = float(data["hours_used"])
    except (TypeError, ValueError) as exc:
        raise ValidationError("HoursUsed must be a number") from exc
    if data["hours_used"] < 0:
        raise ValidationError("HoursUsed must not be negative")
    return data


def _ensure_machine(db: Session, machine_id: int) -> None:
    if db.get(Machine, machine_id) is None:
        raise NotFoundError(MACHINE_NOT_FOUND)


def list_usage_logs(db: Session) -> list[UsageLog]:
    stmt = select(UsageLog).order_by(desc(UsageLog.start_time), desc(UsageLog.id))
    return db.execute(stmt).scalars().unique().all()


def list_machine_usage(db: Session, machine_id: int) -> list[UsageLog]:
    stmt = (
        select(UsageLog)
        .where(UsageLog.machine_id == machine_id)
        .order_by(desc(UsageLog.start_time), desc(UsageLog.id))
    )
    return db.execute(stmt).scalars().unique().all()


def get_usage_log(db: Session, log_id: int) -> UsageLog:
    log = db.get(UsageLog, log_id)
    if not log:
        raise NotFoundError(LOG_NOT_FOUND)
    return log


def create_usage_log(db: Session, payload: dict) -> UsageLog:
    """Record a usage session and add its rounded hours to the machine."""

    data = _clean(payload)
    _ensure_machine(db, data["machine_id"])

    log = UsageLog(**data, created_at=utcnow())
    try:
        db.add(log)
        db.flush()
        applied = apply_usage_hours(db, log.machine_id, log.hours_used)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(log)
    logger.info(
        "usage.created",
        extra={"extra_data": {"log_id": log.id, "machine_id": log.machine_id, "hours_applied": applied}},
    )
    return log


def update_usage_log(db: Session, log_id: int, payload: dict) -> UsageLog:
    """Overwrite a usage log and move the cached hours by the difference.

    When the log stays on the same machine, that machine moves by
    ``round(new - old)``. When it is reassigned, the previous machine gives
    back ``round(old)`` and the new one gains ``round(new)``.
    """

    log = get_usage_log(db, log_id)
    data = _clean(payload)
    old_machine_id = log.machine_id
    old_hours = log.hours_used or 0.0
    new_machine_id = data["machine_id"]
    new_hours = data["hours_used"]
    if new_machine_id != old_machine_id:
        _ensure_machine(db, new_machine_id)

    try:
        for key, value in data.items():
            setattr(log, key, value)
        db.flush()
        if new_machine_id != old_machine_id:
            revert_usage_hours(db, old_machine_id, old_hours)
            apply_usage_hours(db, new_machine_id, new_hours)
        else:
            delta = new_hours - old_hours
            if delta != 0:
                adjust_operating_hours(db, old_machine_id, round_hours(delta))
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(log)
    logger.info(
        "usage.updated",
        extra={
            "extra_data": {
                "log_id": log.id,
                "machine_id": new_machine_id,
                "previous_machine_id": old_machine_id,
                "hours_delta": new_hours - old_hours,
            }
        },
    )
    return log


def delete_usage_log(db: Session, log_id: int) -> None:
    """Take a usage log's rounded hours back off its machine, then delete it."""

    log = get_usage_log(db, log_id)
    machine_id = log.machine_id
    try:
        revert_usage_hours(db, machine_id, log.hours_used or 0.0)
        db.delete(log)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("usage.deleted", extra={"extra_data": {"log_id": log_id, "machine_id": machine_id}})
