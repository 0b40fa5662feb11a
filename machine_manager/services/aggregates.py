"""Rules that keep a machine's cached fields in step with its ledgers.

Two values on ``machines`` are derived rather than entered:

* ``operating_hours``: the sum of every usage log's ``hours_used``, each
  rounded to whole hours when it is added or removed.
* ``last_maintenance_date``: the performed date of the most recently
  *created* maintenance record.

The helpers below only stage changes on the caller's session. The ledger
function that calls them commits once, so the ledger row and the cached
field land (or roll back) together.
"""

from __future__ import annotations

import math
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..models.machine import Machine


def utcnow() -> str:
    return datetime.utcnow().isoformat(timespec="seconds") + "Z"


def round_hours(value: float) -> int:
    """Round half up to a whole hour (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(float(value) + 0.5))


def adjust_operating_hours(db: Session, machine_id: int, whole_hours: int) -> None:
    """Move the machine's cached hour total by ``whole_hours``.

    The increment runs as ``operating_hours = operating_hours + n`` inside
    the database so two writers never overwrite each other's totals.
    """

    db.execute(
        update(Machine)
        .where(Machine.id == machine_id)
        .values(operating_hours=Machine.operating_hours + whole_hours, updated_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )


def apply_usage_hours(db: Session, machine_id: int, hours: float) -> int:
    """Credit a new usage session; returns the whole hours added."""
    whole = round_hours(hours)
    adjust_operating_hours(db, machine_id, whole)
    return whole


def revert_usage_hours(db: Session, machine_id: int, hours: float) -> int:
    """Take back exactly what ``apply_usage_hours`` added for ``hours``."""
    whole = round_hours(hours)
    adjust_operating_hours(db, machine_id, -whole)
    return whole


def record_maintenance_date(db: Session, machine_id: int, performed_date: str) -> None:
    db.execute(
        update(Machine)
        .where(Machine.id == machine_id)
        .values(last_maintenance_date=performed_date, updated_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )

