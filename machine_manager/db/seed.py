"""Sample machines for a brand-new database.

Runs only when ``SEED_DEMO_DATA`` is enabled and the machines table is empty.
The sample history goes through the ledgers, so the seeded machines' cached
hours and maintenance dates agree with their logs from the start.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..crud.machines import create_machine
from ..crud.maintenance import create_maintenance_record
from ..crud.usage_logs import create_usage_log
from ..models.machine import Machine

logger = logging.getLogger(__name__)

SAMPLE_MACHINES = [
    {
        "name": "John Deere X350",
        "model": "X350",
        "serial_number": "JD-X350-2023-001",
        "type": "Mower",
        "status": "Active",
        "purchase_date": "2023-05-15",
        "purchase_price": 3499.99,
        "notes": "Primary mower for residential lawns",
    },
    {
        "name": "Stihl FS 56 RC-E",
        "model": "FS 56 RC-E",
        "serial_number": "STIHL-FS56-2023-002",
        "type": "Trimmer",
        "status": "Active",
        "purchase_date": "2023-06-01",
        "purchase_price": 199.99,
        "notes": "Lightweight trimmer for edges",
    },
]


def seed_database(db: Session) -> bool:
    """Insert the sample data if no machines exist yet. Returns True if it did."""

    count = db.execute(select(func.count()).select_from(Machine)).scalar_one()
    if count:
        return False

    mower, _trimmer = (create_machine(db, payload) for payload in SAMPLE_MACHINES)
    create_maintenance_record(
        db,
        {
            "machine_id": mower.id,
            "type": "OilChange",
            "description": "Regular oil change",
            "performed_date": "2024-01-15",
            "performed_by": "John Smith",
            "cost": 25.0,
            "notes": "Used synthetic oil",
        },
    )
    create_usage_log(
        db,
        {
            "machine_id": mower.id,
            "operator_name": "John Smith",
            "start_time": "2024-01-20T08:00:00",
            "end_time": "2024-01-20T12:00:00",
            "hours_used": 4.0,
            "job_description": "Residential lawn mowing",
            "notes": "Standard weekly maintenance",
        },
    )
    logger.info("database.seeded", extra={"extra_data": {"machines": len(SAMPLE_MACHINES)}})
    return True
