"""Beginner-friendly overview for this module.

WHAT: The ``Machine`` table, the canonical record for one physical machine.
WHEN: Loaded whenever the registry or a ledger reads or writes a machine.
WHY: Ledgers hang off this row, and it caches two derived values
(``operating_hours`` and ``last_maintenance_date``) so list views do not have
to aggregate the ledgers on every read.
HOW: Plain SQLAlchemy columns; the two relationships cascade deletes so
removing a machine removes its maintenance records and usage logs too.
"""


from __future__ import annotations

from sqlalchemy import Column, Float, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class Machine(Base):
    __tablename__ = "machines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    model = Column(Text, nullable=False)
    serial_number = Column(Text, nullable=False, unique=True, index=True)
    type = Column(Text, nullable=False)
    status = Column(Text, nullable=False)
    purchase_date = Column(Text, nullable=False)
    purchase_price = Column(Float, nullable=False)
    # Derived: written by the maintenance ledger, never by clients.
    last_maintenance_date = Column(Text, nullable=True)
    # Derived: running sum of rounded usage-log hours.
    operating_hours = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)

    maintenance_records = relationship(
        "MaintenanceRecord",
        back_populates="machine",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    usage_logs = relationship(
        "UsageLog",
        back_populates="machine",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["Machine"]
