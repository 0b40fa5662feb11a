"""SQLAlchemy model for service events performed on a machine."""

from __future__ import annotations

from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class MaintenanceRecord(Base):
    """One service event (oil change, blade sharpening, ...) on a machine."""

    __tablename__ = "maintenance_records"

    id = Column(Integer, primary_key=True, index=True)
    machine_id = Column(Integer, ForeignKey("machines.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    performed_date = Column(Text, nullable=False, index=True)
    next_due_date = Column(Text, nullable=True)
    performed_by = Column(Text, nullable=False)
    cost = Column(Float, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)

    machine = relationship("Machine", back_populates="maintenance_records", lazy="joined")

    @property
    def machine_name(self) -> str | None:
        return self.machine.name if self.machine else None

    @property
    def machine_model(self) -> str | None:
        return self.machine.model if self.machine else None


__all__ = ["MaintenanceRecord"]
