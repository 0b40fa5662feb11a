from __future__ import annotations

from sqlalchemy import Column, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..db.session import Base


class UsageLog(Base):
    """A stretch of time an operator ran a machine.

    ``hours_used`` is what the operator reported; the owning machine's
    ``operating_hours`` accumulates it rounded to whole hours.
    """

    __tablename__ = "usage_logs"

    id = Column(Integer, primary_key=True, index=True)
    machine_id = Column(Integer, ForeignKey("machines.id", ondelete="CASCADE"), nullable=False, index=True)
    operator_name = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False, index=True)
    end_time = Column(Text, nullable=False)
    hours_used = Column(Float, nullable=False)
    job_description = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)

    machine = relationship("Machine", back_populates="usage_logs", lazy="joined")

    @property
    def machine_name(self) -> str | None:
        return self.machine.name if self.machine else None

    @property
    def machine_model(self) -> str | None:
        return self.machine.model if self.machine else None


__all__ = ["UsageLog"]
