"""Pydantic schemas for machine payloads.

Fields are snake_case in Python and PascalCase on the wire (``SerialNumber``,
``OperatingHours``); incoming JSON may use either spelling.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_pascal

from .maintenance import MaintenanceRecordOut
from .usage_log import UsageLogOut


class MachineBase(BaseModel):
    name: str
    model: str
    serial_number: str
    type: str
    status: str
    purchase_date: str
    purchase_price: float = Field(ge=0)
    notes: Optional[str] = None

    class Config:
        alias_generator = to_pascal
        populate_by_name = True


class MachineCreate(MachineBase):
    pass


class MachineUpdate(MachineBase):
    """Full replacement of the editable fields; there is no partial patch."""


class MachineOut(MachineBase):
    id: int
    last_maintenance_date: Optional[str] = None
    operating_hours: int = 0
    created_at: str
    updated_at: Optional[str] = None

    class Config:
        alias_generator = to_pascal
        populate_by_name = True
        from_attributes = True


class MachineDetail(MachineOut):
    maintenance_records: list[MaintenanceRecordOut] = Field(default_factory=list)
    usage_logs: list[UsageLogOut] = Field(default_factory=list)
