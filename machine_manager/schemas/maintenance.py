from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_pascal


class MaintenanceRecordBase(BaseModel):
    machine_id: int
    type: str
    description: str
    performed_date: str
    next_due_date: Optional[str] = None
    performed_by: str
    cost: float = Field(ge=0)
    notes: Optional[str] = None

    class Config:
        alias_generator = to_pascal
        populate_by_name = True


class MaintenanceRecordCreate(MaintenanceRecordBase):
    pass


class MaintenanceRecordUpdate(MaintenanceRecordBase):
    pass


class MaintenanceRecordOut(MaintenanceRecordBase):
    id: int
    created_at: str

    class Config:
        alias_generator = to_pascal
        populate_by_name = True
        from_attributes = True


class MaintenanceRecordListItem(MaintenanceRecordOut):
    """A record as shown in the cross-machine list, tagged with its machine."""

    machine_name: Optional[str] = None
    machine_model: Optional[str] = None
