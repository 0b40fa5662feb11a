from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_pascal


class UsageLogBase(BaseModel):
    machine_id: int
    operator_name: str
    start_time: str
    end_time: str
    hours_used: float = Field(ge=0)
    job_description: str
    notes: Optional[str] = None

    class Config:
        alias_generator = to_pascal
        populate_by_name = True


class UsageLogCreate(UsageLogBase):
    pass


class UsageLogUpdate(UsageLogBase):
    pass


class UsageLogOut(UsageLogBase):
    id: int
    created_at: str

    class Config:
        alias_generator = to_pascal
        populate_by_name = True
        from_attributes = True


class UsageLogListItem(UsageLogOut):
    machine_name: Optional[str] = None
    machine_model: Optional[str] = None
