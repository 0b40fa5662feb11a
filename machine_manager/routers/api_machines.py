"""HTTP routes for the equipment registry.

Every handler is a thin shim: it hands the parsed payload to
``crud.machines`` and lets the exception handlers registered by the app
factory turn ``NotFoundError``/``ConflictError``/``ValidationError`` into the
matching JSON error.
"""


from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..crud.machines import (
    create_machine,
    delete_machine,
    get_machine_by_serial,
    get_machine_detail,
    list_machines,
    update_machine,
)
from ..db.session import get_db
from ..schemas.machine import MachineCreate, MachineDetail, MachineOut, MachineUpdate
from ..schemas.maintenance import MaintenanceRecordOut
from ..schemas.usage_log import UsageLogOut

router = APIRouter(prefix="/api/machines", tags=["machines"])


def _machine_to_detail(machine) -> MachineDetail:
    base = MachineOut.model_validate(machine, from_attributes=True)
    detail = MachineDetail(**base.model_dump())
    detail.maintenance_records = [
        MaintenanceRecordOut.model_validate(record, from_attributes=True)
        for record in getattr(machine, "maintenance_history", [])
    ]
    detail.usage_logs = [
        UsageLogOut.model_validate(log, from_attributes=True) for log in getattr(machine, "usage_history", [])
    ]
    return detail


@router.get("", response_model=list[MachineOut])
def api_list(db: Session = Depends(get_db)):
    return list_machines(db)


@router.get("/serial/{serial_number}", response_model=MachineOut)
def api_get_by_serial(serial_number: str, db: Session = Depends(get_db)):
    return get_machine_by_serial(db, serial_number)


@router.get("/{machine_id}", response_model=MachineDetail)
def api_get(machine_id: int, db: Session = Depends(get_db)):
    return _machine_to_detail(get_machine_detail(db, machine_id))


@router.post("", response_model=MachineOut, status_code=status.HTTP_201_CREATED)
def api_create(payload: MachineCreate, db: Session = Depends(get_db)):
    return create_machine(db, payload.model_dump())


@router.put("/{machine_id}", response_model=MachineOut)
def api_update(machine_id: int, payload: MachineUpdate, db: Session = Depends(get_db)):
    return update_machine(db, machine_id, payload.model_dump())


@router.delete("/{machine_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete(machine_id: int, db: Session = Depends(get_db)):
    delete_machine(db, machine_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
