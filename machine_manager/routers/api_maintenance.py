from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..crud.maintenance import (
    create_maintenance_record,
    delete_maintenance_record,
    get_maintenance_record,
    list_machine_maintenance,
    list_maintenance_records,
    update_maintenance_record,
)
from ..db.session import get_db
from ..schemas.maintenance import (
    MaintenanceRecordCreate,
    MaintenanceRecordListItem,
    MaintenanceRecordOut,
    MaintenanceRecordUpdate,
)

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


@router.get("", response_model=list[MaintenanceRecordListItem])
def api_list(db: Session = Depends(get_db)):
    return list_maintenance_records(db)


@router.get("/machine/{machine_id}", response_model=list[MaintenanceRecordOut])
def api_list_for_machine(machine_id: int, db: Session = Depends(get_db)):
    return list_machine_maintenance(db, machine_id)


@router.get("/{record_id}", response_model=MaintenanceRecordOut)
def api_get(record_id: int, db: Session = Depends(get_db)):
    return get_maintenance_record(db, record_id)


@router.post("", response_model=MaintenanceRecordOut, status_code=status.HTTP_201_CREATED)
def api_create(payload: MaintenanceRecordCreate, db: Session = Depends(get_db)):
    return create_maintenance_record(db, payload.model_dump())


@router.put("/{record_id}", response_model=MaintenanceRecordOut)
def api_update(record_id: int, payload: MaintenanceRecordUpdate, db: Session = Depends(get_db)):
    return update_maintenance_record(db, record_id, payload.model_dump())


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete(record_id: int, db: Session = Depends(get_db)):
    delete_maintenance_record(db, record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
