from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..crud.usage_logs import (
    create_usage_log,
    delete_usage_log,
    get_usage_log,
    list_machine_usage,
    list_usage_logs,
    update_usage_log,
)
from ..db.session import get_db
from ..schemas.usage_log import UsageLogCreate, UsageLogListItem, UsageLogOut, UsageLogUpdate

router = APIRouter(prefix="/api/usage-logs", tags=["usage-logs"])


@router.get("", response_model=list[UsageLogListItem])
def api_list(db: Session = Depends(get_db)):
    return list_usage_logs(db)


@router.get("/machine/{machine_id}", response_model=list[UsageLogOut])
def api_list_for_machine(machine_id: int, db: Session = Depends(get_db)):
    return list_machine_usage(db, machine_id)


@router.get("/{log_id}", response_model=UsageLogOut)
def api_get(log_id: int, db: Session = Depends(get_db)):
    return get_usage_log(db, log_id)


@router.post("", response_model=UsageLogOut, status_code=status.HTTP_201_CREATED)
def api_create(payload: UsageLogCreate, db: Session = Depends(get_db)):
    return create_usage_log(db, payload.model_dump())


@router.put("/{log_id}", response_model=UsageLogOut)
def api_update(log_id: int, payload: UsageLogUpdate, db: Session = Depends(get_db)):
    return update_usage_log(db, log_id, payload.model_dump())


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete(log_id: int, db: Session = Depends(get_db)):
    delete_usage_log(db, log_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
