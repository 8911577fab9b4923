from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.database import get_db
from HomeCareAPI.errors import NotFound
from HomeCareAPI.models import MaintenanceLog
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.schemas import MaintenanceLogCreate, MaintenanceLogResponse, MaintenanceLogUpdate

router = APIRouter()

REQUIRED_FIELDS = ("title", "date", "cost", "category")


def _get_log(db: Session, log_id: int) -> MaintenanceLog:
    log = db.query(MaintenanceLog).filter(MaintenanceLog.id == log_id).first()
    if not log:
        raise NotFound("Maintenance log not found")
    return log


# Get all maintenance logs across accessible properties
@router.get("/logs/", response_model=List[MaintenanceLogResponse])
def get_logs(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    property_ids = AccessEvaluator(db).accessible_property_ids(user_id)
    if not property_ids:
        return []
    return (
        db.query(MaintenanceLog)
        .filter(MaintenanceLog.property_id.in_(property_ids))
        .order_by(MaintenanceLog.date.desc())
        .all()
    )


# Get logs for specific property
@router.get("/logs/property/{property_id}", response_model=List[MaintenanceLogResponse])
def get_property_logs(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    AccessEvaluator(db).require_any_access(user_id, property_id)
    return (
        db.query(MaintenanceLog)
        .filter(MaintenanceLog.property_id == property_id)
        .order_by(MaintenanceLog.date.desc())
        .all()
    )


@router.post("/logs/", response_model=MaintenanceLogResponse, status_code=status.HTTP_201_CREATED)
def create_log(log_in: MaintenanceLogCreate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Record completed maintenance work.

    Args:
        log_in (MaintenanceLogCreate): Log data.
        user_id (int): The authenticated user; needs edit access.
        db (Session): The database session.

    Returns:
        MaintenanceLogResponse: The created log.
    """
    AccessEvaluator(db).require_edit_access(user_id, log_in.property_id)
    log = MaintenanceLog(**log_in.model_dump(), user_id=user_id)
    if not log.provider:
        log.provider = "Unknown"
    if log.notes is None:
        log.notes = ""
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


@router.put("/logs/{log_id}", response_model=MaintenanceLogResponse)
def update_log(
    log_id: int,
    log_in: MaintenanceLogUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    log = _get_log(db, log_id)
    AccessEvaluator(db).require_edit_access(user_id, log.property_id)

    for key, value in log_in.model_dump(exclude_unset=True).items():
        if value is None and key in REQUIRED_FIELDS:
            continue
        if value is None:
            value = "Unknown" if key == "provider" else ""
        setattr(log, key, value)

    try:
        db.commit()
        db.refresh(log)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Failed to update maintenance log")
    return log


@router.delete("/logs/{log_id}")
def delete_log(log_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    log = _get_log(db, log_id)
    AccessEvaluator(db).require_edit_access(user_id, log.property_id)
    db.delete(log)
    db.commit()
    return {"message": "Maintenance log deleted"}
