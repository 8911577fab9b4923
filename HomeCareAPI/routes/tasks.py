from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.database import get_db
from HomeCareAPI.errors import NotFound
from HomeCareAPI.models import PlannedTask
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.schemas import PlannedTaskCreate, PlannedTaskResponse, PlannedTaskUpdate

router = APIRouter()

REQUIRED_FIELDS = ("title", "due_date", "priority", "status")


def _get_task(db: Session, task_id: int) -> PlannedTask:
    task = db.query(PlannedTask).filter(PlannedTask.id == task_id).first()
    if not task:
        raise NotFound("Task not found")
    return task


# Get all planned tasks across accessible properties
@router.get("/tasks/", response_model=List[PlannedTaskResponse])
def get_tasks(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    property_ids = AccessEvaluator(db).accessible_property_ids(user_id)
    if not property_ids:
        return []
    return (
        db.query(PlannedTask)
        .filter(PlannedTask.property_id.in_(property_ids))
        .order_by(PlannedTask.due_date.asc())
        .all()
    )


# Get tasks for specific property
@router.get("/tasks/property/{property_id}", response_model=List[PlannedTaskResponse])
def get_property_tasks(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    AccessEvaluator(db).require_any_access(user_id, property_id)
    return (
        db.query(PlannedTask)
        .filter(PlannedTask.property_id == property_id)
        .order_by(PlannedTask.due_date.asc())
        .all()
    )


@router.post("/tasks/", response_model=PlannedTaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(task_in: PlannedTaskCreate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Create a planned task.

    Args:
        task_in (PlannedTaskCreate): Task data.
        user_id (int): The authenticated user; needs edit access.
        db (Session): The database session.

    Returns:
        PlannedTaskResponse: The created task, status pending.
    """
    AccessEvaluator(db).require_edit_access(user_id, task_in.property_id)
    task = PlannedTask(**task_in.model_dump(), user_id=user_id, status="pending")
    if task.estimated_cost is None:
        task.estimated_cost = ""
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@router.put("/tasks/{task_id}", response_model=PlannedTaskResponse)
def update_task(
    task_id: int,
    task_in: PlannedTaskUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    task = _get_task(db, task_id)
    AccessEvaluator(db).require_edit_access(user_id, task.property_id)

    for key, value in task_in.model_dump(exclude_unset=True).items():
        if value is None and key in REQUIRED_FIELDS:
            continue
        setattr(task, key, value if value is not None else "")

    try:
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Failed to update task")
    return task


# Complete task (mark as completed)
@router.patch("/tasks/{task_id}/complete", response_model=PlannedTaskResponse)
def complete_task(task_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    task = _get_task(db, task_id)
    AccessEvaluator(db).require_edit_access(user_id, task.property_id)
    task.status = "completed"
    db.commit()
    db.refresh(task)
    return task


@router.delete("/tasks/{task_id}")
def delete_task(task_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    task = _get_task(db, task_id)
    AccessEvaluator(db).require_edit_access(user_id, task.property_id)
    db.delete(task)
    db.commit()
    return {"message": "Task deleted"}
