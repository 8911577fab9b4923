from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from HomeCareAPI.database import get_db
from HomeCareAPI.recurring_service import RecurringTaskScheduler
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.schemas import (
    GenerateResponse,
    RecurringTaskCreate,
    RecurringTaskCreateResponse,
    RecurringTaskResponse,
    RecurringTaskUpdate,
)

router = APIRouter()


# Get recurring tasks for a property
@router.get("/recurring-tasks/property/{property_id}", response_model=List[RecurringTaskResponse])
def get_recurring_tasks(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return RecurringTaskScheduler(db).list_definitions(property_id, user_id)


# Create recurring task
@router.post("/recurring-tasks/", response_model=RecurringTaskCreateResponse, status_code=status.HTTP_201_CREATED)
def create_recurring_task(
    task_in: RecurringTaskCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Create a recurring task together with its first planned task.

    Args:
        task_in (RecurringTaskCreate): Recurring task data.
        user_id (int): The authenticated user; needs edit access.
        db (Session): The database session.

    Returns:
        RecurringTaskCreateResponse: The definition and the planned task.

    Raises:
        HTTPException: 400 on an invalid frequency, 403 below edit, 404 if the property is missing.
    """
    definition, planned = RecurringTaskScheduler(db).create_definition(
        property_id=task_in.property_id,
        user_id=user_id,
        title=task_in.title,
        frequency=task_in.frequency,
        priority=task_in.priority,
        estimated_cost=task_in.estimated_cost,
        category=task_in.category,
        description=task_in.description,
    )
    return {"recurring_task": definition, "planned_task": planned}


# Generate planned tasks for active recurring tasks (cron job or manual trigger)
@router.post("/recurring-tasks/generate", response_model=GenerateResponse)
def generate_planned_tasks(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Materialize planned tasks for every due recurring task the caller can edit.

    Running this more than once on the same day does not create duplicates.

    Returns:
        GenerateResponse: Created tasks and ids of recurring tasks that failed.
    """
    result = RecurringTaskScheduler(db).generate_due_instances(user_id)
    return {
        "message": f"Generated {len(result.tasks)} planned tasks from recurring tasks",
        "tasks": result.tasks,
        "failed": result.failed,
    }


# Update recurring task
@router.put("/recurring-tasks/{task_id}", response_model=RecurringTaskResponse)
def update_recurring_task(
    task_id: int,
    task_in: RecurringTaskUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return RecurringTaskScheduler(db).update_definition(task_id, user_id, task_in.model_dump(exclude_unset=True))


# Delete recurring task
@router.delete("/recurring-tasks/{task_id}")
def delete_recurring_task(task_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    RecurringTaskScheduler(db).delete_definition(task_id, user_id)
    return {"message": "Recurring task deleted successfully"}
