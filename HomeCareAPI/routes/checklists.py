"""
Seasonal maintenance checklists.

Each property has at most one checklist per season. Checklists start from
the built-in templates and are then edited as a whole item list.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.constants import SEASONAL_TEMPLATES, SEASONS
from HomeCareAPI.database import get_db
from HomeCareAPI.errors import NotFound
from HomeCareAPI.models import SeasonalChecklist
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.schemas import ChecklistResponse, ChecklistUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def completion_percentage(items) -> int:
    """Share of completed items, rounded to a whole percent; 0 for an empty list."""
    if not items:
        return 0
    done = sum(1 for item in items if item.get("completed"))
    return round(done * 100 / len(items))


def _serialize(checklist: SeasonalChecklist) -> dict:
    items = checklist.items or []
    return {
        "id": checklist.id,
        "property_id": checklist.property_id,
        "season": checklist.season,
        "items": items,
        "completion_percentage": completion_percentage(items),
        "last_updated": checklist.updated_at,
    }


def _template_items(season: str) -> List[dict]:
    return [
        {"id": str(index), "title": title, "completed": False, "due_date": None}
        for index, title in enumerate(SEASONAL_TEMPLATES[season], start=1)
    ]


def _get_checklist(db: Session, checklist_id: int) -> SeasonalChecklist:
    checklist = db.query(SeasonalChecklist).filter(SeasonalChecklist.id == checklist_id).first()
    if not checklist:
        raise NotFound("Checklist not found")
    return checklist


# Get checklists for specific property
@router.get("/checklists/property/{property_id}", response_model=List[ChecklistResponse])
def get_property_checklists(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    AccessEvaluator(db).require_any_access(user_id, property_id)
    checklists = db.query(SeasonalChecklist).filter(SeasonalChecklist.property_id == property_id).all()
    checklists.sort(key=lambda c: SEASONS.index(c.season) if c.season in SEASONS else len(SEASONS))
    return [_serialize(c) for c in checklists]


@router.post(
    "/checklists/initialize/{property_id}",
    response_model=List[ChecklistResponse],
    status_code=status.HTTP_201_CREATED,
)
def initialize_checklists(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Create the missing seasonal checklists for a property from the templates.

    Seasons that already have a checklist are left untouched, so calling
    this again is harmless.

    Returns:
        list[ChecklistResponse]: All four checklists of the property.
    """
    AccessEvaluator(db).require_edit_access(user_id, property_id)
    existing = {
        c.season
        for c in db.query(SeasonalChecklist).filter(SeasonalChecklist.property_id == property_id).all()
    }
    created = 0
    for season in SEASONS:
        if season in existing:
            continue
        db.add(SeasonalChecklist(property_id=property_id, season=season, items=_template_items(season)))
        created += 1

    if created:
        try:
            db.commit()
        except IntegrityError:
            # another request initialized the same seasons first
            db.rollback()
        logger.info("Initialized %d seasonal checklists for property %s", created, property_id)

    return get_property_checklists(property_id, user_id, db)


@router.put("/checklists/{checklist_id}", response_model=ChecklistResponse)
def update_checklist(
    checklist_id: int,
    checklist_in: ChecklistUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    checklist = _get_checklist(db, checklist_id)
    AccessEvaluator(db).require_edit_access(user_id, checklist.property_id)
    checklist.items = [item.model_dump(mode="json") for item in checklist_in.items]
    db.commit()
    db.refresh(checklist)
    return _serialize(checklist)


@router.delete("/checklists/{checklist_id}")
def delete_checklist(checklist_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    checklist = _get_checklist(db, checklist_id)
    AccessEvaluator(db).require_edit_access(user_id, checklist.property_id)
    db.delete(checklist)
    db.commit()
    return {"message": "Checklist deleted"}
