from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.database import get_db
from HomeCareAPI.errors import NotFound
from HomeCareAPI.models import Appliance
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.routes.documents import get_property_document
from HomeCareAPI.schemas import ApplianceCreate, ApplianceResponse, ApplianceUpdate

router = APIRouter()

REQUIRED_FIELDS = ("type", "year_installed", "month_installed")


def _get_appliance(db: Session, appliance_id: int) -> Appliance:
    appliance = db.query(Appliance).filter(Appliance.id == appliance_id).first()
    if not appliance:
        raise NotFound("Appliance not found")
    return appliance


# Get appliances for specific property
@router.get("/appliances/property/{property_id}", response_model=List[ApplianceResponse])
def get_property_appliances(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    AccessEvaluator(db).require_any_access(user_id, property_id)
    return (
        db.query(Appliance)
        .filter(Appliance.property_id == property_id)
        .order_by(Appliance.year_installed.desc(), Appliance.month_installed.desc())
        .all()
    )


@router.post("/appliances/", response_model=ApplianceResponse, status_code=status.HTTP_201_CREATED)
def create_appliance(
    appliance_in: ApplianceCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    AccessEvaluator(db).require_edit_access(user_id, appliance_in.property_id)
    if appliance_in.manual_id is not None:
        get_property_document(db, appliance_in.manual_id, appliance_in.property_id)
    appliance = Appliance(**appliance_in.model_dump())
    db.add(appliance)
    db.commit()
    db.refresh(appliance)
    return appliance


@router.put("/appliances/{appliance_id}", response_model=ApplianceResponse)
def update_appliance(
    appliance_id: int,
    appliance_in: ApplianceUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    appliance = _get_appliance(db, appliance_id)
    AccessEvaluator(db).require_edit_access(user_id, appliance.property_id)
    if appliance_in.manual_id is not None:
        get_property_document(db, appliance_in.manual_id, appliance.property_id)

    for key, value in appliance_in.model_dump(exclude_unset=True).items():
        if value is None and key in REQUIRED_FIELDS:
            continue
        setattr(appliance, key, value)

    try:
        db.commit()
        db.refresh(appliance)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Failed to update appliance")
    return appliance


@router.delete("/appliances/{appliance_id}")
def delete_appliance(appliance_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Delete an appliance together with its warranty."""
    appliance = _get_appliance(db, appliance_id)
    AccessEvaluator(db).require_edit_access(user_id, appliance.property_id)
    db.delete(appliance)
    db.commit()
    return {"message": "Appliance deleted"}
