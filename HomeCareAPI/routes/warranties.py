import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.database import get_db
from HomeCareAPI.errors import Conflict, NotFound
from HomeCareAPI.models import Appliance, Warranty
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.routes.documents import get_property_document
from HomeCareAPI.schemas import WarrantyCreate, WarrantyResponse, WarrantyUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

REQUIRED_FIELDS = ("provider", "expiration_date")


def _get_appliance(db: Session, appliance_id: int) -> Appliance:
    appliance = db.query(Appliance).filter(Appliance.id == appliance_id).first()
    if not appliance:
        raise NotFound("Appliance not found")
    return appliance


def _get_warranty(db: Session, warranty_id: int) -> Warranty:
    warranty = db.query(Warranty).filter(Warranty.id == warranty_id).first()
    if not warranty:
        raise NotFound("Warranty not found")
    return warranty


# Get warranties for every appliance of a property
@router.get("/warranties/property/{property_id}", response_model=List[WarrantyResponse])
def get_property_warranties(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    AccessEvaluator(db).require_any_access(user_id, property_id)
    return (
        db.query(Warranty)
        .join(Appliance, Appliance.id == Warranty.appliance_id)
        .filter(Appliance.property_id == property_id)
        .order_by(Warranty.expiration_date.asc())
        .all()
    )


# Get the warranty of one appliance
@router.get("/warranties/appliance/{appliance_id}", response_model=WarrantyResponse)
def get_appliance_warranty(appliance_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    appliance = _get_appliance(db, appliance_id)
    AccessEvaluator(db).require_any_access(user_id, appliance.property_id)
    if appliance.warranty is None:
        raise NotFound("Warranty not found")
    return appliance.warranty


@router.post("/warranties/", response_model=WarrantyResponse, status_code=status.HTTP_201_CREATED)
def create_warranty(
    warranty_in: WarrantyCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Attach a warranty to an appliance.

    Raises:
        HTTPException: 404 if the appliance is missing, 409 if it already has a warranty.
    """
    appliance = _get_appliance(db, warranty_in.appliance_id)
    AccessEvaluator(db).require_edit_access(user_id, appliance.property_id)
    if appliance.warranty is not None:
        raise Conflict("Appliance already has a warranty")
    if warranty_in.document_id is not None:
        get_property_document(db, warranty_in.document_id, appliance.property_id)

    warranty = Warranty(**warranty_in.model_dump())
    try:
        db.add(warranty)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Appliance already has a warranty")
    db.refresh(warranty)
    logger.info("Warranty %s added to appliance %s", warranty.id, appliance.id)
    return warranty


@router.put("/warranties/{warranty_id}", response_model=WarrantyResponse)
def update_warranty(
    warranty_id: int,
    warranty_in: WarrantyUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    warranty = _get_warranty(db, warranty_id)
    AccessEvaluator(db).require_edit_access(user_id, warranty.appliance.property_id)
    if warranty_in.document_id is not None:
        get_property_document(db, warranty_in.document_id, warranty.appliance.property_id)

    for key, value in warranty_in.model_dump(exclude_unset=True).items():
        if value is None and key in REQUIRED_FIELDS:
            continue
        setattr(warranty, key, value)

    try:
        db.commit()
        db.refresh(warranty)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Failed to update warranty")
    return warranty


@router.delete("/warranties/{warranty_id}")
def delete_warranty(warranty_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    warranty = _get_warranty(db, warranty_id)
    AccessEvaluator(db).require_edit_access(user_id, warranty.appliance.property_id)
    db.delete(warranty)
    db.commit()
    return {"message": "Warranty deleted"}
