import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.constants import Role
from HomeCareAPI.database import get_db
from HomeCareAPI.errors import NotFound
from HomeCareAPI.models import Property, PropertyAccess
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.schemas import PropertyCreate, PropertyResponse, PropertyUpdate
from HomeCareAPI.utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()

# Columns a property must always have; an explicit null on update is ignored
REQUIRED_FIELDS = ("name", "address", "type", "year_built", "area", "heating_type", "floors")


def _with_role(prop: Property, role: Role) -> dict:
    data = {k: getattr(prop, k) for k in prop.__dict__ if not k.startswith('_')}
    data["role"] = role.value
    data["is_owner"] = role == Role.OWNER
    return data


@router.get("/properties/", response_model=List[PropertyResponse])
def get_properties(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Get every property the caller owns or has accepted access to.

    Args:
        user_id (int): The authenticated user.
        db (Session): The database session.

    Returns:
        list[PropertyResponse]: Properties annotated with the caller's role.
    """
    accessible = AccessEvaluator(db).accessible_properties(user_id)
    accessible.sort(key=lambda pair: pair[0].created_at, reverse=True)
    return [_with_role(prop, role) for prop, role in accessible]


@router.post("/properties/", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(property_in: PropertyCreate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Create a property owned by the caller.

    The owner's access grant is written in the same commit as the property.

    Args:
        property_in (PropertyCreate): Property data.
        user_id (int): The authenticated user.
        db (Session): The database session.

    Returns:
        PropertyResponse: The created property.
    """
    prop = Property(**property_in.model_dump(), user_id=user_id)
    try:
        db.add(prop)
        db.flush()
        db.add(PropertyAccess(
            property_id=prop.id,
            user_id=user_id,
            role=Role.OWNER,
            invite_accepted=True,
            accepted_at=utcnow(),
        ))
        db.commit()
        db.refresh(prop)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create property for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to create property")
    logger.info("User %s created property %s", user_id, prop.id)
    return _with_role(prop, Role.OWNER)


@router.get("/properties/{property_id}", response_model=PropertyResponse)
def get_property(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Get a property by ID.

    Raises:
        HTTPException: 404 if the property does not exist or the caller cannot see it.
    """
    evaluator = AccessEvaluator(db)
    prop = evaluator.get_property(property_id)
    role = evaluator.resolve_role(user_id, property_id) if prop else None
    if prop is None or role is None:
        raise NotFound("Property not found")
    return _with_role(prop, role)


@router.put("/properties/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: int,
    property_in: PropertyUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Update a property. Requires admin access or better.

    Raises:
        HTTPException: 404 if not found, 403 if the caller is below admin.
    """
    evaluator = AccessEvaluator(db)
    role = evaluator.require_admin_access(user_id, property_id)
    prop = evaluator.get_property(property_id)

    for key, value in property_in.model_dump(exclude_unset=True).items():
        if value is None and key in REQUIRED_FIELDS:
            continue
        setattr(prop, key, value)

    try:
        db.commit()
        db.refresh(prop)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update property %s", property_id)
        raise HTTPException(status_code=400, detail="Failed to update property")
    return _with_role(prop, role)


@router.delete("/properties/{property_id}")
def delete_property(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    Delete a property with all of its records. Owner only.

    Raises:
        HTTPException: 404 if not found, 403 if the caller is not the owner.
    """
    evaluator = AccessEvaluator(db)
    evaluator.require_role(user_id, property_id, Role.OWNER)
    prop = evaluator.get_property(property_id)
    try:
        db.delete(prop)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete property %s", property_id)
        raise HTTPException(status_code=400, detail="Unable to delete property")
    logger.info("User %s deleted property %s", user_id, property_id)
    return {"message": "Property deleted"}
