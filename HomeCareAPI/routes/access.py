from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from HomeCareAPI.database import get_db
from HomeCareAPI.invitation_service import InvitationService
from HomeCareAPI.models import PropertyAccess
from HomeCareAPI.routes.auth import get_current_user_id
from HomeCareAPI.schemas import AccessEntry, AccessListResponse, RoleUpdate, RoleUpdateResponse, ShareRequest

router = APIRouter()

PENDING_MESSAGE = "Invitation pending - user will gain access once they sign up with this email"


def _entry(grant: PropertyAccess) -> dict:
    user = grant.user
    return {
        "id": grant.id,
        "user_id": grant.user_id,
        "name": user.name if user else "Pending",
        "email": user.email if user else grant.invite_email,
        "role": grant.role.value,
        "invite_email": grant.invite_email,
        "invite_accepted": grant.invite_accepted,
        "invited_at": grant.invited_at,
        "accepted_at": grant.accepted_at,
    }


# Get all users with access to a property
@router.get("/properties/{property_id}/access", response_model=AccessListResponse)
def get_access_list(property_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """
    List everyone with access to a property, pending invites included.

    Args:
        property_id (int): The property.
        user_id (int): The authenticated user; must be owner or admin.
        db (Session): The database session.

    Returns:
        AccessListResponse: The property's grants.
    """
    grants = InvitationService(db).list_access(property_id, user_id)
    return {"property_id": property_id, "access": [_entry(g) for g in grants]}


# Share property with a family member (email)
@router.post("/properties/{property_id}/share", response_model=AccessEntry, status_code=status.HTTP_201_CREATED)
def share_property(
    property_id: int,
    payload: ShareRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Share a property by email.

    If the email belongs to a registered user access is granted at once;
    otherwise a pending invite is recorded.

    Raises:
        HTTPException: 400 on an invalid role, 403 below admin, 409 if already shared.
    """
    grant = InvitationService(db).share(property_id, user_id, payload.email, payload.role)
    entry = _entry(grant)
    if not grant.invite_accepted:
        entry["message"] = PENDING_MESSAGE
    return entry


# Update permission level for a user
@router.put("/properties/{property_id}/access/{access_id}", response_model=RoleUpdateResponse)
def update_access(
    property_id: int,
    access_id: int,
    payload: RoleUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    grant = InvitationService(db).update_role(property_id, user_id, access_id, payload.role)
    return {"message": "Permission updated", "role": grant.role.value}


# Remove access for a user
@router.delete("/properties/{property_id}/access/{access_id}")
def remove_access(
    property_id: int,
    access_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    InvitationService(db).revoke(property_id, user_id, access_id)
    return {"message": "Access removed"}
