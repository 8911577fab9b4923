"""
Sharing a property with other people.

A share either binds directly to an existing account or leaves a pending
invite keyed by email, which is claimed when someone registers with that
address. The owner grant is created with the property and can never be
changed or removed here.
"""

import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from HomeCareAPI.access_service import AccessEvaluator
from HomeCareAPI.constants import GRANTABLE_ROLES, Role
from HomeCareAPI.errors import AlreadyShared, CannotModifyOwner, InvalidRole, NotFound, ValidationFailed
from HomeCareAPI.models import PropertyAccess, User
from HomeCareAPI.utils import normalize_email, utcnow

logger = logging.getLogger(__name__)


def parse_grantable_role(role) -> Role:
    """
    Convert a requested role into a `Role` that may be granted by sharing.

    Raises:
        InvalidRole: If the value is not admin, edit or view.
    """
    try:
        parsed = Role(role)
    except ValueError:
        raise InvalidRole()
    if parsed not in GRANTABLE_ROLES:
        raise InvalidRole()
    return parsed


class InvitationService:
    def __init__(self, db: Session):
        self.db = db
        self.access = AccessEvaluator(db)

    def list_access(self, property_id: int, caller_user_id: int) -> List[PropertyAccess]:
        """Return every grant on a property, pending ones included. Admins only."""
        self.access.require_admin_access(caller_user_id, property_id)
        return (
            self.db.query(PropertyAccess)
            .filter(PropertyAccess.property_id == property_id)
            .order_by(PropertyAccess.invited_at.asc(), PropertyAccess.id.asc())
            .all()
        )

    def share(self, property_id: int, granter_user_id: int, email: str, role) -> PropertyAccess:
        """
        Share a property with someone by email.

        Args:
            property_id (int): The property to share.
            granter_user_id (int): The caller; must be owner or admin.
            email (str): Who to share with.
            role (str): admin, edit or view.

        Returns:
            PropertyAccess: The bound or pending grant.

        Raises:
            Forbidden: If the caller is below admin.
            ValidationFailed: If email or role is missing.
            InvalidRole: If the role cannot be granted.
            AlreadyShared: If the email already has a grant on the property.
        """
        self.access.require_admin_access(granter_user_id, property_id)

        email = normalize_email(email)
        if not email or not role:
            raise ValidationFailed("Email and role are required")
        new_role = parse_grantable_role(role)

        existing = (
            self.db.query(PropertyAccess)
            .outerjoin(User, User.id == PropertyAccess.user_id)
            .filter(
                PropertyAccess.property_id == property_id,
                or_(User.email == email, PropertyAccess.invite_email == email),
            )
            .first()
        )
        if existing:
            raise AlreadyShared()

        target_user = self.db.query(User).filter(User.email == email).first()
        if target_user:
            grant = PropertyAccess(
                property_id=property_id,
                user_id=target_user.id,
                role=new_role,
                invite_accepted=True,
                accepted_at=utcnow(),
            )
        else:
            grant = PropertyAccess(
                property_id=property_id,
                invite_email=email,
                role=new_role,
                invite_accepted=False,
            )

        try:
            self.db.add(grant)
            self.db.commit()
            self.db.refresh(grant)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to share property %s with %s", property_id, email)
            raise

        logger.info(
            "User %s shared property %s with %s as %s (%s)",
            granter_user_id,
            property_id,
            email,
            new_role.value,
            "bound" if grant.invite_accepted else "pending",
        )
        return grant

    def accept_pending_invites(self, new_user_id: int, new_user_email: str, commit: bool = True) -> List[PropertyAccess]:
        """
        Bind every pending invite for an email to the user who now owns it.

        Args:
            new_user_id (int): The freshly registered user.
            new_user_email (str): The user's email.
            commit (bool): Commit here; pass False to join the caller's transaction.

        Returns:
            list[PropertyAccess]: The grants that became active.
        """
        email = normalize_email(new_user_email)
        pending = (
            self.db.query(PropertyAccess)
            .filter(
                PropertyAccess.user_id.is_(None),
                PropertyAccess.invite_accepted.is_(False),
                PropertyAccess.invite_email == email,
            )
            .all()
        )
        now = utcnow()
        for grant in pending:
            grant.user_id = new_user_id
            grant.invite_accepted = True
            grant.accepted_at = now

        if pending:
            logger.info("Accepted %d pending invite(s) for user %s", len(pending), new_user_id)
        if commit:
            self.db.commit()
        return pending

    def _get_grant(self, property_id: int, access_id: int) -> PropertyAccess:
        grant = (
            self.db.query(PropertyAccess)
            .filter(PropertyAccess.id == access_id, PropertyAccess.property_id == property_id)
            .first()
        )
        if not grant:
            raise NotFound("Access record not found")
        return grant

    def update_role(self, property_id: int, caller_user_id: int, access_id: int, new_role) -> PropertyAccess:
        """
        Change the role of a non-owner grant.

        Raises:
            Forbidden: If the caller is below admin.
            InvalidRole: If `new_role` is not admin, edit or view.
            NotFound: If the grant does not belong to the property.
            CannotModifyOwner: If the grant is the owner's.
        """
        self.access.require_admin_access(caller_user_id, property_id)
        role = parse_grantable_role(new_role)
        grant = self._get_grant(property_id, access_id)
        if Role(grant.role) == Role.OWNER:
            raise CannotModifyOwner("Cannot change owner permissions")

        grant.role = role
        try:
            self.db.commit()
            self.db.refresh(grant)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to update access %s on property %s", access_id, property_id)
            raise
        logger.info("User %s set access %s on property %s to %s", caller_user_id, access_id, property_id, role.value)
        return grant

    def revoke(self, property_id: int, caller_user_id: int, access_id: int) -> None:
        """
        Remove a non-owner grant.

        Raises:
            Forbidden: If the caller is below admin.
            NotFound: If the grant does not belong to the property.
            CannotModifyOwner: If the grant is the owner's.
        """
        self.access.require_admin_access(caller_user_id, property_id)
        grant = self._get_grant(property_id, access_id)
        if Role(grant.role) == Role.OWNER:
            raise CannotModifyOwner("Cannot remove owner access")

        try:
            self.db.delete(grant)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to revoke access %s on property %s", access_id, property_id)
            raise
        logger.info("User %s revoked access %s on property %s", caller_user_id, access_id, property_id)
