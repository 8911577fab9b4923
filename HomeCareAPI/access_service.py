"""
Property access control.

Resolves the role a user holds on a property and gates operations by the
minimum role they need. Owners are recognised from `Property.user_id`; every
other user needs an accepted `PropertyAccess` grant. Pending grants are
visible in the access list but never confer a role.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from HomeCareAPI.constants import Role, at_least
from HomeCareAPI.errors import Forbidden, NotFound
from HomeCareAPI.models import Property, PropertyAccess

logger = logging.getLogger(__name__)


class AccessEvaluator:
    """Answers "what may this user do with this property" against the store."""

    def __init__(self, db: Session):
        self.db = db

    def get_property(self, property_id: int) -> Optional[Property]:
        return self.db.query(Property).filter(Property.id == property_id).first()

    def resolve_role(self, user_id: int, property_id: int) -> Optional[Role]:
        """
        Determine the caller's effective role on a property.

        Args:
            user_id (int): The caller.
            property_id (int): The property.

        Returns:
            Role | None: `Role.OWNER` for the owner, the grant's role for an
            accepted grant, otherwise None.
        """
        prop = self.get_property(property_id)
        if prop is None:
            return None
        return self._role_on(prop, user_id)

    def _role_on(self, prop: Property, user_id: int) -> Optional[Role]:
        if prop.user_id == user_id:
            return Role.OWNER
        grant = (
            self.db.query(PropertyAccess)
            .filter(
                PropertyAccess.property_id == prop.id,
                PropertyAccess.user_id == user_id,
                PropertyAccess.invite_accepted.is_(True),
            )
            .first()
        )
        return Role(grant.role) if grant else None

    def require_role(self, user_id: int, property_id: int, minimum: Role) -> Role:
        """
        Gate an operation on a minimum role.

        Args:
            user_id (int): The caller.
            property_id (int): The property being touched.
            minimum (Role): Lowest role allowed to proceed.

        Returns:
            Role: The caller's resolved role.

        Raises:
            NotFound: If the property does not exist.
            Forbidden: If the caller has no role or a lower one.
        """
        prop = self.get_property(property_id)
        if prop is None:
            raise NotFound("Property not found")
        role = self._role_on(prop, user_id)
        if role is None:
            logger.info("User %s denied access to property %s", user_id, property_id)
            raise Forbidden("Access denied to this property")
        if not at_least(role, minimum):
            logger.info(
                "User %s with role %s needs %s on property %s", user_id, role.value, minimum.value, property_id
            )
            raise Forbidden()
        return role

    def require_any_access(self, user_id: int, property_id: int) -> Role:
        return self.require_role(user_id, property_id, Role.VIEW)

    def require_edit_access(self, user_id: int, property_id: int) -> Role:
        return self.require_role(user_id, property_id, Role.EDIT)

    def require_admin_access(self, user_id: int, property_id: int) -> Role:
        return self.require_role(user_id, property_id, Role.ADMIN)

    def accessible_properties(self, user_id: int, minimum: Role = Role.VIEW) -> List[Tuple[Property, Role]]:
        """
        List the properties a user can reach with at least `minimum`.

        Returns:
            list[tuple[Property, Role]]: Each property once, with the caller's role.
        """
        found = {}
        for prop in self.db.query(Property).filter(Property.user_id == user_id).all():
            found[prop.id] = (prop, Role.OWNER)

        grants = (
            self.db.query(PropertyAccess)
            .filter(PropertyAccess.user_id == user_id, PropertyAccess.invite_accepted.is_(True))
            .all()
        )
        for grant in grants:
            if grant.property_id not in found:
                found[grant.property_id] = (grant.property, Role(grant.role))

        return [(prop, role) for prop, role in found.values() if at_least(role, minimum)]

    def accessible_property_ids(self, user_id: int, minimum: Role = Role.VIEW) -> List[int]:
        return [prop.id for prop, _ in self.accessible_properties(user_id, minimum)]
