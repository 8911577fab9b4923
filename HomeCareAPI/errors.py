"""
Error taxonomy for HomeCareAPI.

Each class is an `HTTPException`, so services can raise them directly and
FastAPI renders the usual `{"detail": ...}` body with the matching status.
"""

from fastapi import HTTPException, status


class Unauthenticated(HTTPException):
    """Missing, invalid or expired credentials."""

    default_detail = "Not authenticated"

    def __init__(self, detail: str = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail or self.default_detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidToken(Unauthenticated):
    default_detail = "Invalid or expired token"


class InvalidCredentials(Unauthenticated):
    default_detail = "Invalid email or password"


class Forbidden(HTTPException):
    """Authenticated, but the caller's role on the resource is insufficient."""

    default_detail = "Insufficient permissions for this action"

    def __init__(self, detail: str = None):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail or self.default_detail)


class CannotModifyOwner(Forbidden):
    default_detail = "Cannot change or remove owner access"


class NotFound(HTTPException):
    default_detail = "Not found"

    def __init__(self, detail: str = None):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail or self.default_detail)


class ValidationFailed(HTTPException):
    """Missing or malformed input."""

    default_detail = "Invalid request"

    def __init__(self, detail: str = None):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail or self.default_detail)


class InvalidRole(ValidationFailed):
    default_detail = "Invalid role"


class InvalidFrequency(ValidationFailed):
    default_detail = "Invalid frequency"


class Conflict(HTTPException):
    default_detail = "Conflict"

    def __init__(self, detail: str = None):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail or self.default_detail)


class DuplicateEmail(Conflict):
    default_detail = "User with this email already exists"


class AlreadyShared(Conflict):
    default_detail = "User already has access to this property"
