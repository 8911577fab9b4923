from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from HomeCareAPI.database import get_db
from HomeCareAPI.identity_service import IdentityService
from HomeCareAPI.models import User
from HomeCareAPI.routes.auth import get_current_user
from HomeCareAPI.schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse

router = APIRouter()


def _auth_payload(user: User, token: str) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email, "token": token, "token_type": "bearer"}


# Register
@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create an account and return a session token.

    Pending property invites addressed to the email are accepted as part of
    registration.

    Args:
        payload (RegisterRequest): Name, email and password.
        db (Session): The database session.

    Returns:
        AuthResponse: The new user and token.

    Raises:
        HTTPException: 400 on missing fields or short password, 409 if the email exists.
    """
    user, token = IdentityService(db).register(payload.name, payload.email, payload.password)
    return _auth_payload(user, token)

# Login
@router.post("/auth/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate user and return access token.

    Args:
        payload (LoginRequest): Login credentials.
        db (Session): The database session.

    Returns:
        AuthResponse: The user and token.

    Raises:
        HTTPException: 401 if authentication fails.
    """
    user, token = IdentityService(db).login(payload.email, payload.password)
    return _auth_payload(user, token)

# Get the current user
@router.get("/auth/me", response_model=UserResponse)
def read_users_me(user: User = Depends(get_current_user)):
    return user
