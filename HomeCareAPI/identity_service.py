"""
User identity: registration, login and session tokens.

Tokens are HS256 JWTs carrying the user id in `sub` and expiring after
`ACCESS_TOKEN_EXPIRE_DAYS`.
"""

import logging
from datetime import datetime, timedelta
from typing import Tuple, Union

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from HomeCareAPI.config import ACCESS_TOKEN_EXPIRE_DAYS, ALGORITHM, SECRET_KEY
from HomeCareAPI.errors import DuplicateEmail, InvalidCredentials, InvalidToken, ValidationFailed
from HomeCareAPI.invitation_service import InvitationService
from HomeCareAPI.models import User
from HomeCareAPI.utils import hash_password, normalize_email, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def create_access_token(user_id: int, expires_delta: Union[timedelta, None] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode = {"sub": str(user_id), "exp": datetime.utcnow() + expires_delta}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> int:
    """
    Decode a session token.

    Args:
        token (str): The bearer token.

    Returns:
        int: The user id embedded in the token.

    Raises:
        InvalidToken: If the token is expired, malformed or badly signed.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return int(payload.get("sub"))
    except (jwt.PyJWTError, TypeError, ValueError):
        raise InvalidToken()


class IdentityService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, name: str, email: str, password: str) -> Tuple[User, str]:
        """
        Create an account and sign it in.

        Pending property invites sent to the email are accepted in the same
        transaction as the user row.

        Args:
            name (str): Display name.
            email (str): Email address; stored lower-case.
            password (str): Plain text password.

        Returns:
            tuple[User, str]: The new user and a session token.

        Raises:
            ValidationFailed: If a field is missing or the password is too short.
            DuplicateEmail: If the email is already registered.
        """
        name = (name or "").strip()
        email = normalize_email(email)
        if not name or not email or not password:
            raise ValidationFailed("Name, email, and password are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

        if self.db.query(User).filter(User.email == email).first():
            logger.info("Registration rejected for existing email %s", email)
            raise DuplicateEmail()

        user = User(name=name, email=email, encrypted_password=hash_password(password))
        try:
            self.db.add(user)
            self.db.flush()
            InvitationService(self.db).accept_pending_invites(user.id, email, commit=False)
            self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent registration of the same email
            self.db.rollback()
            raise DuplicateEmail()
        self.db.refresh(user)

        logger.info("Registered user %s", user.id)
        return user, create_access_token(user.id)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and issue a session token.

        Raises:
            ValidationFailed: If email or password is missing.
            InvalidCredentials: If the email is unknown or the password is wrong.
        """
        email = normalize_email(email)
        if not email or not password:
            raise ValidationFailed("Email and password are required")

        user = self.db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.encrypted_password):
            logger.info("Failed login for %s", email)
            raise InvalidCredentials()
        return user, create_access_token(user.id)
