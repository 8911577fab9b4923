from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from HomeCareAPI.database import get_db
from HomeCareAPI.errors import InvalidToken
from HomeCareAPI.identity_service import verify_token
from HomeCareAPI.models import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user_id(token: str = Depends(oauth2_scheme)) -> int:
    """
    Resolve the bearer token to a user id.

    Raises:
        InvalidToken: 401 when the token is expired or malformed.
    """
    return verify_token(token)


def get_current_user(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise InvalidToken("User not found")
    return user
