from datetime import datetime, date
from passlib.context import CryptContext
from pytz import timezone

from HomeCareAPI.config import APP_TIMEZONE

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password, encrypted_password):
    """
    Verify a password against its hash.

    Args:
        plain_password (str): The plain text password.
        encrypted_password (str): The hashed password.

    Returns:
        bool: True if the password matches, False otherwise.
    """
    return pwd_context.verify(plain_password, encrypted_password)

def hash_password(password):
    """
    Hash a password.

    Args:
        password (str): The password to hash.

    Returns:
        str: The hashed password.
    """
    return pwd_context.hash(password)

def normalize_email(email):
    return (email or "").strip().lower()

def local_today() -> date:
    """
    Return today's date in the application time zone.

    Returns:
        date: The current calendar date in `APP_TIMEZONE`.
    """
    return datetime.now(timezone(APP_TIMEZONE)).date()

def utcnow() -> datetime:
    return datetime.utcnow()
