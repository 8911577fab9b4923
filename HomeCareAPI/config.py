"""
Configuration module for HomeCareAPI.

This module loads environment files for local development and exposes the
settings used across the application.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _load_env() -> None:
    """
    Load environment variables for local development.

    Prefer `.env.development` in the project root. Fallback to `.env` if the
    development file is missing. Does nothing on Heroku dynos where
    environment variables are provided by the platform.

    Returns:
        None
    """
    if os.getenv("DYNO"):
        return
    root = Path(__file__).resolve().parents[1]
    dev_env = root / ".env.development"
    default_env = root / ".env"
    if dev_env.exists():
        load_dotenv(dev_env)
    elif default_env.exists():
        load_dotenv(default_env)


_load_env()


def _database_url() -> str:
    """
    Resolve the database URL from the environment.

    Returns:
        str: The database connection URL string. Normalizes `postgres://` to
        `postgresql://` for SQLAlchemy compatibility.
    """
    url = os.getenv("DATABASE_URL") or "sqlite:///./homecare.db"
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


DATABASE_URL = _database_url()
"""str: The database connection URL."""

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    logger.warning("SECRET_KEY is not set; using the development signing key")
    SECRET_KEY = "dev-secret-key-change-in-production"

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))
"""int: Lifetime of an issued session token."""

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Europe/Helsinki")
"""str: Time zone used to decide what "today" is for due dates."""

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ALLOW_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]
