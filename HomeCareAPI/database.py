"""
Database configuration and session management.

This module creates the engine from the configured URL and provides the
session dependency for FastAPI path operations.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from HomeCareAPI.config import DATABASE_URL
from HomeCareAPI.models import Base


def _create_engine(url: str):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


# Create the SQLAlchemy engine
engine = _create_engine(DATABASE_URL)

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency for getting the database session
def get_db():
    """
    Get a database session.

    This function is designed to be used as a FastAPI dependency. It yields a
    database session and ensures it is closed after the request is processed.

    Yields:
        sqlalchemy.orm.Session: A database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = ["Base", "engine", "SessionLocal", "get_db"]
