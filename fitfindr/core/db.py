"""Database connection and session management."""

import os
from collections.abc import Generator
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from fitfindr.core.config import settings

# Lazy database initialization - don't create engine at import time
engine: Optional[Engine] = None
session_factory: Optional[sessionmaker[Session]] = None


def _initialize_database() -> None:
    """Initialize database engine and session factory."""
    global engine, session_factory

    if engine is not None:
        return  # Already initialized

    if os.getenv("TESTING") == "true":
        # Keep as None for testing - will be overridden in test fixtures
        return

    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool
        connect_args["check_same_thread"] = False

    engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
    session_factory = sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


def create_session() -> Session:
    """Create a standalone session for scripts and CLIs."""
    # Initialize database on first use
    _initialize_database()

    if session_factory is None:
        raise RuntimeError("Database not initialized - cannot create session")

    return session_factory()


def get_session() -> Generator[Session, None, None]:
    """Get database session.

    Yields:
        Session: Database session
    """
    with create_session() as session:
        yield session


def init_db() -> None:
    """Create tables that do not exist yet."""
    from fitfindr.database import Base

    _initialize_database()
    if engine is None:
        raise RuntimeError("Database not initialized - cannot create tables")
    Base.metadata.create_all(engine)
