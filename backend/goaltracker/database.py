"""Database configuration and session management."""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from goaltracker.config import get_settings
from goaltracker.models.base import Base


@lru_cache()
def get_engine() -> Engine:
    """Create the SQLAlchemy engine on first use."""
    settings = get_settings()

    # For SQLite, we need check_same_thread=False for FastAPI
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    return create_engine(
        settings.DATABASE_URL,
        connect_args=connect_args,
        echo=False,
    )


@lru_cache()
def get_session_factory() -> sessionmaker:
    """Session factory bound to the lazily created engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_db():
    """Dependency to get database session."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create all database tables."""
    # Import all models to ensure they are registered with Base
    from goaltracker.models import (  # noqa: F401
        Activity,
        Goal,
        GoalHistory,
        Sport,
    )
    Base.metadata.create_all(bind=get_engine())


def paginate(query, page: int, limit: int) -> dict:
    """Apply offset/limit to a query and return the page envelope."""
    total = query.order_by(None).count()
    data = query.offset((page - 1) * limit).limit(limit).all()
    return {"data": data, "page": page, "limit": limit, "total": total}
