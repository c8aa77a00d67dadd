"""
Signify - Database Configuration
SQLAlchemy engine and session factory.

The default URL is an in-memory SQLite database: records live only as long as
the process, and the demo seed is reloaded on every start.
"""
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Format: sqlite:// (in-memory) or any SQLAlchemy URL
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")


def build_engine(url: str = DATABASE_URL):
    """Create an engine; in-memory SQLite shares a single connection."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)
    return create_engine(url, echo=False)


# Create engine
engine = build_engine()

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for ORM models
Base = declarative_base()


def get_db():
    """Dependency for FastAPI - yields database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Initialize database - create all tables."""
    # Register ORM models on Base.metadata
    from .models import db_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
