"""
Shared fixtures: an isolated in-memory database per test, optionally loaded
with the demo caseload, and an API client bound to it.
"""
import pytest
from sqlalchemy.orm import sessionmaker

from signify.database import build_engine, get_db, init_db
from signify.seed import seed_demo_data


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite session with all tables created."""
    engine = build_engine("sqlite://")
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def seeded_session(db_session):
    """Session holding the demo caseload (people 1-6, logs for people 1-3)."""
    seed_demo_data(db_session)
    return db_session


@pytest.fixture
def client(seeded_session):
    """TestClient whose requests all use the seeded test session."""
    from fastapi.testclient import TestClient
    from signify.main import app

    app.dependency_overrides[get_db] = lambda: seeded_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
