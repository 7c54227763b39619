"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite database per test
- HTTPX AsyncClient wired to that database
- Program and event fixtures (row factories live in factories.py)
"""
import os
import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator, Generator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Must be set before the app (and its rate limiter and engine) is imported.
os.environ["TESTING"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"

from skforms.main import app
from skforms.core.config import settings
from skforms.core.deps import get_db
from skforms.db.base import Base
from skforms.db.models import Event, Program


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Creates a session on a private in-memory database.

    App code calls commit() freely; the whole database is discarded when the
    test ends.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Keep uploaded files inside the test's temp directory."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


# =============================================================================
# Program / Event Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def program(db: Session) -> Program:
    program = Program(id=uuid.uuid4(), title="Sports Fest 2024")
    db.add(program)
    db.flush()
    return program


@pytest.fixture(scope="function")
def event(db: Session, program: Program) -> Event:
    event = Event(
        id=uuid.uuid4(),
        program_id=program.id,
        title="Basketball League",
        date_time=datetime(2024, 7, 1, 9, 0, tzinfo=timezone.utc),
    )
    db.add(event)
    db.flush()
    return event


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create AsyncClient whose requests use the test database session.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()
