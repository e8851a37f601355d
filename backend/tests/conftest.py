import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure backend/ is importable as the top-level "weatherscore" package even when pytest runs from repo root
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Ensure the application runs in test/sqlite mode *before* importing any app modules
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.pop("OPENWEATHER_API_KEY", None)

# Import the DB session module first so we can patch it before the app is imported
import weatherscore.db.session as app_db_session  # type: ignore

# --- Use a single in-memory SQLite DB for the whole test session ---
ENGINE = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)
SessionTesting = sessionmaker(
    bind=ENGINE, autocommit=False, autoflush=False, expire_on_commit=False, future=True
)

# --- Ensure tests and app code share the SAME in-memory engine/sessionmaker ---
setattr(app_db_session, "ENGINE", ENGINE)
app_db_session.SessionLocal = SessionTesting
app_db_session.get_sessionmaker = lambda: SessionTesting  # type: ignore

from weatherscore.db.base import Base
from weatherscore.main import app
from weatherscore.services.store import WeatherStore

Base.metadata.create_all(bind=ENGINE)


@pytest.fixture
def anyio_backend():
    # force asyncio; avoid trio run
    return "asyncio"


@pytest.fixture(scope="function")
def reset_db():
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)


@pytest.fixture(scope="function")
def store(reset_db):
    yield WeatherStore(SessionTesting)


@pytest.fixture(scope="function")
def client(reset_db):
    with TestClient(app) as c:
        yield c
