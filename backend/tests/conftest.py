import os
import sys
from pathlib import Path

import pytest

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

# Settings are read at import time: no scheduler, no Postgres
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import gamecafe.models  # noqa: F401  (register tables on Base.metadata)
from gamecafe.api.deps import get_cache
from gamecafe.config import settings
from gamecafe.db.base import Base
from gamecafe.db.session import get_db
from gamecafe.main import app
from gamecafe.services.party_finder.cache import TTLCache


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(eng)
        eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def cache():
    return TTLCache()


@pytest.fixture
def client(db, cache):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_cache] = lambda: cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def force_test_settings():
    """Development mode unless a test opts into production (cron secret checks)."""
    original_env = settings.environment
    original_secret = settings.cron_secret
    settings.environment = "development"
    settings.cron_secret = ""
    try:
        yield
    finally:
        settings.environment = original_env
        settings.cron_secret = original_secret
