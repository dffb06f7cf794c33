"""Pytest configuration and shared fixtures.

DATABASE_URL is set before any package import so settings resolve to SQLite.
"""
import os
import uuid
from datetime import datetime, timedelta

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from terminology_reporting.database import Base, get_session_factory
from terminology_reporting.main import app
from terminology_reporting.models import TrudRelease, UpdateError, UpdateRun, UpdateStep

BASE_TIME = datetime(2026, 3, 1, 2, 0)


# ── Database fixtures ────────────────────────────────────────────────

@pytest.fixture()
def db_engine():
    """In-memory SQLite engine shared across threads, with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(db_engine) -> Session:
    TestingSession = sessionmaker(bind=db_engine, autoflush=False)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture()
def client(db_engine) -> TestClient:
    TestingSession = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)

    app.dependency_overrides[get_session_factory] = lambda: TestingSession
    yield TestClient(app)
    app.dependency_overrides.pop(get_session_factory, None)


# ── Factories ────────────────────────────────────────────────────────

def make_run(**kwargs) -> UpdateRun:
    defaults = {
        "run_id": uuid.uuid4(),
        "start_time": BASE_TIME,
        "success": True,
        "updates_found": 0,
        "server_name": "TERMSQL01",
        "whatif_mode": False,
        "forced_run": False,
    }
    defaults.update(kwargs)
    return UpdateRun(**defaults)


def make_step(run: UpdateRun, terminology_type: str = "SNOMED", step_order: int = 1, **kwargs) -> UpdateStep:
    defaults = {
        "run_id": run.run_id,
        "terminology_type": terminology_type,
        "step_name": f"{terminology_type} step {step_order}",
        "step_order": step_order,
        "success": True,
    }
    defaults.update(kwargs)
    return UpdateStep(**defaults)


def make_error(run: UpdateRun, minutes: int = 0, **kwargs) -> UpdateError:
    defaults = {
        "run_id": run.run_id,
        "error_source": "pipeline",
        "error_message": "Something failed",
        "error_timestamp": run.start_time + timedelta(minutes=minutes),
    }
    defaults.update(kwargs)
    return UpdateError(**defaults)


def make_release(item_name: str = "SNOMED", days: int = 0, **kwargs) -> TrudRelease:
    defaults = {
        "item_name": item_name,
        "trud_item_number": 101 if item_name == "SNOMED" else 24,
        "release_id": f"{item_name}-{days}",
        "detected_date": BASE_TIME + timedelta(days=days),
    }
    defaults.update(kwargs)
    return TrudRelease(**defaults)


def seed(db: Session, *objects):
    """Add rows to the session and commit. Runs are flushed first so FKs resolve."""
    runs = [o for o in objects if isinstance(o, UpdateRun)]
    db.add_all(runs)
    db.flush()
    db.add_all([o for o in objects if not isinstance(o, UpdateRun)])
    db.commit()


def seed_runs(db: Session, count: int) -> list[UpdateRun]:
    """Seed ``count`` runs one hour apart; returned newest first."""
    runs = [make_run(start_time=BASE_TIME + timedelta(hours=i)) for i in range(count)]
    seed(db, *runs)
    return list(reversed(runs))
