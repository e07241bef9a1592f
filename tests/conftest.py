"""
Pytest fixtures for HireBoard tests.
"""

import os

# IMPORTANT: Set environment variables BEFORE any imports from hireboard
# so the module-level settings, engine and limiter pick them up.
os.environ["HIREBOARD_DATABASE_URL"] = "sqlite://"
os.environ["HIREBOARD_SEED_DEMO_DATA"] = "false"
os.environ["HIREBOARD_RATE_LIMIT_ENABLED"] = "false"

from datetime import datetime, timedelta

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from hireboard.config import ClientSettings
from hireboard.controller import board_session
from hireboard.database import create_app_engine, get_db, init_db
from hireboard.models import Applicant as ApplicantRow, Job

API_ROOT = "http://testserver/api"


# =============================================================================
# STORE FIXTURES
# =============================================================================


@pytest.fixture
def session_factory(tmp_path):
    """
    Fresh file-backed SQLite store per test.

    A file (not :memory:) so concurrent requests from the ASGI threadpool
    each get their own connection.
    """
    engine = create_app_engine(f"sqlite:///{tmp_path / 'store.db'}")
    init_db(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def app(session_factory):
    """The store app wired to the per-test database."""
    from hireboard.main import app as store_app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    store_app.dependency_overrides[get_db] = override_get_db
    yield store_app
    store_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """FastAPI test client fixture."""
    return TestClient(app)


@pytest.fixture
def store_data(session_factory):
    """
    Two jobs and four applicants with fixed ids.

    List order (newest application first) is A, B, C, D.
    """
    now = datetime.utcnow()
    db = session_factory()
    try:
        db.add_all([
            Job(id="job-1", title="Community Engagement Officer", department="Operations",
                status="active", created_at=now - timedelta(days=20)),
            Job(id="job-2", title="Junior Frontend Developer", department="Engineering",
                status="draft", created_at=now - timedelta(days=10)),
        ])
        rows = [
            ("A", "job-1", "Alice Walker", "alice@example.com", "applied", "direct", 1),
            ("B", "job-1", "Ben Carter", "ben@example.com", "interview", "referral", 2),
            ("C", "job-2", "Chloe Ng", "chloe@example.com", "rejected", "linkedin", 3),
            ("D", "job-2", "Dana Smith", "dana@example.com", "screening", "seek", 4),
        ]
        for applicant_id, job_id, name, email, stage, source, days_ago in rows:
            applied_at = now - timedelta(days=days_ago)
            db.add(ApplicantRow(
                id=applicant_id,
                job_id=job_id,
                candidate_id=f"cand-{applicant_id}",
                candidate_name=name,
                candidate_email=email,
                stage=stage,
                source=source,
                applied_at=applied_at,
                last_activity_at=applied_at,
                rating=2,
                score_overall=70,
                tags=["shortlist"],
            ))
        db.commit()
    finally:
        db.close()
    return {"jobs": ["job-1", "job-2"], "applicants": ["A", "B", "C", "D"]}


@pytest.fixture
def open_board(app):
    """Factory for board sessions that talk to the store app in-process."""
    def _open(load=True, **overrides):
        cfg = ClientSettings(
            api_base_url=API_ROOT,
            user_email="recruiter@example.com",
            **overrides,
        )
        return board_session(
            client_settings=cfg,
            transport=httpx.ASGITransport(app=app),
            load=load,
        )
    return _open

