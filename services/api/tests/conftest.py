"""Pytest configuration and shared fixtures.

Repository and route tests run against an in-memory SQLite database
shared across connections with StaticPool.
"""

import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from services.api.src.screening.db.models import metadata


def pytest_configure(config):
    """Configure test environment before collection."""
    os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
    os.environ.setdefault("ACTIVE_QUESTIONNAIRE_VERSIONS", "v1")


@pytest.fixture
def engine():
    """Fresh in-memory database with all tables."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(eng)

    yield eng

    metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_row(engine):
    """A screening session with minimal demographics."""
    from services.api.src.screening.db.repository import SessionRepository

    return SessionRepository(engine).create(
        questionnaire_version="v1",
        demographics={"age": 30, "gender": "female"},
        accepted_terms=True,
        accepted_privacy=True,
    )
