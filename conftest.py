"""Shared pytest fixtures for Remembered Service."""

import os

# Must be set before config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("WORKER_ENABLED", "false")
os.environ.setdefault("TIMEZONE", "UTC")

from datetime import datetime

import pytest

import database
from date_extractor import DateExtractor


@pytest.fixture
def now():
    """A fixed 'current moment': Oct 18 2026, 10:30 local."""
    return datetime(2026, 10, 18, 10, 30)


@pytest.fixture
def numeric_extractor():
    """Extractor running on the numeric month/day pattern alone."""
    return DateExtractor()


@pytest.fixture
def db():
    """A session on a freshly emptied database."""
    for table in reversed(database.Base.metadata.sorted_tables):
        with database.engine.begin() as conn:
            conn.execute(table.delete())
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
