# tests/conftest.py
"""Shared fixtures: in-memory key-value store and a pinned clock."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("LOG_DIR", "")   # console logging only during tests

import pytest
from datetime import datetime, timezone
from sqlalchemy.orm import sessionmaker
from ticket_parking.database import build_engine, create_tables
from ticket_parking.utils.clock import FixedClock

T0 = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(T0)
