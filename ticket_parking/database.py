"""
Engine and session setup for the key-value store.
SQLite by default (file or in-memory); any SQLAlchemy URL works.
"""

from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from ticket_parking.config import settings

Base = declarative_base()


def build_engine(url: str):
    """
    Engine for `url`. SQLite connections are shared across FastAPI's
    threadpool; an in-memory SQLite database keeps one connection alive so
    every session sees the same tables.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    options = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return create_engine(url, **options)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """FastAPI dependency — one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """Create the kv_store table if missing. Safe to call on every startup."""
    from ticket_parking.models.kv_entry import KeyValueEntry   # noqa

    Base.metadata.create_all(bind=bind or engine)
