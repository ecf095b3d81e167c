from __future__ import annotations

import os
from typing import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.engine.url import make_url
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _normalize_sqlite_url(db_url: str) -> str:
    """Ensure sqlite file URLs are absolute and anchored at repo root when relative.

    This prevents mismatched files when different processes have different CWDs.
    """
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return db_url
    db_path = url.database or ""
    # skip in-memory URLs
    if db_path in ("", ":memory:"):
        return db_url
    p = Path(db_path)
    if not p.is_absolute():
        url = url.set(database=str((ROOT / p).resolve()))
        return url.render_as_string(hide_password=False)
    return db_url


# Point at the CMS database; override with ALTMGR_DB_URL or reconfigure()
DB_URL = _normalize_sqlite_url(os.environ.get("ALTMGR_DB_URL", "sqlite:///./data/alt_manager.db"))

# Use NullPool so SQLite file handles are released immediately (avoids Windows file locks in tests)
engine = create_engine(DB_URL, future=True, poolclass=NullPool)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    # If the environment requests a different DB URL, switch before creating a session
    env_url = os.environ.get("ALTMGR_DB_URL")
    if env_url:
        target_url = _normalize_sqlite_url(env_url)
        if target_url != DB_URL:
            reconfigure(target_url)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def reconfigure(db_url: str) -> None:
    """Rebuild the SQLAlchemy engine/session for a new DB URL."""
    global DB_URL, engine, SessionLocal
    # Dispose any existing connections
    engine.dispose()
    DB_URL = _normalize_sqlite_url(db_url)
    engine = create_engine(DB_URL, future=True, poolclass=NullPool)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)
