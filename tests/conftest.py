from __future__ import annotations

from typing import Generator, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from db.models import (
    ATTACHED_FILE_KEY,
    FEATURED_KEY,
    LABEL_KEY,
    Base,
    ContentAttribute,
    ContentItem,
)
from db.store import Store

UPLOADS_URL = "https://example.test/wp-content/uploads"
UPLOADS_DIR = "/srv/site/wp-content/uploads"
SITE_URL = "https://example.test"


@pytest.fixture
def session() -> Generator[Session, None, None]:
    # One shared in-memory connection so every session sees the same tables
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()
        engine.dispose()


@pytest.fixture
def store(session: Session) -> Store:
    return Store(session, uploads_url=UPLOADS_URL, uploads_dir=UPLOADS_DIR, site_url=SITE_URL)


class SiteBuilder:
    """Small helper for seeding posts, attachments and attributes."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def image(self, asset_id: int, file: Optional[str] = None, alt: Optional[str] = None,
              mime: str = "image/jpeg") -> int:
        self.session.add(ContentItem(
            id=asset_id, post_type="attachment", post_status="inherit",
            post_title="", post_content="", post_mime_type=mime, post_name="",
        ))
        if file is not None:
            self.meta(asset_id, ATTACHED_FILE_KEY, file)
        if alt is not None:
            self.meta(asset_id, LABEL_KEY, alt)
        self.session.commit()
        return asset_id

    def post(self, post_id: int, title: str = "", content: str = "", post_type: str = "post",
             status: str = "publish", featured: Optional[int] = None) -> int:
        self.session.add(ContentItem(
            id=post_id, post_type=post_type, post_status=status,
            post_title=title, post_content=content, post_mime_type="", post_name="",
        ))
        if featured is not None:
            self.meta(post_id, FEATURED_KEY, str(featured))
        self.session.commit()
        return post_id

    def meta(self, post_id: int, key: str, value: Optional[str]) -> None:
        self.session.add(ContentAttribute(post_id=post_id, meta_key=key, meta_value=value))
        self.session.commit()


@pytest.fixture
def site(session: Session) -> SiteBuilder:
    return SiteBuilder(session)
