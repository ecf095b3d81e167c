"""Explicit store-access context for the ALT manager.

Everything that touches the CMS tables goes through a ``Store`` built around
one SQLAlchemy session, so callers pass the store in instead of reaching for
a process-wide handle. Library code only reads content items and writes a
single attribute (the ALT label).
"""
from __future__ import annotations

import logging
import os
import posixpath
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import (
    ATTACHED_FILE_KEY,
    LABEL_KEY,
    ContentAttribute,
    ContentItem,
)

_log = logging.getLogger(__name__)

UPLOADS_URL = os.environ.get("ALTMGR_UPLOADS_URL", "http://localhost/wp-content/uploads")
UPLOADS_DIR = os.environ.get("ALTMGR_UPLOADS_DIR", "/var/www/html/wp-content/uploads")
SITE_URL = os.environ.get("ALTMGR_SITE_URL", "http://localhost")


class AssetNotFound(LookupError):
    pass


class Store:
    def __init__(
        self,
        session: Session,
        *,
        uploads_url: Optional[str] = None,
        uploads_dir: Optional[str] = None,
        site_url: Optional[str] = None,
    ) -> None:
        self.session = session
        self.uploads_url = (uploads_url if uploads_url is not None else UPLOADS_URL).rstrip("/")
        self.uploads_dir = (uploads_dir if uploads_dir is not None else UPLOADS_DIR).rstrip("/")
        self.site_url = (site_url if site_url is not None else SITE_URL).rstrip("/")

    # --- attributes ---------------------------------------------------------

    def get_meta(self, post_id: int, key: str) -> str:
        """Return the first value stored under ``key`` for ``post_id`` ("" when absent)."""
        stmt = (
            select(ContentAttribute.meta_value)
            .where(ContentAttribute.post_id == post_id, ContentAttribute.meta_key == key)
            .order_by(ContentAttribute.id.asc())
            .limit(1)
        )
        value = self.session.execute(stmt).scalar_one_or_none()
        return value or ""

    def set_meta(self, post_id: int, key: str, value: str) -> None:
        """Upsert a single string attribute and commit."""
        rows = (
            self.session.execute(
                select(ContentAttribute).where(
                    ContentAttribute.post_id == post_id, ContentAttribute.meta_key == key
                )
            )
            .scalars()
            .all()
        )
        if rows:
            for row in rows:
                row.meta_value = value
        else:
            self.session.add(ContentAttribute(post_id=post_id, meta_key=key, meta_value=value))
        self.session.commit()

    def get_label(self, asset_id: int) -> str:
        return self.get_meta(asset_id, LABEL_KEY)

    def set_label(self, asset_id: int, label: str) -> None:
        self.set_meta(asset_id, LABEL_KEY, label)
        _log.debug("wrote label for asset %d: %r", asset_id, label)

    # --- content items -----------------------------------------------------

    def get_item(self, post_id: int) -> Optional[ContentItem]:
        return self.session.get(ContentItem, post_id)

    def get_title(self, post_id: int) -> str:
        item = self.get_item(post_id)
        return (item.post_title or "") if item is not None else ""

    def require_asset(self, asset_id: int) -> ContentItem:
        item = self.get_item(asset_id)
        if (
            item is None
            or item.post_type != "attachment"
            or not (item.post_mime_type or "").startswith("image/")
        ):
            raise AssetNotFound(f"Asset {asset_id} is not an image attachment")
        return item

    def permalink(self, post_id: int) -> str:
        """Plain-style permalink (``?p=ID`` / ``?page_id=ID``) for a content item."""
        item = self.get_item(post_id)
        if item is None:
            return ""
        if item.post_type == "page":
            return f"{self.site_url}/?page_id={item.id}"
        if item.post_type == "post":
            return f"{self.site_url}/?p={item.id}"
        return f"{self.site_url}/?post_type={item.post_type}&p={item.id}"

    # --- asset files -------------------------------------------------------

    def attached_file(self, asset_id: int) -> str:
        """Filesystem path of the asset's source file ("" when unknown)."""
        rel = self.get_meta(asset_id, ATTACHED_FILE_KEY)
        if not rel:
            return ""
        if rel.startswith("/"):
            return rel
        return posixpath.join(self.uploads_dir, rel)

    def attachment_url(self, asset_id: int) -> str:
        """Public URL of the asset ("" when unknown)."""
        rel = self.get_meta(asset_id, ATTACHED_FILE_KEY)
        if not rel:
            return ""
        if rel.startswith("/"):
            # Absolute paths under the uploads dir map back onto the uploads URL
            prefix = self.uploads_dir + "/"
            if not rel.startswith(prefix):
                return ""
            rel = rel[len(prefix):]
        return f"{self.uploads_url}/{rel}"
