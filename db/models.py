from __future__ import annotations

import os

from sqlalchemy import (
    Column,
    BigInteger,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base


Base = declarative_base()

# Table names follow the CMS install (e.g. "wp_" for a default WordPress site)
TABLE_PREFIX = os.environ.get("ALTMGR_TABLE_PREFIX", "wp_")

# Attribute keys stored in the meta table
LABEL_KEY = "_wp_attachment_image_alt"
FEATURED_KEY = "_thumbnail_id"
ATTACHED_FILE_KEY = "_wp_attached_file"


class ContentItem(Base):
    """A row of the CMS posts table: pages, posts, attachments, menu items..."""

    __tablename__ = f"{TABLE_PREFIX}posts"

    id = Column("ID", Integer, primary_key=True)
    post_type = Column(String(20), nullable=False, default="post", index=True)
    post_status = Column(String(20), nullable=False, default="publish", index=True)
    post_title = Column(Text, nullable=False, default="")
    post_content = Column(Text, nullable=False, default="")
    post_mime_type = Column(String(100), nullable=False, default="")
    # Slug; only used to build readable permalinks
    post_name = Column(String(200), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<ContentItem id={self.id} type={self.post_type!r} status={self.post_status!r}>"


class ContentAttribute(Base):
    """Key/value attribute attached to a content item (the CMS postmeta table)."""

    __tablename__ = f"{TABLE_PREFIX}postmeta"

    id = Column("meta_id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    post_id = Column(Integer, nullable=False, default=0, index=True)
    meta_key = Column(String(255), nullable=True, index=True)
    meta_value = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ContentAttribute post_id={self.post_id} key={self.meta_key!r}>"
