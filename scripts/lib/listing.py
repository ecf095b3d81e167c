"""Queries for image attachments that still have no ALT label."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from sqlalchemy import func, select

from db.models import LABEL_KEY, ContentAttribute, ContentItem
from db.store import Store
from scripts.lib.suggestions import Suggestion, suggest


def _first_label():
    # Same row Store.get_label reads: the first label attribute by meta_id
    return (
        select(ContentAttribute.meta_value)
        .where(ContentAttribute.post_id == ContentItem.id, ContentAttribute.meta_key == LABEL_KEY)
        .order_by(ContentAttribute.id.asc())
        .limit(1)
        .correlate(ContentItem)
        .scalar_subquery()
    )


def _missing_filter(stmt):
    return (
        stmt.where(ContentItem.post_type == "attachment")
        .where(ContentItem.post_mime_type.like("image/%"))
        .where(func.coalesce(_first_label(), "") == "")
    )


def count_missing(store: Store) -> int:
    stmt = _missing_filter(select(func.count(ContentItem.id)).select_from(ContentItem))
    return int(store.session.execute(stmt).scalar() or 0)


def list_missing(store: Store, limit: int) -> List[int]:
    """Ids of unlabelled image attachments, ascending, at most ``limit``."""
    if limit <= 0:
        return []
    stmt = _missing_filter(select(ContentItem.id).select_from(ContentItem)).order_by(ContentItem.id.asc()).limit(limit)
    return [int(i) for i in store.session.execute(stmt).scalars().all()]


@dataclass(frozen=True)
class AssetRow:
    asset_id: int
    file: str
    url: str
    suggestion: Suggestion


def list_rows(store: Store, limit: int) -> List[AssetRow]:
    return [
        AssetRow(
            asset_id=asset_id,
            file=store.attached_file(asset_id),
            url=store.attachment_url(asset_id),
            suggestion=suggest(store, asset_id),
        )
        for asset_id in list_missing(store, limit)
    ]
