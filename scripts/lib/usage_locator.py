"""Find the first content record that uses an image asset.

Strategies run in priority order and the first hit wins:

1. featured image: a record whose ``_thumbnail_id`` attribute is the asset id
2. embed marker: a record body containing ``wp-image-{id}``
3. URL path: a record body containing the path of the asset's public URL

Structural references are tried before the raw substring match, which can
false-positive on shared path prefixes. Every strategy only considers
"real" content (no revisions, attachments or menu entries) in a live or
editable status, and picks the lowest id.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple
from urllib.parse import urlsplit

from sqlalchemy import Integer, cast, select

from db.models import FEATURED_KEY, ContentAttribute, ContentItem
from db.store import Store

_log = logging.getLogger(__name__)

EXCLUDED_TYPES = ("revision", "attachment", "nav_menu_item")
USABLE_STATUSES = ("publish", "private", "draft", "pending", "future")
EMBED_PREFIX = "wp-image-"

Strategy = Callable[[Store, int], Optional[int]]


def _content_query():
    return (
        select(ContentItem.id)
        .where(ContentItem.post_type.not_in(EXCLUDED_TYPES))
        .where(ContentItem.post_status.in_(USABLE_STATUSES))
        .order_by(ContentItem.id.asc())
        .limit(1)
    )


def _first_body_match(store: Store, needle: str) -> Optional[int]:
    stmt = _content_query().where(ContentItem.post_content.contains(needle, autoescape=True))
    return store.session.execute(stmt).scalar_one_or_none()


def by_featured_reference(store: Store, asset_id: int) -> Optional[int]:
    stmt = _content_query().join(
        ContentAttribute,
        (ContentAttribute.post_id == ContentItem.id)
        & (ContentAttribute.meta_key == FEATURED_KEY)
        # Numeric comparison, so "0100" or "100 " still point at asset 100
        & (cast(ContentAttribute.meta_value, Integer) == asset_id),
    )
    return store.session.execute(stmt).scalar_one_or_none()


def by_embed_marker(store: Store, asset_id: int) -> Optional[int]:
    return _first_body_match(store, f"{EMBED_PREFIX}{asset_id}")


def by_url_path(store: Store, asset_id: int) -> Optional[int]:
    url = store.attachment_url(asset_id)
    if not url:
        return None
    path = urlsplit(url).path
    if not path:
        return None
    return _first_body_match(store, path)


STRATEGIES: Tuple[Strategy, ...] = (by_featured_reference, by_embed_marker, by_url_path)


def locate(store: Store, asset_id: int, strategies: Tuple[Strategy, ...] = STRATEGIES) -> Optional[int]:
    """Return the id of the first content record using ``asset_id``, or None."""
    for strategy in strategies:
        post_id = strategy(store, asset_id)
        if post_id:
            _log.debug("asset %d used by %d (%s)", asset_id, post_id, strategy.__name__)
            return int(post_id)
    return None
