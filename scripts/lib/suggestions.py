from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from db.store import Store
from scripts.lib.alt_text import filename_label, normalize
from scripts.lib.usage_locator import locate


@dataclass(frozen=True)
class Suggestion:
    page_title: str
    file_label: str
    prefill: str
    usage_id: Optional[int] = None
    usage_url: str = ""


def suggest(store: Store, asset_id: int) -> Suggestion:
    """Derive label candidates for an asset from current store state.

    Prefill precedence: first-usage page title, then filename, then "".
    Nothing is cached; every listing render re-derives suggestions.
    """
    usage_id = locate(store, asset_id)
    page_title = normalize(store.get_title(usage_id)) if usage_id else ""
    file_label = filename_label(store.attached_file(asset_id))
    prefill = page_title or file_label or ""
    return Suggestion(
        page_title=page_title,
        file_label=file_label,
        prefill=prefill,
        usage_id=usage_id,
        usage_url=store.permalink(usage_id) if usage_id else "",
    )
