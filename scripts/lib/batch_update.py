"""Apply operator-approved ALT labels.

A label is only written when the asset currently has none, the operator
chose "save", and the submitted text is still non-empty after markup
stripping and normalization. Each asset is
handled independently and committed on its own, so re-running a batch only
ever skips assets that were already labelled.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from db.store import Store
from scripts.lib.alt_text import normalize, strip_tags

_log = logging.getLogger(__name__)


class Mode(str, enum.Enum):
    SAVE = "save"
    SKIP = "skip"

    @classmethod
    def parse(cls, value: Any) -> "Mode":
        """Anything other than an explicit "save" is a skip."""
        if isinstance(value, Mode):
            return value
        if isinstance(value, str) and strip_tags(value) == cls.SAVE.value:
            return cls.SAVE
        return cls.SKIP


@dataclass(frozen=True)
class BatchEntry:
    asset_id: int
    mode: Mode
    label: str

    @classmethod
    def from_form(
        cls,
        ids: Iterable[Any],
        modes: Optional[Mapping[Any, Any]] = None,
        labels: Optional[Mapping[Any, Any]] = None,
    ) -> List["BatchEntry"]:
        """Build typed entries from form-shaped input (``ids[]``, ``mode[id]``, ``alt[id]``).

        Keys of ``modes``/``labels`` may be ints or their string form. Ids that
        are not positive integers become skip entries with ``asset_id`` 0, so
        they still show up in the batch counts; missing modes default to skip
        and missing labels to "".
        """
        modes = _int_keys(modes or {})
        labels = _int_keys(labels or {})
        entries: List[BatchEntry] = []
        for raw in ids:
            asset_id = _as_int(raw)
            if asset_id is None or asset_id <= 0:
                entries.append(cls(asset_id=0, mode=Mode.SKIP, label=""))
                continue
            label = labels.get(asset_id)
            entries.append(
                cls(
                    asset_id=asset_id,
                    mode=Mode.parse(modes.get(asset_id)),
                    label=label if isinstance(label, str) else "",
                )
            )
        return entries


@dataclass(frozen=True)
class ApplyResult:
    updated: bool
    skipped: bool


UPDATED = ApplyResult(updated=True, skipped=False)
SKIPPED = ApplyResult(updated=False, skipped=True)


@dataclass(frozen=True)
class BatchResult:
    updated: int = 0
    skipped: int = 0


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _int_keys(mapping: Mapping[Any, Any]) -> dict:
    out = {}
    for key, value in mapping.items():
        k = _as_int(key)
        if k is not None:
            out[k] = value
    return out


def apply(store: Store, asset_id: int, mode: Any, label: str) -> ApplyResult:
    if asset_id <= 0:
        return SKIPPED
    # Re-read at commit time; the listing snapshot may be stale
    current = store.get_label(asset_id)
    if current.strip():
        return SKIPPED
    if Mode.parse(mode) is not Mode.SAVE:
        return SKIPPED
    cleaned = normalize(strip_tags(label or ""))
    if not cleaned:
        return SKIPPED
    store.set_label(asset_id, cleaned)
    return UPDATED


def apply_batch(store: Store, entries: Iterable[BatchEntry]) -> BatchResult:
    updated = 0
    skipped = 0
    for entry in entries:
        result = apply(store, entry.asset_id, entry.mode, entry.label)
        if result.updated:
            updated += 1
        else:
            skipped += 1
    _log.info("ALT batch done: updated=%d skipped=%d", updated, skipped)
    return BatchResult(updated=updated, skipped=skipped)
