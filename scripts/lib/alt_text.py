"""Text cleanup helpers for ALT labels.

``normalize`` turns raw filenames and page titles into candidate labels;
``strip_tags`` removes markup from operator-submitted text before it is
stored.
"""
from __future__ import annotations

import posixpath
import re

_SEPARATORS_RE = re.compile(r"[-_]")
_WS_RE = re.compile(r"\s+")
_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")


def normalize(text: str) -> str:
    """Replace - and _ with spaces, collapse whitespace, trim."""
    if not text:
        return ""
    text = _SEPARATORS_RE.sub(" ", text)
    text = _WS_RE.sub(" ", text)
    return text.strip()


def strip_tags(text: str) -> str:
    if not text:
        return ""
    text = _SCRIPT_STYLE_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    return text.strip()


def filename_label(path: str) -> str:
    """Normalized base name of ``path`` without its extension."""
    if not path:
        return ""
    base = posixpath.basename(path.replace("\\", "/"))
    # "photo.final.jpg" -> "photo.final"; a leading dot is part of the name
    stem, _ext = posixpath.splitext(base)
    return normalize(stem)
