#!/usr/bin/env python3
"""Load a YAML CMS snapshot (posts + image attachments) into a development DB.

Creates the posts/postmeta tables if missing, then inserts the rows. Meant for
local development and tests; never point it at a live site.

Usage:
  python scripts/load_sample.py --file samples/sample_site.yaml [--db-url sqlite:///./data/alt_manager.db]
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict

# Ensure project root on sys.path for db imports regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from db.session import get_session
from db import session as db_session
from db.models import (
    ATTACHED_FILE_KEY,
    FEATURED_KEY,
    LABEL_KEY,
    Base,
    ContentAttribute,
    ContentItem,
)

from ruamel.yaml import YAML
from sqlalchemy.engine import make_url


def load_yaml(path: Path) -> Dict[str, Any]:
    yaml = YAML(typ="safe")
    with path.open("r", encoding="utf8") as f:
        return yaml.load(f) or {}


def _ensure_sqlite_dir(db_url: str) -> None:
    # Create parent directory for SQLite files if needed
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        db_path = Path(url.database)
        if not db_path.is_absolute():
            db_path = (PROJECT_ROOT / db_path).resolve()
        db_path.parent.mkdir(parents=True, exist_ok=True)


def load_snapshot(data: Dict[str, Any]) -> dict:
    posts = 0
    attachments = 0
    attrs = 0
    with get_session() as session:
        Base.metadata.create_all(bind=session.get_bind())
        for a in data.get("attachments") or []:
            aid = int(a["id"])
            session.add(ContentItem(
                id=aid,
                post_type="attachment",
                post_status="inherit",
                post_title=str(a.get("title") or ""),
                post_content="",
                post_mime_type=str(a.get("mime") or "image/jpeg"),
                post_name=str(a.get("name") or ""),
            ))
            attachments += 1
            if a.get("file"):
                session.add(ContentAttribute(post_id=aid, meta_key=ATTACHED_FILE_KEY, meta_value=str(a["file"])))
                attrs += 1
            # alt missing/null means "no label row at all"; "" is an empty label row
            if a.get("alt") is not None:
                session.add(ContentAttribute(post_id=aid, meta_key=LABEL_KEY, meta_value=str(a["alt"])))
                attrs += 1
        for p in data.get("posts") or []:
            pid = int(p["id"])
            session.add(ContentItem(
                id=pid,
                post_type=str(p.get("type") or "post"),
                post_status=str(p.get("status") or "publish"),
                post_title=str(p.get("title") or ""),
                post_content=str(p.get("content") or ""),
                post_mime_type="",
                post_name=str(p.get("name") or ""),
            ))
            posts += 1
            if p.get("featured"):
                session.add(ContentAttribute(post_id=pid, meta_key=FEATURED_KEY, meta_value=str(p["featured"])))
                attrs += 1
        session.commit()
    return {"posts": posts, "attachments": attachments, "attributes": attrs}


def parse_args(argv):
    ap = argparse.ArgumentParser(description="Load a YAML CMS snapshot into a development database")
    ap.add_argument("--file", required=True, help="YAML snapshot (see samples/sample_site.yaml)")
    ap.add_argument("--db-url", dest="db_url", default=None,
                    help="Target database URL (overrides env var ALTMGR_DB_URL)")
    return ap.parse_args(argv)


def main(argv):
    args = parse_args(argv)
    path = Path(args.file)
    if not path.exists():
        print(f"Snapshot not found: {path}")
        return 2
    if args.db_url:
        # get_session() follows ALTMGR_DB_URL
        os.environ["ALTMGR_DB_URL"] = args.db_url
    db_url = args.db_url or db_session.DB_URL
    print(f"Target DB URL: {db_url}")
    _ensure_sqlite_dir(db_url)
    counts = load_snapshot(load_yaml(path))
    print(f"Loaded {counts['posts']} posts, {counts['attachments']} attachments, {counts['attributes']} attributes.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
