from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Generator

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from sqlalchemy.orm import Session

from db.session import get_session
from db.store import AssetNotFound, Store
from scripts.lib.batch_update import BatchEntry, apply_batch
from scripts.lib.listing import AssetRow, count_missing, list_rows
from scripts.lib.suggestions import Suggestion, suggest

PER_PAGE = int(os.environ.get("ALTMGR_PER_PAGE", "100"))


def get_db() -> Generator[Session, None, None]:
    # Wrap the existing contextmanager for FastAPI dependency injection
    with get_session() as s:
        yield s


def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)


class SuggestionOut(BaseModel):
    page_title: str
    file_label: str
    prefill: str
    usage_id: Optional[int] = None
    usage_url: str = ""


class AssetRowOut(BaseModel):
    id: int
    file: str
    url: str
    suggestion: SuggestionOut


class MissingListing(BaseModel):
    total: int
    shown: int
    items: List[AssetRowOut]


class SaveRequest(BaseModel):
    # Mirrors the review form: ids[], mode[id], alt[id]
    ids: List[Any] = []
    mode: Dict[str, Any] = {}
    alt: Dict[str, Any] = {}


class SaveResult(BaseModel):
    updated: int
    skipped: int
    message: str
    listing: MissingListing


app = FastAPI(title="ALT Manager API", version="0.1.0")

# CORS for local dev (adjust later as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


def _to_suggestion(s: Suggestion) -> SuggestionOut:
    return SuggestionOut(
        page_title=s.page_title,
        file_label=s.file_label,
        prefill=s.prefill,
        usage_id=s.usage_id,
        usage_url=s.usage_url,
    )


def _to_row(row: AssetRow) -> AssetRowOut:
    return AssetRowOut(id=row.asset_id, file=row.file, url=row.url, suggestion=_to_suggestion(row.suggestion))


def _listing(store: Store, limit: int) -> MissingListing:
    total = count_missing(store)
    rows = list_rows(store, limit)
    return MissingListing(total=total, shown=len(rows), items=[_to_row(r) for r in rows])


@app.get("/assets/missing", response_model=MissingListing)
def list_missing_alt(
    limit: int = Query(PER_PAGE, ge=1, le=500),
    store: Store = Depends(get_store),
):
    return _listing(store, limit)


@app.get("/assets/{asset_id}/suggestion", response_model=SuggestionOut)
def get_suggestion(asset_id: int, store: Store = Depends(get_store)):
    try:
        store.require_asset(asset_id)
    except AssetNotFound:
        raise HTTPException(status_code=404, detail="Asset not found")
    return _to_suggestion(suggest(store, asset_id))


@app.post("/assets/missing", response_model=SaveResult)
def save_batch(
    payload: SaveRequest,
    limit: int = Query(PER_PAGE, ge=1, le=500),
    store: Store = Depends(get_store),
):
    entries = BatchEntry.from_form(payload.ids, payload.mode, payload.alt)
    result = apply_batch(store, entries)
    return SaveResult(
        updated=result.updated,
        skipped=result.skipped,
        message=f"Saved: updated {result.updated}, skipped {result.skipped}. List refreshed.",
        listing=_listing(store, limit),
    )
