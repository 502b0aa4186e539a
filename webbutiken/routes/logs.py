from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..db import Database
from ..deps import get_db
from ..logs import search_logs
from .common import MAX_INT

router = APIRouter()


@router.get("/logs/search")
def api_logs_search(
    page: int = Query(1, ge=1, le=MAX_INT // 200),
    size: int = Query(20, ge=1, le=200),
    action: str | None = None,
    query: str | None = None,
    ts_from: str | None = None,
    ts_to: str | None = None,
    db: Database = Depends(get_db),
):
    total, items = search_logs(db, query, action, ts_from, ts_to, page, size)
    return {"total": total, "items": items}
