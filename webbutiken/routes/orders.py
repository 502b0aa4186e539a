from __future__ import annotations

from fastapi import APIRouter, Depends

from ..db import Database
from ..deps import get_db
from ..services.order_svc import list_order_lines, list_reviews, review_stats

router = APIRouter()


@router.get("/orders", tags=["orders"])
def api_order_list(db: Database = Depends(get_db)):
    return list_order_lines(db)


@router.get("/reviews", tags=["reviews"])
def api_review_list(db: Database = Depends(get_db)):
    return list_reviews(db)


@router.get("/reviews/stats", tags=["reviews"])
def api_review_stats(db: Database = Depends(get_db)):
    return review_stats(db)
