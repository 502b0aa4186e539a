from __future__ import annotations

from ..db import Database
from ..repository import order_repo, review_repo


def list_order_lines(db: Database) -> list[dict]:
    with db.connect() as conn:
        return [dict(r) for r in order_repo.list_lines(conn)]


def list_reviews(db: Database) -> list[dict]:
    with db.connect() as conn:
        return [dict(r) for r in review_repo.list_all(conn)]


def review_stats(db: Database) -> list[dict]:
    with db.connect() as conn:
        return [dict(r) for r in review_repo.rating_stats(conn)]
