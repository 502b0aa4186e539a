from __future__ import annotations

# webbutiken/services/product_svc.py
import logging
import sqlite3
from typing import Any, Mapping, Optional

from ..db import Database
from ..errors import NotFoundError, ValidationError
from ..logs import LogContext
from ..repository import category_repo, product_repo, review_repo
from ..repository.product_query import ProductFilter

logger = logging.getLogger(__name__)


def list_products(db: Database, f: ProductFilter) -> dict:
    """分页列出商品；过滤后当前页为空时抛 NotFoundError。"""
    with db.connect() as conn:
        total, rows = product_repo.list_page(conn, f)
    if not rows:
        raise NotFoundError("No products found within the given criteria.")
    return {
        "page": f.page,
        "limit": f.limit,
        "totalResults": total,
        "products": [dict(r) for r in rows],
    }


def search_products(db: Database, name: Optional[str], category: Optional[str]) -> list[dict]:
    name = (name or "").strip() or None
    category = (category or "").strip() or None
    if not name and not category:
        raise ValidationError("Search term is required")
    with db.connect() as conn:
        rows = product_repo.search(conn, name, category)
    if not rows:
        raise NotFoundError("No products found")
    return [dict(r) for r in rows]


def get_product(db: Database, product_id: int) -> dict:
    with db.connect() as conn:
        row = product_repo.get_one(conn, product_id)
    if row is None:
        raise NotFoundError("Product not found")
    return dict(row)


def list_products_by_category(db: Database, category_id: int) -> list[dict]:
    with db.connect() as conn:
        if category_repo.get_one(conn, category_id) is None:
            raise NotFoundError("Category not found")
        rows = product_repo.list_by_category(conn, category_id)
    return [dict(r) for r in rows]


def product_stats(db: Database) -> list[dict]:
    with db.connect() as conn:
        return [dict(r) for r in product_repo.category_stats(conn)]


def create_product(db: Database, data: Mapping[str, Any], log: LogContext) -> dict:
    values = {
        "manufacturer_id": int(data["manufacturer_id"]),
        "name": data["name"],
        "description": data.get("description") or "",
        "price": float(data["price"]),
        "stock_quantity": int(data["stock_quantity"]),
    }
    if values["price"] <= 0:
        raise ValidationError("price must be greater than 0")
    if values["stock_quantity"] < 0:
        raise ValidationError("stock_quantity must be greater than or equal to 0")

    with db.connect() as conn:
        try:
            new_id = product_repo.insert_product(conn, **values)
        except sqlite3.IntegrityError as e:
            raise ValidationError(f"invalid product: {e}") from e
    log.set_entity("PRODUCT", new_id)
    log.set_after({"id": new_id, **values})
    logger.info("created product %s", new_id)
    return {"id": new_id, **values}


def update_product(db: Database, product_id: int, fields: Mapping[str, Any], log: LogContext) -> dict:
    """
    Partial update: only the supplied columns are written, others keep their values.
    Returns the row as re-read after the update.
    """
    if not fields:
        raise ValidationError("at least one field must be provided")

    with db.connect() as conn:
        before = product_repo.get_one(conn, product_id)
        if before is None:
            raise NotFoundError("Product not found.")
        try:
            product_repo.update_fields(conn, product_id, fields)
        except sqlite3.IntegrityError as e:
            raise ValidationError(f"invalid product: {e}") from e
        after = dict(product_repo.get_one(conn, product_id))

    log.set_entity("PRODUCT", product_id)
    log.set_before(dict(before))
    log.set_after(after)
    return after


def delete_product(db: Database, product_id: int, log: LogContext) -> dict:
    with db.connect() as conn:
        before = product_repo.get_one(conn, product_id)
        if before is None:
            raise NotFoundError("Product not found.")
        n_reviews = review_repo.count_for_product(conn, product_id)
        # junction/review rows go with it via ON DELETE CASCADE
        product_repo.delete(conn, product_id)

    log.set_entity("PRODUCT", product_id)
    log.set_before(dict(before))
    logger.info("deleted product %s (%s reviews cascaded)", product_id, n_reviews)
    return {"message": "Product and related reviews deleted successfully", "deleted_reviews": n_reviews}
