from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, ConfigDict, Field

from ..db import Database
from ..deps import get_db
from ..logs import LogContext
from ..repository.product_query import ProductFilter, ProductSort
from ..services.product_svc import (
    create_product,
    delete_product,
    get_product,
    list_products,
    list_products_by_category,
    product_stats,
    search_products,
    update_product,
)
from .common import MAX_INT, MAX_LIMIT, MAX_PAGE, PartialUpdate

router = APIRouter(prefix="/products", tags=["products"])


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    manufacturer_id: int = Field(..., ge=1, le=MAX_INT)
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., gt=0, allow_inf_nan=False)
    stock_quantity: int = Field(..., ge=0, le=MAX_INT)


class ProductUpdate(PartialUpdate):
    manufacturer_id: Optional[int] = Field(None, ge=1, le=MAX_INT)
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    stock_quantity: Optional[int] = Field(None, ge=0, le=MAX_INT)


@router.get("")
def api_product_list(
    min_price: Optional[float] = Query(None, alias="minPrice", allow_inf_nan=False),
    max_price: Optional[float] = Query(None, alias="maxPrice", allow_inf_nan=False),
    sort: Optional[str] = None,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    # capped so (page - 1) * limit always fits an SQLite integer
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    db: Database = Depends(get_db),
):
    f = ProductFilter(
        min_price=min_price,
        max_price=max_price,
        sort=ProductSort.parse(sort),
        page=page,
        limit=limit,
    )
    return list_products(db, f)


@router.get("/search")
def api_product_search(
    name: Optional[str] = None,
    category: Optional[str] = None,
    db: Database = Depends(get_db),
):
    return search_products(db, name, category)


@router.get("/stats")
def api_product_stats(db: Database = Depends(get_db)):
    return product_stats(db)


@router.get("/category/{category_id}")
def api_product_by_category(category_id: int = Path(..., ge=1, le=MAX_INT), db: Database = Depends(get_db)):
    return list_products_by_category(db, category_id)


@router.get("/{product_id}")
def api_product_get(product_id: int = Path(..., ge=1, le=MAX_INT), db: Database = Depends(get_db)):
    return get_product(db, product_id)


@router.post("", status_code=201)
def api_product_create(body: ProductCreate, db: Database = Depends(get_db)):
    log = LogContext("CREATE_PRODUCT", db)
    log.set_payload(body.model_dump())
    try:
        res = create_product(db, body.model_dump(), log)
    except Exception as e:
        log.write("ERROR", str(e))
        raise
    log.write("OK")
    return res


@router.put("/{product_id}")
def api_product_update(body: ProductUpdate, product_id: int = Path(..., ge=1, le=MAX_INT), db: Database = Depends(get_db)):
    log = LogContext("UPDATE_PRODUCT", db)
    log.set_payload(body.changes())
    try:
        res = update_product(db, product_id, body.changes(), log)
    except Exception as e:
        log.write("ERROR", str(e))
        raise
    log.write("OK")
    return res


@router.delete("/{product_id}")
def api_product_delete(product_id: int = Path(..., ge=1, le=MAX_INT), db: Database = Depends(get_db)):
    log = LogContext("DELETE_PRODUCT", db)
    log.set_payload({"product_id": product_id})
    try:
        res = delete_product(db, product_id, log)
    except Exception as e:
        log.write("ERROR", str(e))
        raise
    log.write("OK")
    return res
