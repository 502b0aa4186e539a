from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path
from pydantic import EmailStr, Field

from ..db import Database
from ..deps import get_db
from ..logs import LogContext
from ..services.customer_svc import (
    get_customer,
    get_order_history,
    list_customers,
    update_customer,
)
from .common import MAX_INT, PartialUpdate

router = APIRouter(prefix="/customers", tags=["customers"])


class CustomerUpdate(PartialUpdate):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[int] = Field(None, gt=0, le=MAX_INT)
    address: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)


@router.get("")
def api_customer_list(db: Database = Depends(get_db)):
    return list_customers(db)


@router.get("/{customer_id}")
def api_customer_get(customer_id: int = Path(..., ge=1, le=MAX_INT), db: Database = Depends(get_db)):
    return get_customer(db, customer_id)


@router.get("/{customer_id}/orders")
def api_customer_orders(customer_id: int = Path(..., ge=1, le=MAX_INT), db: Database = Depends(get_db)):
    return get_order_history(db, customer_id)


@router.put("/{customer_id}")
def api_customer_update(
    body: CustomerUpdate,
    customer_id: int = Path(..., ge=1, le=MAX_INT),
    db: Database = Depends(get_db),
):
    changes = body.changes()
    log = LogContext("UPDATE_CUSTOMER", db)
    log.set_payload({k: ("***masked***" if k == "password" else v) for k, v in changes.items()})
    try:
        res = update_customer(db, customer_id, changes, log)
    except Exception as e:
        log.write("ERROR", str(e))
        raise
    log.write("OK")
    return res
