from __future__ import annotations

from typing import Any, Mapping

from ..db import Database
from ..errors import NotFoundError, ValidationError
from ..logs import LogContext
from ..repository import customer_repo


def list_customers(db: Database) -> list[dict]:
    with db.connect() as conn:
        return [dict(r) for r in customer_repo.list_all(conn)]


def get_customer(db: Database, customer_id: int) -> dict:
    with db.connect() as conn:
        row = customer_repo.get_profile(conn, customer_id)
    if row is None:
        raise NotFoundError("Customer not found")
    return dict(row)


def get_order_history(db: Database, customer_id: int) -> dict:
    with db.connect() as conn:
        customer = customer_repo.get_one(conn, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        rows = customer_repo.list_order_history(conn, customer_id)
    return {
        "customer_id": customer["customer_id"],
        "customer_name": customer["name"],
        "orders_history": [dict(r) for r in rows],
    }


def update_customer(db: Database, customer_id: int, fields: Mapping[str, Any], log: LogContext) -> dict:
    if not fields:
        raise ValidationError("at least one field must be provided")

    with db.connect() as conn:
        before = customer_repo.get_one(conn, customer_id)
        if before is None:
            raise NotFoundError("Customer not found.")
        customer_repo.update_fields(conn, customer_id, fields)
        after = dict(customer_repo.get_one(conn, customer_id))

    log.set_entity("CUSTOMER", customer_id)
    log.set_before(dict(before))
    log.set_after(after)
    return after
