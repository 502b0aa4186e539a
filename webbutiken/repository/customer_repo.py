from __future__ import annotations

from sqlite3 import Connection
from typing import Any, Mapping

from .product_query import build_update

UPDATABLE_COLUMNS = ("name", "email", "phone", "address", "password")
# password is write-only; never selected back out
_PUBLIC = "customer_id, name, email, phone, address"


def list_all(conn: Connection):
    return conn.execute(f"SELECT {_PUBLIC} FROM customers ORDER BY customer_id").fetchall()


def get_one(conn: Connection, customer_id: int):
    return conn.execute(f"SELECT {_PUBLIC} FROM customers WHERE customer_id=?", (customer_id,)).fetchone()


def get_profile(conn: Connection, customer_id: int):
    """Contact details plus the date of the latest order (NULL without orders)."""
    sql = (
        "SELECT c.customer_id, c.name AS customer_name, c.email, c.phone, c.address, "
        "MAX(o.order_date) AS latest_order "
        "FROM customers c LEFT JOIN orders o ON o.customer_id = c.customer_id "
        "WHERE c.customer_id = ? GROUP BY c.customer_id"
    )
    return conn.execute(sql, (customer_id,)).fetchone()


def list_order_history(conn: Connection, customer_id: int):
    sql = (
        "SELECT o.order_id, p.name AS product_name, op.quantity, o.order_date "
        "FROM orders o "
        "LEFT JOIN orders_products op ON op.order_id = o.order_id "
        "LEFT JOIN products p ON p.product_id = op.product_id "
        "WHERE o.customer_id = ? "
        "ORDER BY o.order_date, o.order_id, op.product_id"
    )
    return conn.execute(sql, (customer_id,)).fetchall()


def insert_customer(conn: Connection, name: str, email=None, phone=None, address=None, password=None) -> int:
    cur = conn.execute(
        "INSERT INTO customers(name, email, phone, address, password) VALUES(?,?,?,?,?)",
        (name, email, phone, address, password),
    )
    return int(cur.lastrowid)


def update_fields(conn: Connection, customer_id: int, fields: Mapping[str, Any]) -> None:
    sql, params = build_update("customers", "customer_id", customer_id, fields, UPDATABLE_COLUMNS)
    conn.execute(sql, params)
