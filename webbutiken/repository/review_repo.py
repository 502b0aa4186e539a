from __future__ import annotations

from sqlite3 import Connection
from typing import Optional


def list_all(conn: Connection):
    sql = (
        "SELECT p.name AS product_name, c.name AS customer_name, r.rating, r.comment "
        "FROM reviews r "
        "JOIN products p ON p.product_id = r.product_id "
        "JOIN customers c ON c.customer_id = r.customer_id "
        "ORDER BY r.review_id"
    )
    return conn.execute(sql).fetchall()


def rating_stats(conn: Connection):
    sql = (
        "SELECT p.name AS product_name, ROUND(AVG(r.rating), 1) AS avg_rating "
        "FROM products p JOIN reviews r ON r.product_id = p.product_id "
        "GROUP BY p.product_id ORDER BY p.product_id"
    )
    return conn.execute(sql).fetchall()


def count_for_product(conn: Connection, product_id: int) -> int:
    row = conn.execute("SELECT COUNT(1) AS c FROM reviews WHERE product_id=?", (product_id,)).fetchone()
    return int(row["c"])


def insert_review(conn: Connection, product_id: int, customer_id: int, rating: float, comment: Optional[str] = None) -> int:
    cur = conn.execute(
        "INSERT INTO reviews(product_id, customer_id, rating, comment) VALUES(?,?,?,?)",
        (product_id, customer_id, rating, comment),
    )
    return int(cur.lastrowid)
