from __future__ import annotations

from sqlite3 import Connection


def list_lines(conn: Connection):
    sql = (
        "SELECT op.order_id, p.name AS product_name, op.quantity, op.unit_price AS price "
        "FROM orders_products op "
        "JOIN products p ON p.product_id = op.product_id "
        "ORDER BY op.order_id, op.product_id"
    )
    return conn.execute(sql).fetchall()


def insert_order(conn: Connection, customer_id: int, order_date: str) -> int:
    cur = conn.execute(
        "INSERT INTO orders(customer_id, order_date) VALUES(?, ?)", (customer_id, order_date)
    )
    return int(cur.lastrowid)


def insert_line(conn: Connection, order_id: int, product_id: int, quantity: int, unit_price: float) -> None:
    conn.execute(
        "INSERT INTO orders_products(order_id, product_id, quantity, unit_price) VALUES(?,?,?,?)",
        (order_id, product_id, quantity, unit_price),
    )
