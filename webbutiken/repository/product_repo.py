from __future__ import annotations

from sqlite3 import Connection
from typing import Any, Mapping, Optional

from .product_query import ProductFilter, build_list_query, build_search_query, build_update

UPDATABLE_COLUMNS = ("manufacturer_id", "name", "description", "price", "stock_quantity")


def get_one(conn: Connection, product_id: int):
    return conn.execute("SELECT * FROM products WHERE product_id=?", (product_id,)).fetchone()


def exists(conn: Connection, product_id: int) -> bool:
    row = conn.execute("SELECT 1 FROM products WHERE product_id=?", (product_id,)).fetchone()
    return row is not None


def list_page(conn: Connection, f: ProductFilter):
    count_sql, page_sql, params = build_list_query(f)
    total = int(conn.execute(count_sql, params).fetchone()["total"])
    rows = conn.execute(page_sql, {**params, "limit": f.limit, "offset": f.offset}).fetchall()
    return total, rows


def search(conn: Connection, name: Optional[str], category: Optional[str]):
    sql, params = build_search_query(name, category)
    return conn.execute(sql, params).fetchall()


def list_by_category(conn: Connection, category_id: int):
    sql = (
        "SELECT c.name AS category_name, p.name AS product_name "
        "FROM products p "
        "JOIN products_categories pc ON pc.product_id = p.product_id "
        "JOIN categories c ON c.category_id = pc.category_id "
        "WHERE c.category_id = ? ORDER BY p.product_id"
    )
    return conn.execute(sql, (category_id,)).fetchall()


def category_stats(conn: Connection):
    sql = (
        "SELECT c.name AS category_name, "
        "COUNT(p.product_id) AS total_products, "
        "ROUND(AVG(p.price), 2) AS avg_price "
        "FROM categories c "
        "LEFT JOIN products_categories pc ON pc.category_id = c.category_id "
        "LEFT JOIN products p ON p.product_id = pc.product_id "
        "GROUP BY c.category_id ORDER BY c.category_id"
    )
    return conn.execute(sql).fetchall()


def insert_product(
    conn: Connection,
    manufacturer_id: int,
    name: str,
    description: str,
    price: float,
    stock_quantity: int,
) -> int:
    cur = conn.execute(
        "INSERT INTO products(manufacturer_id, name, description, price, stock_quantity) VALUES(?,?,?,?,?)",
        (manufacturer_id, name, description, price, stock_quantity),
    )
    return int(cur.lastrowid)


def update_fields(conn: Connection, product_id: int, fields: Mapping[str, Any]) -> None:
    sql, params = build_update("products", "product_id", product_id, fields, UPDATABLE_COLUMNS)
    conn.execute(sql, params)


def delete(conn: Connection, product_id: int) -> None:
    conn.execute("DELETE FROM products WHERE product_id=?", (product_id,))


def link_category(conn: Connection, product_id: int, category_id: int) -> None:
    conn.execute(
        "INSERT OR IGNORE INTO products_categories(product_id, category_id) VALUES(?, ?)",
        (product_id, category_id),
    )
