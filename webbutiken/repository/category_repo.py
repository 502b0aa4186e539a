from __future__ import annotations

from sqlite3 import Connection


def get_one(conn: Connection, category_id: int):
    return conn.execute(
        "SELECT category_id, name FROM categories WHERE category_id=?", (category_id,)
    ).fetchone()


def insert_category(conn: Connection, name: str) -> int:
    cur = conn.execute("INSERT INTO categories(name) VALUES(?)", (name,))
    return int(cur.lastrowid)


def insert_manufacturer(conn: Connection, name: str) -> int:
    cur = conn.execute("INSERT INTO manufacturers(name) VALUES(?)", (name,))
    return int(cur.lastrowid)
