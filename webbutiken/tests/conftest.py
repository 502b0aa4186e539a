import os
import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

TABLES = [
    "reviews",
    "orders_products",
    "orders",
    "products_categories",
    "products",
    "categories",
    "manufacturers",
    "customers",
    "operation_log",
]


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "webbutiken_test.db"
    # Point the app to this temp DB
    os.environ["WEBBUTIKEN_DB_PATH"] = str(path)
    return str(path)


@pytest.fixture(scope="session")
def db(tmp_db_path):
    from webbutiken.db import Database
    from webbutiken.logs import ensure_log_schema
    handle = Database(tmp_db_path)
    handle.ensure_schema()
    ensure_log_schema(handle)
    return handle


@pytest.fixture()
def client(db):
    from fastapi.testclient import TestClient
    from webbutiken.api import create_app
    with TestClient(create_app(db)) as c:
        yield c


@pytest.fixture(autouse=True)
def _clean_db(db, tmp_db_path):
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert db.path == tmp_db_path, "Refusing to clean non-temp DB"
    with db.connect() as conn:
        for t in TABLES:
            conn.execute(f"DELETE FROM {t}")
        conn.execute("DELETE FROM sqlite_sequence")
    yield


@pytest.fixture()
def seeded(db):
    """
    Small fixed catalog:
      Tools:  1 Acme Hammer 100, 2 Acme Saw 250, 5 Acme Drill 400
      Garden: 3 Globex Hose 50, 4 Globex Rake 75
      Empty:  (no products)
    Anna (1) has two orders, Bob (2) has none.
    """
    from webbutiken.repository import category_repo, customer_repo, order_repo, product_repo, review_repo

    with db.connect() as conn:
        acme = category_repo.insert_manufacturer(conn, "Acme")
        globex = category_repo.insert_manufacturer(conn, "Globex")
        tools = category_repo.insert_category(conn, "Tools")
        garden = category_repo.insert_category(conn, "Garden")
        category_repo.insert_category(conn, "Empty")

        products = [
            (acme, "Acme Hammer", "steel head", 100.0, 5, tools),
            (acme, "Acme Saw", "", 250.0, 2, tools),
            (globex, "Globex Hose", "20 m", 50.0, 10, garden),
            (globex, "Globex Rake", "", 75.0, 0, garden),
            (acme, "Acme Drill", "cordless", 400.0, 3, tools),
        ]
        for m, name, desc, price, stock, cat in products:
            pid = product_repo.insert_product(conn, m, name, desc, price, stock)
            product_repo.link_category(conn, pid, cat)

        anna = customer_repo.insert_customer(conn, "Anna", "anna@example.com", "46701234567", "Storgatan 1", "secret")
        bob = customer_repo.insert_customer(conn, "Bob", "bob@example.com", "46700000000", "Lillgatan 2", "hunter2")

        o1 = order_repo.insert_order(conn, anna, "2024-01-10")
        order_repo.insert_line(conn, o1, 1, 2, 100.0)
        order_repo.insert_line(conn, o1, 3, 1, 50.0)
        o2 = order_repo.insert_order(conn, anna, "2024-02-01")
        order_repo.insert_line(conn, o2, 2, 1, 250.0)

        review_repo.insert_review(conn, 1, anna, 5, "great")
        review_repo.insert_review(conn, 1, bob, 4, "solid")
        review_repo.insert_review(conn, 3, anna, 3, "leaks a bit")
    return db
