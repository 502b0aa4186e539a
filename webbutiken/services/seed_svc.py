# webbutiken/services/seed_svc.py
from __future__ import annotations

import logging
import os

import pandas as pd

from ..db import Database

logger = logging.getLogger(__name__)

# 按外键依赖顺序导入；每张表只接受列出的列
SEED_TABLES: list[tuple[str, tuple[str, ...]]] = [
    ("manufacturers", ("manufacturer_id", "name")),
    ("categories", ("category_id", "name")),
    ("products", ("product_id", "manufacturer_id", "name", "description", "price", "stock_quantity")),
    ("products_categories", ("product_id", "category_id")),
    ("customers", ("customer_id", "name", "email", "phone", "address", "password")),
    ("orders", ("order_id", "customer_id", "order_date")),
    ("orders_products", ("order_id", "product_id", "quantity", "unit_price")),
    ("reviews", ("review_id", "product_id", "customer_id", "rating", "comment")),
]


def _clean(v):
    if pd.isna(v):
        return None
    # numpy scalars -> python
    return v.item() if hasattr(v, "item") else v


def seed_load(db: Database, seed_dir: str) -> dict:
    """从 CSV 目录导入种子数据，文件名为 <table>.csv；缺失的文件跳过。

    CSV 必须含有表的必填列；多余的列会被忽略。已存在的主键行保持不变（INSERT OR IGNORE）。
    Returns {table: inserted_count}.
    """
    counts: dict[str, int] = {}
    with db.connect() as conn:
        for table, allowed in SEED_TABLES:
            path = os.path.join(seed_dir, f"{table}.csv")
            if not os.path.exists(path):
                continue
            # phone numbers keep leading zeros and digits as text
            df = pd.read_csv(path, dtype={"phone": str} if table == "customers" else None)
            cols = [c for c in allowed if c in df.columns]
            if not cols:
                logger.warning("seed %s: no known columns in %s", table, path)
                continue
            sql = "INSERT OR IGNORE INTO {} ({}) VALUES ({})".format(
                table, ",".join(cols), ",".join(["?"] * len(cols))
            )
            inserted = 0
            # object dtype keeps ints as ints when a row mixes int and float columns
            for values in df[cols].astype(object).itertuples(index=False, name=None):
                cur = conn.execute(sql, tuple(_clean(v) for v in values))
                inserted += cur.rowcount
            counts[table] = inserted
            logger.info("seed %s: %s rows", table, inserted)
    return counts
