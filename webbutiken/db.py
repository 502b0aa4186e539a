from __future__ import annotations

# webbutiken/db.py
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from .config import get_settings, is_test_env, project_root

# DB 路径解析顺序：
# 1) 环境变量 WEBBUTIKEN_DB_PATH（最高优先级）
# 2) config.yaml 的 test_db_path（当检测到测试环境时）
# 3) config.yaml 的 db_path（生产默认）
# 4) 兜底：项目根 webbutiken.db
SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schema.sql")


def get_db_path() -> str:
    settings = get_settings()
    env_path = os.environ.get("WEBBUTIKEN_DB_PATH")
    cfg_test = settings.get("test_db_path")

    if env_path:
        path = env_path
    elif is_test_env() and cfg_test:
        path = cfg_test
    else:
        path = settings["db_path"]
    if not os.path.isabs(path):
        path = os.path.join(project_root(), path)

    # 确保目录存在
    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    获取 SQLite 连接。优先使用显式传入的 db_path，否则走 get_db_path()。
    打开 foreign_keys（级联删除依赖它），设置 row_factory 为 Row。
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


class Database:
    """Storage-access handle passed to services; one per application lifespan.

    Connections are opened per unit of work, so nothing request-scoped ever
    closes a handle another request is still using.
    """

    def __init__(self, path: str | None = None):
        self.path = path or get_db_path()

    def connect(self):
        return get_conn(self.path)

    def ensure_schema(self, schema_path: str = SCHEMA_PATH) -> None:
        with open(schema_path, "r", encoding="utf-8") as f:
            ddl = f.read()
        with self.connect() as conn:
            conn.executescript(ddl)

    def __repr__(self) -> str:
        return f"Database({self.path!r})"
