from __future__ import annotations

# webbutiken/config.py
import os
from typing import Any

import yaml

# 配置解析顺序：环境变量 > config.yaml > 默认值
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_CONFIG_PATH = os.path.join(_PROJECT_ROOT, "config.yaml")

DEFAULTS: dict[str, Any] = {
    "db_path": os.path.join(_PROJECT_ROOT, "webbutiken.db"),
    "test_db_path": None,
    "host": "127.0.0.1",
    "port": 3000,
    "log_level": "INFO",
}

_ENV_KEYS = {
    "db_path": "WEBBUTIKEN_DB_PATH",
    "port": "WEBBUTIKEN_PORT",
    "log_level": "WEBBUTIKEN_LOG_LEVEL",
}


def project_root() -> str:
    return _PROJECT_ROOT


def read_config_yaml(path: str | None = None) -> dict:
    cfg_path = path or _CONFIG_PATH
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in DEFAULTS:
        v = cfg.get(k)
        if isinstance(v, str):
            v = v.strip()
            if not v:
                continue
        if v is not None:
            out[k] = v
    return out


def is_test_env() -> bool:
    return (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)


def get_settings(path: str | None = None) -> dict:
    """Merged runtime settings; env vars win over config.yaml, which wins over DEFAULTS."""
    out = dict(DEFAULTS)
    out.update(read_config_yaml(path))
    for k, env in _ENV_KEYS.items():
        v = os.environ.get(env)
        if v:
            out[k] = v
    try:
        out["port"] = int(out["port"])
    except (TypeError, ValueError):
        out["port"] = DEFAULTS["port"]
    out["log_level"] = str(out["log_level"]).upper()
    return out
