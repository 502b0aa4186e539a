#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Webbutiken catalog service (SQLite + FastAPI)

Commands:
  init                Create the database schema (optionally seed from a CSV directory)
  seed                Load CSV seed files (<table>.csv) into the database
  serve               Run the REST API with uvicorn (port 3000 unless configured)

Notes:
- The database path comes from WEBBUTIKEN_DB_PATH, then config.yaml, then ./webbutiken.db.
- Seeding is idempotent: rows whose primary key already exists are left alone.
"""

import argparse
import sys

from webbutiken.config import get_settings
from webbutiken.db import Database
from webbutiken.logs import configure_logging, ensure_log_schema
from webbutiken.services.seed_svc import seed_load


# ---------------- Commands ----------------

def cmd_init(args):
    db = Database(args.db)
    db.ensure_schema()
    ensure_log_schema(db)
    print(f"DB initialized at {db.path}.")
    if args.seed:
        counts = seed_load(db, args.seed)
        print("Seeded:", ", ".join(f"{t}={n}" for t, n in counts.items()) or "nothing")


def cmd_seed(args):
    db = Database(args.db)
    db.ensure_schema()
    counts = seed_load(db, args.dir)
    if not counts:
        print(f"No seed files found in {args.dir}", file=sys.stderr)
        return 1
    print("Seeded:", ", ".join(f"{t}={n}" for t, n in counts.items()))
    return 0


def cmd_serve(args):
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "webbutiken.api:app",
        host=args.host or settings["host"],
        port=args.port or settings["port"],
        log_level=settings["log_level"].lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Webbutiken catalog service")
    p.add_argument("--db", default=None, help="SQLite file (overrides config)")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("init", help="create schema")
    s.add_argument("--seed", default=None, help="directory with <table>.csv seed files")
    s.set_defaults(func=cmd_init)

    s = sub.add_parser("seed", help="load CSV seed files")
    s.add_argument("dir", nargs="?", default="seeds")
    s.set_defaults(func=cmd_seed)

    s = sub.add_parser("serve", help="run the REST API")
    s.add_argument("--host", default=None)
    s.add_argument("--port", type=int, default=None)
    s.set_defaults(func=cmd_serve)
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(get_settings()["log_level"])
    return args.func(args) or 0


if __name__ == "__main__":
    sys.exit(main())
