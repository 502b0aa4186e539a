from __future__ import annotations

from fastapi import Request

from .db import Database


def get_db(request: Request) -> Database:
    """The Database handle created in the app lifespan."""
    return request.app.state.db
