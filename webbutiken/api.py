"""
FastAPI app entry point aggregating per-resource routers under webbutiken/routes.
Keep as `uvicorn webbutiken.api:app` (port 3000 by default, see config.yaml).
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import APP_NAME, __version__
from .config import get_settings
from .db import Database
from .errors import NotFoundError, ValidationError
from .logs import configure_logging, ensure_log_schema

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _first_violation(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # drop the "body"/"query" prefix, keep the field path
    loc = [str(x) for x in first.get("loc", ())[1:]]
    msg = str(first.get("msg", "Invalid request"))
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def create_app(db: Database | None = None) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        # 数据库句柄在 lifespan 内创建并挂到 app.state；请求只借用，不负责关闭
        configure_logging(get_settings()["log_level"])
        handle = db or Database()
        handle.ensure_schema()
        ensure_log_schema(handle)
        app.state.db = handle
        logger.info("database ready at %s", handle.path)
        yield

    app = FastAPI(title=APP_NAME, version=__version__, lifespan=_lifespan)

    @app.middleware("http")
    async def _log_request(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError):
        return _error(400, _first_violation(exc))

    @app.exception_handler(ValidationError)
    async def _handle_validation(request: Request, exc: ValidationError):
        return _error(400, str(exc))

    @app.exception_handler(NotFoundError)
    async def _handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Internal Server Error")

    # Include routers (split by resource)
    from .routes import base as base_routes
    from .routes import products as products_routes
    from .routes import customers as customers_routes
    from .routes import orders as orders_routes
    from .routes import logs as logs_routes

    app.include_router(base_routes.router)
    app.include_router(products_routes.router)
    app.include_router(customers_routes.router)
    app.include_router(orders_routes.router)
    app.include_router(logs_routes.router)
    return app


app = create_app()
