"""Application factory and process entry point.

Serve with the bundled console script (``users-api``) or any ASGI server
using the factory, e.g.::

    uvicorn backend.app.main:create_app --factory
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .api.routes import health, users
from .core.config import Settings, get_settings
from .core.errors import register_exception_handlers
from .core.log import configure_logging, logger as app_logger, request_id_ctx
from .core.observability import configure_observability
from .db import build_engine, build_sessionmaker, ping
from .db.migrations import run_migrations

logger = logging.getLogger(__name__)
access_logger = app_logger.getChild("access")

REQUEST_ID_HEADER = "X-Request-Id"


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    engine = engine or build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.auto_migrate:
            run_migrations(settings.database_url)
        ping(engine)
        logger.info("Database connection established successfully")
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="CRUD REST API over a single User resource.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_ctx.set(request_id)
        start = time.perf_counter()

        def entry(status_code: int, **extra) -> str:
            return json.dumps(
                {
                    "method": request.method,
                    "path": request.url.path,
                    "status": status_code,
                    "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                    "request_id": request_id,
                    **extra,
                }
            )

        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                # The 500 body is rendered further out, past this middleware.
                access_logger.error(entry(500, error=type(exc).__name__))
                raise
            response.headers[REQUEST_ID_HEADER] = request_id
            access_logger.info(entry(response.status_code))
            return response
        finally:
            request_id_ctx.reset(token)

    configure_observability(app, settings)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    def root():
        return {"service": settings.app_name, "docs": "/docs"}

    return app


def run() -> None:
    """Start the HTTP server; exits non-zero when configuration or the database is unusable."""

    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging(None)
        logger.critical("Invalid configuration: %s", exc)
        raise SystemExit(1) from exc

    configure_logging(settings.log_level)
    logger.info("Connecting to database...")
    engine = build_engine(settings)
    try:
        ping(engine)
    except SQLAlchemyError as exc:
        logger.critical("Failed to create database connection pool: %s", exc)
        raise SystemExit(1) from exc

    app = create_app(settings, engine=engine)
    logger.info("Starting server at http://%s", settings.bind_address)
    logger.info("Swagger UI available at http://%s/docs", settings.bind_address)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
