"""Database utilities and session management."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import Settings
from .base import Base

logger = logging.getLogger(__name__)


def pool_options(settings: Settings) -> dict[str, Any]:
    """Connection pool bounds for server databases.

    SQLAlchemy recycles by age only, so the recycle window is the smaller of
    the lifetime and idle limits; a connection cannot sit idle longer than it
    has been alive.
    """

    max_open = max(settings.db_max_open_conns, 1)
    max_idle = min(max(settings.db_max_idle_conns, 1), max_open)
    return {
        "pool_size": max_idle,
        "max_overflow": max_open - max_idle,
        "pool_recycle": min(settings.db_conn_max_lifetime, settings.db_conn_max_idle_time),
        "pool_pre_ping": True,
    }


def build_engine(settings: Settings) -> Engine:
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite":
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.sql_echo, **kwargs)
    return create_engine(url, echo=settings.sql_echo, **pool_options(settings))


def build_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )


def ping(engine: Engine) -> None:
    """Run ``SELECT 1``; raises the driver error when the database is unreachable."""

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


__all__ = ["Base", "build_engine", "build_sessionmaker", "ping", "pool_options"]
