from __future__ import annotations

import logging
from pathlib import Path

from alembic import command, config as alembic_config

logger = logging.getLogger(__name__)

ALEMBIC_DIR = Path(__file__).resolve().parents[2] / "alembic"


def alembic_cfg(database_url: str) -> alembic_config.Config:
    cfg = alembic_config.Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    cfg.attributes["configure_logger"] = False
    return cfg


def run_migrations(database_url: str) -> None:
    """Run Alembic migrations to the latest version."""

    logger.info("applying database migrations")
    command.upgrade(alembic_cfg(database_url), "head")


__all__ = ["ALEMBIC_DIR", "alembic_cfg", "run_migrations"]
