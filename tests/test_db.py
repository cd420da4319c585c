from __future__ import annotations

from sqlalchemy.pool import StaticPool

from backend.app.core.config import Settings
from backend.app.db import build_engine, ping, pool_options


def _settings(**overrides) -> Settings:
    return Settings(database_url="sqlite:///:memory:", _env_file=None, **overrides)


def test_pool_options_defaults():
    assert pool_options(_settings()) == {
        "pool_size": 5,
        "max_overflow": 5,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    }


def test_pool_options_clamps_idle_to_open():
    options = pool_options(_settings(db_max_open_conns=3, db_max_idle_conns=8, db_conn_max_idle_time=7200))
    assert options["pool_size"] == 3
    assert options["max_overflow"] == 0
    assert options["pool_recycle"] == 3600


def test_memory_sqlite_shares_one_connection():
    engine = build_engine(_settings())
    try:
        assert isinstance(engine.pool, StaticPool)
        ping(engine)
    finally:
        engine.dispose()


def test_file_sqlite_engine(tmp_path):
    engine = build_engine(Settings(database_url=f"sqlite:///{tmp_path / 'x.db'}", _env_file=None))
    try:
        ping(engine)
        assert engine.dialect.name == "sqlite"
    finally:
        engine.dispose()
