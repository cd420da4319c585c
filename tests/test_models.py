from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.dialects.postgresql import psycopg
from sqlalchemy.schema import CreateTable

from backend.app.models import User


def test_user_id_is_64_bit_on_postgres():
    ddl = str(CreateTable(User.__table__).compile(dialect=postgresql.dialect()))
    assert "id BIGSERIAL" in ddl


def test_user_id_binds_as_bigint_with_psycopg():
    stmt = select(User).where(User.id == 3_000_000_000)
    compiled = str(stmt.compile(dialect=psycopg.dialect()))
    assert "::BIGINT" in compiled
    assert "::INTEGER" not in compiled


def test_user_id_stays_integer_on_sqlite():
    ddl = str(CreateTable(User.__table__).compile(dialect=sqlite.dialect()))
    assert "id INTEGER NOT NULL" in ddl
