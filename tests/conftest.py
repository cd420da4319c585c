from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def settings(tmp_path):
    from backend.app.core.config import Settings

    return Settings(
        database_url=f"sqlite:///{tmp_path / 'users_test.db'}",
        auto_migrate=False,
        _env_file=None,
    )


@pytest.fixture
def engine(settings) -> Iterator[Engine]:
    from backend.app.db import Base, build_engine

    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    from backend.app.db import build_sessionmaker

    session = build_sessionmaker(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(settings, engine):
    from backend.app.main import create_app

    return create_app(settings, engine=engine)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    def _make(name: str = "Ada Lovelace", email: str = "ada@example.com") -> dict:
        response = client.post("/api/users", json={"name": name, "email": email})
        assert response.status_code == 201, response.text
        return response.json()

    return _make
