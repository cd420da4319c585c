from __future__ import annotations

from functools import lru_cache
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}


def _coerce_bool(value: Any, default: bool) -> bool:
    """Coerce various inputs to bool, falling back to default when unknown."""

    if value is None:
        return default
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in TRUE_VALUES:
        return True
    if s in FALSE_VALUES:
        return False
    return default


class Settings(BaseSettings):
    """Application settings loaded from the environment and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    app_name: str = "Users API"
    app_version: str = "1.0.0"

    database_url: str = Field(description="SQLAlchemy database URL")
    host: str = "127.0.0.1"
    port: int = 8080

    log_level: str | int | None = Field(default=None, description="Python logging level")
    sql_echo: bool = False
    auto_migrate: bool = True

    db_max_open_conns: int = 10
    db_max_idle_conns: int = 5
    db_conn_max_lifetime: int = 3600
    db_conn_max_idle_time: int = 1800

    cors_origins: List[str] | str = ["*"]

    sentry_dsn: str | None = None
    otel_endpoint: str | None = None
    prometheus_endpoint: str = "/metrics"

    @field_validator("database_url", mode="before")
    @classmethod
    def _require_database_url(cls, v: Any) -> Any:
        if v is None or not str(v).strip():
            raise ValueError("DATABASE_URL must be set")
        return str(v).strip()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("sql_echo", "auto_migrate", mode="before")
    @classmethod
    def _v_bool(cls, v: Any, info) -> bool:  # type: ignore[override]
        default = cls.model_fields[info.field_name].default
        return _coerce_bool(v, default)

    @field_validator("sentry_dsn", "otel_endpoint", mode="before")
    @classmethod
    def _empty_optional(cls, v: Any) -> Any:
        if isinstance(v, str):
            s = v.strip()
            return s or None
        return v

    @property
    def bind_address(self) -> str:
        return f"{self.host}:{self.port}"


@lru_cache(1)
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
