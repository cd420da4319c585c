"""Logging utilities."""

from __future__ import annotations

import contextvars
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

logger = logging.getLogger("users_api")
request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="-"
)


class RequestIdFilter(logging.Filter):
    """Attach the current request id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        return True


def parse_log_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Translate ``LOG_LEVEL`` into a numeric level.

    Blank or unknown values fall back to ``default`` instead of failing startup.
    """

    if value is None:
        return default
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return default
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else default


def configure_logging(level: str | int | None) -> int:
    resolved = parse_log_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(resolved)
    for handler in root.handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
    return resolved


__all__ = [
    "LOG_FORMAT",
    "RequestIdFilter",
    "configure_logging",
    "logger",
    "parse_log_level",
    "request_id_ctx",
]
