from __future__ import annotations

import re
from collections.abc import Iterator

from fastapi import Depends, Path, Request
from sqlalchemy.orm import Session

from ..core.errors import AppError
from ..services.dao import UsersRepo
from ..services.users import UserService

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def get_db(request: Request) -> Iterator[Session]:
    """Yield a session from the pool owned by the running application."""

    session = request.app.state.sessionmaker()
    try:
        yield session
    finally:
        session.close()


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(UsersRepo(db))


def user_id_path(id: str = Path(..., description="User ID")) -> int:
    if not _ID_PATTERN.fullmatch(id):
        raise AppError.bad_request("Invalid user ID")
    value = int(id)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise AppError.bad_request("Invalid user ID")
    return value
