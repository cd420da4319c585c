"""Database repositories."""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import User

logger = logging.getLogger(__name__)


class RecordNotFound(LookupError):
    """Raised when no row matches the requested primary key."""

    def __init__(self, model: str, key: object) -> None:
        super().__init__(f"{model} {key!r} not found")
        self.model = model
        self.key = key


class UsersRepo:
    """Create/read/update/delete ``User`` rows.

    Storage errors are re-raised untouched after rolling the session back so
    the caller decides how to classify them.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def create(self, name: str, email: str) -> User:
        user = User(name=name, email=email)
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        logger.debug("inserted user id=%s", user.id)
        return user

    def get_by_id(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise RecordNotFound("User", user_id)
        return user

    def get_all(self) -> list[User]:
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        return list(self.session.scalars(stmt))

    def update(
        self, user_id: int, name: str | None = None, email: str | None = None
    ) -> User:
        user = self.get_by_id(user_id)
        changes = {
            field: value
            for field, value in (("name", name), ("email", email))
            if value is not None
        }
        if not changes:
            return user
        for field, value in changes.items():
            setattr(user, field, value)
        self._commit()
        self.session.refresh(user)
        return user

    def delete(self, user_id: int) -> int:
        result = self.session.execute(delete(User).where(User.id == user_id))
        self._commit()
        return result.rowcount or 0
