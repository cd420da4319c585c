"""Business rules for the ``User`` resource.

``UserService`` sits between the request contracts and :class:`UsersRepo`.
It enforces the checks the contracts cannot express (values that are blank
once trimmed) and classifies repository outcomes into :class:`AppError`
kinds. It never talks HTTP.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from ..core.errors import AppError
from ..models import User
from ..schemas.user import UserCreate, UserRead, UserUpdate
from .dao import RecordNotFound, UsersRepo

logger = logging.getLogger(__name__)


def _describe(exc: SQLAlchemyError) -> str:
    # Prefer the driver message over SQLAlchemy's statement dump.
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def _not_found(user_id: int) -> AppError:
    return AppError.not_found(f"User with id {user_id} not found")


def _is_blank(value: str | None) -> bool:
    return value is not None and not value.strip()


def to_response(user: User) -> UserRead:
    return UserRead.model_validate(user)


class UserService:
    def __init__(self, repo: UsersRepo) -> None:
        self.repo = repo

    def create_user(self, payload: UserCreate) -> UserRead:
        if _is_blank(payload.name):
            raise AppError.bad_request("Name cannot be empty")
        if _is_blank(payload.email):
            raise AppError.bad_request("Email cannot be empty")

        try:
            user = self.repo.create(payload.name, payload.email)
        except SQLAlchemyError as exc:
            logger.warning("create user failed: %s", _describe(exc))
            raise AppError.database(_describe(exc)) from exc

        logger.info("created user id=%s", user.id)
        return to_response(user)

    def get_user(self, user_id: int) -> UserRead:
        try:
            user = self.repo.get_by_id(user_id)
        except RecordNotFound as exc:
            raise _not_found(user_id) from exc
        except SQLAlchemyError as exc:
            logger.warning("get user %s failed: %s", user_id, _describe(exc))
            raise AppError.database(_describe(exc)) from exc
        return to_response(user)

    def get_all_users(self) -> list[UserRead]:
        try:
            users = self.repo.get_all()
        except SQLAlchemyError as exc:
            logger.warning("list users failed: %s", _describe(exc))
            raise AppError.database(_describe(exc)) from exc
        return [to_response(user) for user in users]

    def update_user(self, user_id: int, payload: UserUpdate) -> UserRead:
        if _is_blank(payload.name):
            raise AppError.bad_request("Name cannot be empty")
        if _is_blank(payload.email):
            raise AppError.bad_request("Email cannot be empty")

        try:
            user = self.repo.update(user_id, name=payload.name, email=payload.email)
        except RecordNotFound as exc:
            raise _not_found(user_id) from exc
        except SQLAlchemyError as exc:
            logger.warning("update user %s failed: %s", user_id, _describe(exc))
            raise AppError.database(_describe(exc)) from exc

        logger.info("updated user id=%s", user_id)
        return to_response(user)

    def delete_user(self, user_id: int) -> None:
        try:
            affected = self.repo.delete(user_id)
        except SQLAlchemyError as exc:
            logger.warning("delete user %s failed: %s", user_id, _describe(exc))
            raise AppError.database(_describe(exc)) from exc

        if affected == 0:
            raise _not_found(user_id)
        logger.info("deleted user id=%s", user_id)


__all__ = ["UserService", "to_response"]
