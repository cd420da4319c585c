from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from backend.app.core.errors import AppError, ErrorKind
from backend.app.schemas.user import UserCreate, UserUpdate
from backend.app.services.dao import UsersRepo
from backend.app.services.users import UserService


@pytest.fixture
def service(session) -> UserService:
    return UserService(UsersRepo(session))


def _boom(*args, **kwargs):
    raise OperationalError("stmt", {}, "disk I/O error")


def test_create_returns_response_shape(service):
    user = service.create_user(UserCreate(name="Ada Lovelace", email="ada@example.com"))
    assert user.model_dump() == {"id": user.id, "name": "Ada Lovelace", "email": "ada@example.com"}


@pytest.mark.parametrize(
    "name,email,message",
    [
        ("   ", "ada@example.com", "Name cannot be empty"),
        ("Ada", "\t ", "Email cannot be empty"),
    ],
)
def test_create_rejects_blank_values(service, name, email, message):
    # model_construct skips contract validation, as if the contract let it through
    payload = UserCreate.model_construct(name=name, email=email)
    with pytest.raises(AppError) as info:
        service.create_user(payload)
    assert info.value.kind is ErrorKind.BAD_REQUEST
    assert info.value.message == message


def test_create_duplicate_email_is_database_error(service):
    service.create_user(UserCreate(name="Ada", email="ada@example.com"))
    with pytest.raises(AppError) as info:
        service.create_user(UserCreate(name="Other", email="ada@example.com"))
    assert info.value.kind is ErrorKind.DATABASE
    assert info.value.status_code == 500
    assert "UNIQUE" in info.value.message


def test_get_missing_is_not_found(service):
    with pytest.raises(AppError) as info:
        service.get_user(404)
    assert info.value.kind is ErrorKind.NOT_FOUND
    assert info.value.message == "User with id 404 not found"


def test_get_storage_failure_is_database_error(monkeypatch, service, session):
    monkeypatch.setattr(session, "get", _boom)
    with pytest.raises(AppError) as info:
        service.get_user(1)
    assert info.value.kind is ErrorKind.DATABASE


def test_get_all_preserves_order(service):
    for name in ("A", "B", "C"):
        service.create_user(UserCreate(name=name, email=f"{name.lower()}@example.com"))
    assert [u.name for u in service.get_all_users()] == ["C", "B", "A"]


def test_get_all_storage_failure_is_database_error(monkeypatch, service, session):
    monkeypatch.setattr(session, "scalars", _boom)
    with pytest.raises(AppError) as info:
        service.get_all_users()
    assert info.value.kind is ErrorKind.DATABASE
    assert "disk I/O error" in info.value.message


@pytest.mark.parametrize(
    "fields,message",
    [
        ({"name": "  "}, "Name cannot be empty"),
        ({"email": " \t"}, "Email cannot be empty"),
    ],
)
def test_update_rejects_blank_supplied_field(service, fields, message):
    created = service.create_user(UserCreate(name="Ada", email="ada@example.com"))
    # model_construct skips contract validation, as if the contract let it through
    payload = UserUpdate.model_construct(**{"name": None, "email": None, **fields})
    with pytest.raises(AppError) as info:
        service.update_user(created.id, payload)
    assert info.value.kind is ErrorKind.BAD_REQUEST
    assert info.value.message == message
    assert service.get_user(created.id).model_dump() == created.model_dump()


def test_update_missing_is_not_found(service):
    with pytest.raises(AppError) as info:
        service.update_user(9, UserUpdate(email="x@example.com"))
    assert info.value.kind is ErrorKind.NOT_FOUND


def test_update_duplicate_email_is_database_error(service):
    service.create_user(UserCreate(name="Ada", email="ada@example.com"))
    grace = service.create_user(UserCreate(name="Grace", email="grace@example.com"))
    with pytest.raises(AppError) as info:
        service.update_user(grace.id, UserUpdate(email="ada@example.com"))
    assert info.value.kind is ErrorKind.DATABASE
    assert service.get_user(grace.id).email == "grace@example.com"


def test_delete_missing_is_not_found(service):
    with pytest.raises(AppError) as info:
        service.delete_user(3)
    assert info.value.kind is ErrorKind.NOT_FOUND


def test_delete_storage_failure_is_database_error(monkeypatch, service, session):
    monkeypatch.setattr(session, "execute", _boom)
    with pytest.raises(AppError) as info:
        service.delete_user(3)
    assert info.value.kind is ErrorKind.DATABASE
