from __future__ import annotations

from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255


def _check_email(value: str) -> str:
    try:
        # Syntax only: no DNS lookups, and dotless or ``.test`` domains pass.
        validate_email(
            value,
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
        )
    except EmailNotValidError as exc:
        raise PydanticCustomError(
            "email", "Invalid email format: {reason}", {"reason": str(exc)}
        ) from exc
    return value


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    email: str = Field(min_length=1, max_length=EMAIL_MAX_LENGTH)

    model_config = {
        "json_schema_extra": {"examples": [{"name": "Ada Lovelace", "email": "ada@example.com"}]}
    }

    @field_validator("name", "email", mode="before")
    @classmethod
    def _required(cls, v: Any) -> Any:
        # An empty value counts as missing, not as too short.
        if v is None or v == "":
            raise PydanticCustomError("required", "Field required")
        return v

    @field_validator("email")
    @classmethod
    def _email_format(cls, v: str) -> str:
        return _check_email(v)


class UserUpdate(BaseModel):
    """Partial update; ``None`` means the field was omitted and stays unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    email: str | None = Field(default=None, min_length=1, max_length=EMAIL_MAX_LENGTH)

    model_config = {"json_schema_extra": {"examples": [{"email": "ada@lovelace.dev"}]}}

    @field_validator("email")
    @classmethod
    def _email_format(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _check_email(v)


class UserRead(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}
