"""
Pydantic models for user payloads.

Request models validate shape only; the services still own every rule
that needs the database (uniqueness, existence).
"""

from typing import Optional

from pydantic import BaseModel, Field, StrictInt, validator

from ..core.db import MAX_SQLITE_INT
from ..core.statuses import UserStatus


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class UserCreate(BaseModel):
    """Body of ``POST /users``; both fields are required."""

    name: str = Field(..., min_length=1, example="Ada Lovelace")
    email: str = Field(..., min_length=1, example="ada@example.com")

    @validator("name", "email")
    def check_not_blank(cls, v):
        return _not_blank(v)


class UserRead(BaseModel):
    """A user row as returned by the API."""

    id: int
    name: str
    email: Optional[str] = None
    status: Optional[UserStatus] = None

    model_config = {
        "from_attributes": True,
    }


class UserEmailUpdate(BaseModel):
    email: str = Field(..., min_length=1, example="ada@example.org")

    @validator("email")
    def check_not_blank(cls, v):
        return _not_blank(v)


class UserEmailRead(BaseModel):
    id: int
    email: str


class UserStatusUpdate(BaseModel):
    """One element of the ``PUT /users/statuses`` batch.

    ``id`` must be a JSON number that fits an SQLite integer; numeric
    strings are rejected.
    """

    id: StrictInt = Field(..., ge=0, le=MAX_SQLITE_INT)
    status: UserStatus
