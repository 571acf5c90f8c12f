"""Status enumerations shared by request validation and the schema."""

from enum import Enum
from typing import Type


class UserStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    BLOCKED = "blocked"


class GroupStatus(str, Enum):
    """Cached membership state of a group.

    Only ``EMPTY`` is ever written by the service layer; it is set when
    the last member leaves.
    """

    EMPTY = "empty"
    NOT_EMPTY = "notEmpty"


def sql_in_list(enum_cls: Type[Enum]) -> str:
    """Render the enum values as the body of an SQL ``IN (...)`` clause."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
