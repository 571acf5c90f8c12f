"""
Business logic for users.

Reads and single-row writes go through ``get_cursor``; the batch status
update runs inside ``transaction`` so that it is applied all-or-nothing.
"""

import logging
import sqlite3
from typing import Iterable, List, Optional

from ..core.db import get_cursor, transaction
from ..core.errors import ConstraintViolation, NotFound, ValidationError
from ..core.statuses import UserStatus
from ..schemas.user import UserEmailRead, UserRead, UserStatusUpdate

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, name, email, status"


def _to_user(row: sqlite3.Row) -> UserRead:
    return UserRead(id=row["id"], name=row["name"], email=row["email"], status=row["status"])


class UserService:
    """Queries and mutations over the ``users`` table."""

    @classmethod
    async def list_users(cls, limit: int, offset: int) -> List[UserRead]:
        """Return up to ``limit`` users starting at ``offset``.

        Rows come back in the store's default order.  The caller is
        expected to have validated both values as non-negative.
        """
        with get_cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {_USER_COLUMNS} FROM users LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [_to_user(row) for row in rows]

    @classmethod
    async def find_users_by_name(cls, name: str) -> List[UserRead]:
        with get_cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE name = ?", (name,)
            ).fetchall()
        return [_to_user(row) for row in rows]

    @classmethod
    async def find_users_by_email(cls, email: str) -> List[UserRead]:
        with get_cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?", (email,)
            ).fetchall()
        return [_to_user(row) for row in rows]

    @classmethod
    async def get_user(cls, user_id: int) -> Optional[UserRead]:
        """Retrieve a user by ID, or ``None``."""
        with get_cursor() as cursor:
            row = cursor.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return _to_user(row) if row else None

    @classmethod
    async def create_user(cls, name: str, email: str) -> UserRead:
        """Insert a new user and return it.

        The new row has no status yet.  Raises ``ConstraintViolation``
        when another user already owns ``email``.
        """
        try:
            with get_cursor() as cursor:
                cursor.execute("INSERT INTO users (name, email) VALUES (?, ?)", (name, email))
                user_id = cursor.lastrowid
        except ConstraintViolation as exc:
            raise ConstraintViolation(f"Email {email} is already in use") from exc
        logger.info("Created user %s", user_id)
        return UserRead(id=user_id, name=name, email=email, status=None)

    @classmethod
    async def update_user_email(cls, user_id: int, email: str) -> UserEmailRead:
        """Change the email of exactly one user.

        Raises ``NotFound`` when no row has ``user_id`` and
        ``ConstraintViolation`` when ``email`` belongs to another user.
        """
        try:
            with get_cursor() as cursor:
                cursor.execute("UPDATE users SET email = ? WHERE id = ?", (email, user_id))
                changed = cursor.rowcount
        except ConstraintViolation as exc:
            raise ConstraintViolation(f"Email {email} is already in use") from exc
        if changed == 0:
            raise NotFound("User not found")
        logger.info("Updated email of user %s", user_id)
        return UserEmailRead(id=user_id, email=email)

    @classmethod
    async def update_user_statuses(cls, updates: Iterable[UserStatusUpdate]) -> int:
        """Apply every ``(id, status)`` pair in a single transaction.

        Statuses are checked against ``UserStatus`` before anything is
        written.  An id with no matching row is skipped silently; any
        store failure rolls the whole batch back and raises
        ``TransactionFailed``.  Returns the number of rows changed.
        """
        pairs = []
        for update in updates:
            try:
                status = UserStatus(update.status)
            except ValueError:
                raise ValidationError(f"Invalid status {update.status!r} for user {update.id}") from None
            pairs.append((status.value, update.id))

        changed = 0
        with transaction("update_user_statuses") as conn:
            for status, user_id in pairs:
                cursor = conn.execute("UPDATE users SET status = ? WHERE id = ?", (status, user_id))
                if cursor.rowcount == 0:
                    logger.debug("No user %s to set to %s", user_id, status)
                changed += cursor.rowcount
        logger.info("Updated status of %d of %d users", changed, len(pairs))
        return changed
