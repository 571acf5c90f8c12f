"""
Service layer for groups and group membership.

A group's ``status`` column is a cache of whether it still has
members.  The only transition written here is to ``empty``, performed
by ``remove_user_from_group`` when the last member leaves; adding a
member does not touch the status.
"""

import logging
import sqlite3
from typing import List

from ..core.db import get_cursor, transaction
from ..core.errors import ConstraintViolation, NotFound
from ..core.statuses import GroupStatus
from ..schemas.group import GroupRead
from ..schemas.user import UserRead

logger = logging.getLogger(__name__)


def _to_group(row: sqlite3.Row) -> GroupRead:
    return GroupRead(id=row["id"], name=row["name"], status=row["status"])


class GroupService:
    """Service for groups and the ``user_groups`` relation."""

    @classmethod
    async def create_group(cls, name: str) -> GroupRead:
        """Insert a group; it starts out ``empty``."""
        try:
            with get_cursor() as cursor:
                cursor.execute("INSERT INTO groups (name) VALUES (?)", (name,))
                group_id = cursor.lastrowid
        except ConstraintViolation as exc:
            raise ConstraintViolation(f"Group {name} already exists") from exc
        logger.info("Created group %s (%s)", group_id, name)
        return GroupRead(id=group_id, name=name, status=GroupStatus.EMPTY)

    @classmethod
    async def list_groups(cls, limit: int, offset: int) -> List[GroupRead]:
        with get_cursor() as cursor:
            rows = cursor.execute(
                "SELECT id, name, status FROM groups LIMIT ? OFFSET ?", (limit, offset)
            ).fetchall()
        return [_to_group(row) for row in rows]

    @classmethod
    async def get_group(cls, group_id: int) -> GroupRead:
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT id, name, status FROM groups WHERE id = ?", (group_id,)
            ).fetchone()
        if not row:
            raise NotFound("Group not found")
        return _to_group(row)

    @classmethod
    async def list_group_members(cls, group_id: int) -> List[UserRead]:
        """Return the users that belong to ``group_id``, ordered by id."""
        with get_cursor() as cursor:
            if not cursor.execute("SELECT 1 FROM groups WHERE id = ?", (group_id,)).fetchone():
                raise NotFound("Group not found")
            rows = cursor.execute(
                """
                SELECT u.id, u.name, u.email, u.status
                FROM users u
                JOIN user_groups ug ON ug.user_id = u.id
                WHERE ug.group_id = ?
                ORDER BY u.id
                """,
                (group_id,),
            ).fetchall()
        return [
            UserRead(id=row["id"], name=row["name"], email=row["email"], status=row["status"])
            for row in rows
        ]

    @classmethod
    async def add_user_to_group(cls, user_id: int, group_id: int) -> None:
        """Record that ``user_id`` belongs to ``group_id``.

        Raises ``NotFound`` if either side is missing and
        ``ConstraintViolation`` if the membership already exists.
        """
        try:
            with get_cursor() as cursor:
                if not cursor.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone():
                    raise NotFound("User not found")
                if not cursor.execute("SELECT 1 FROM groups WHERE id = ?", (group_id,)).fetchone():
                    raise NotFound("Group not found")
                cursor.execute(
                    "INSERT INTO user_groups (user_id, group_id) VALUES (?, ?)",
                    (user_id, group_id),
                )
        except ConstraintViolation as exc:
            raise ConstraintViolation(f"User {user_id} is already in group {group_id}") from exc
        logger.info("Added user %s to group %s", user_id, group_id)

    @classmethod
    async def remove_user_from_group(cls, user_id: int, group_id: int) -> None:
        """Remove a membership and mark the group empty if it was the last.

        The delete, the member count and the status update run in one
        transaction, so the count always sees the delete.  A missing
        membership is not an error.  Any failure rolls back all three
        steps and raises ``TransactionFailed``.
        """
        with transaction("remove_user_from_group") as conn:
            conn.execute(
                "DELETE FROM user_groups WHERE user_id = ? AND group_id = ?",
                (user_id, group_id),
            )
            row = conn.execute(
                "SELECT COUNT(*) AS count FROM user_groups WHERE group_id = ?", (group_id,)
            ).fetchone()
            if row["count"] == 0:
                conn.execute(
                    "UPDATE groups SET status = ? WHERE id = ?",
                    (GroupStatus.EMPTY.value, group_id),
                )
        logger.info("Removed user %s from group %s (%d members left)", user_id, group_id, row["count"])
