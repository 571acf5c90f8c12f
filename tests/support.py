"""Helpers shared by the service and API tests."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import Any, Coroutine, Optional, TypeVar

T = TypeVar("T")


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Drive a service coroutine to completion."""

    return asyncio.run(coro)


def user_status(conn: sqlite3.Connection, user_id: int) -> Optional[str]:
    row = conn.execute("SELECT status FROM users WHERE id = ?", (user_id,)).fetchone()
    return row["status"] if row else None


def group_status(conn: sqlite3.Connection, group_id: int) -> Optional[str]:
    row = conn.execute("SELECT status FROM groups WHERE id = ?", (group_id,)).fetchone()
    return row["status"] if row else None


def fail_updates_of_user(conn: sqlite3.Connection, user_id: int) -> None:
    """Install a trigger that aborts any UPDATE touching ``user_id``."""

    conn.execute(
        f"""
        CREATE TRIGGER fail_user_{user_id} BEFORE UPDATE ON users
        WHEN NEW.id = {user_id}
        BEGIN
            SELECT RAISE(ABORT, 'simulated store failure');
        END
        """
    )
