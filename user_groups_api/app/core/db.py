"""
SQLite database integration.

This module owns every piece of connection handling:

* ``get_connection`` opens a configured connection;
* ``get_cursor`` scopes a single-statement unit of work;
* ``transaction`` scopes a multi-statement atomic unit of work with a
  deadline;
* ``init_db`` creates the schema on application start.

Connections are never shared between calls.  Both context managers
close their connection on every exit path and translate ``sqlite3``
errors into the service error taxonomy from ``core.errors``.
"""

import logging
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings
from .errors import ConstraintViolation, StoreUnavailable, TransactionFailed
from .statuses import GroupStatus, UserStatus, sql_in_list

logger = logging.getLogger(__name__)

# Largest value SQLite can bind as an INTEGER.
MAX_SQLITE_INT = 2**63 - 1

# Number of SQLite VM instructions between two deadline checks.
_PROGRESS_INTERVAL = 1000


def get_database_path() -> str:
    """Return the absolute path of the SQLite database file.

    Relative values of ``settings.database_url`` are resolved against
    the current working directory.
    """
    return str(Path(settings.database_url).expanduser().resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be read by
    name, and foreign key enforcement is switched on (SQLite disables
    it per connection by default).
    """
    db_path = get_database_path()
    try:
        conn = sqlite3.connect(db_path, timeout=settings.db_busy_timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as exc:
        logger.error("Cannot open database %s: %s", db_path, exc)
        raise StoreUnavailable("Database is unavailable") from exc
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    except sqlite3.IntegrityError as exc:
        logger.warning("Constraint violation: %s", exc)
        raise ConstraintViolation("Constraint violation") from exc
    except sqlite3.Error as exc:
        logger.error("Statement failed: %s", exc)
        raise StoreUnavailable("Database error") from exc
    finally:
        conn.close()


@contextmanager
def transaction(name: str, timeout: Optional[float] = None) -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements as one atomic transaction.

    The transaction is opened with ``BEGIN IMMEDIATE`` so that the write
    lock is taken up front.  Any exception raised inside the block, or a
    statement still running after ``timeout`` seconds (defaults to
    ``settings.transaction_timeout``), rolls everything back and is
    re-raised as ``TransactionFailed`` chained to the original error.
    """
    if timeout is None:
        timeout = settings.transaction_timeout
    conn = get_connection()
    conn.isolation_level = None
    deadline = time.monotonic() + timeout
    # A non-zero return value makes SQLite abort the running statement.
    conn.set_progress_handler(lambda: int(time.monotonic() > deadline), _PROGRESS_INTERVAL)
    try:
        conn.execute("BEGIN IMMEDIATE")
        yield conn
        conn.execute("COMMIT")
    except Exception as exc:
        conn.set_progress_handler(None, 0)
        # SQLite already rolls back on some errors (an interrupt, for one).
        if conn.in_transaction:
            try:
                conn.execute("ROLLBACK")
            except sqlite3.Error as rollback_exc:
                logger.error("Rollback of %s failed: %s", name, rollback_exc)
        if time.monotonic() > deadline:
            logger.warning("Transaction %s timed out after %.2fs and was rolled back", name, timeout)
        else:
            logger.warning("Transaction %s rolled back: %s", name, exc)
        raise TransactionFailed(f"Transaction {name} failed") from exc
    finally:
        conn.close()


SCHEMA = f"""
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT UNIQUE,
    status TEXT CHECK(status IN ({sql_in_list(UserStatus)}))
);

CREATE TABLE IF NOT EXISTS groups (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    status TEXT CHECK(status IN ({sql_in_list(GroupStatus)})) DEFAULT '{GroupStatus.EMPTY.value}'
);

CREATE TABLE IF NOT EXISTS user_groups (
    user_id INTEGER NOT NULL,
    group_id INTEGER NOT NULL,
    PRIMARY KEY (user_id, group_id),
    FOREIGN KEY (user_id) REFERENCES users(id),
    FOREIGN KEY (group_id) REFERENCES groups(id)
);
"""


def init_db() -> None:
    """Create the ``users``, ``groups`` and ``user_groups`` tables.

    Every statement is conditional on the table not existing, so this
    is safe to run on each start.  Failures propagate as
    ``StoreUnavailable``.
    """
    with get_cursor() as cursor:
        cursor.executescript(SCHEMA)
    logger.info("Database schema ready at %s", get_database_path())
