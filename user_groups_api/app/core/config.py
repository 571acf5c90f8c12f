"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service can start with no configuration at all; override them via
environment variables in a real deployment.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "User Groups API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    # Path to the SQLite database file.  A relative path is resolved
    # against the current working directory.
    database_url: str = os.getenv("DATABASE_URL", "database.db")

    # Upper bound, in seconds, for a single multi-statement transaction.
    # Statements still running past the deadline are interrupted and the
    # transaction is rolled back.
    transaction_timeout: float = float(os.getenv("TRANSACTION_TIMEOUT", "5"))

    # How long a connection waits on a locked database before failing.
    db_busy_timeout: float = float(os.getenv("DB_BUSY_TIMEOUT", "5"))


# Environment variables must be set before this module is imported:
# the dataclass defaults are evaluated once, at class creation time.
settings = Settings()
