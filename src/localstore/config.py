"""Environment-variable-based configuration."""

import logging
import os
import sys
from pathlib import Path


def get_data_dir() -> Path:
    """Return the directory holding SQLite database files from LOCALSTORE_DATA_DIR."""
    raw = os.environ.get("LOCALSTORE_DATA_DIR", "~/.local/share/localstore")
    return Path(raw).expanduser()


def get_db_size() -> int:
    """Return the default database quota in bytes from LOCALSTORE_DB_SIZE."""
    return int(os.environ.get("LOCALSTORE_DB_SIZE", "2000000"))


def get_database_url() -> str | None:
    """Return the database URL from LOCALSTORE_DATABASE_URL, if set."""
    return os.environ.get("LOCALSTORE_DATABASE_URL") or None


def get_log_level() -> str:
    """Return the logging level from LOCALSTORE_LOG_LEVEL."""
    return os.environ.get("LOCALSTORE_LOG_LEVEL", "WARNING")


def configure_logging() -> None:
    """Send log output to stderr at the configured level."""
    logging.basicConfig(
        level=getattr(logging, get_log_level().upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
