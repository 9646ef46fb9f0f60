"""Configuration management for Daybook."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


# Daybook Data Directory (defaults to ~/.daybook, created on first open)
DAYBOOK_DATA_DIR = Path(
    get_env("DAYBOOK_DATA_DIR", os.path.expanduser("~/.daybook"))
    or os.path.expanduser("~/.daybook")
)

# Database path
DATABASE_PATH = Path(
    get_env("DAYBOOK_DATABASE_PATH") or DAYBOOK_DATA_DIR / "daybook.db"
)

# SQLite connection tuning
SQLITE_WAL = get_env_bool("DAYBOOK_WAL", True)
SQLITE_TIMEOUT = get_env_int("DAYBOOK_SQLITE_TIMEOUT", 5)

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO")


def setup_logging() -> logging.Logger:
    """Configure and return logger."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, (LOG_LEVEL or "INFO").upper(), logging.INFO),
    )
    return logging.getLogger(__name__)
