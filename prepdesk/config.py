"""Application configuration and constants."""
import logging
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float_env(name: str, default: float) -> float:
    """Parse positive float from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _parse_log_level(name: str, default: int) -> int:
    """Parse logging level name (INFO, DEBUG, ...) from environment variable."""
    raw = os.environ.get(name)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'prepdesk.db'}"
)

# Test sessions
TIMER_INTERVAL_SECONDS = _parse_float_env("TIMER_INTERVAL_SECONDS", 1.0)
DEFAULT_USER_ID = os.environ.get("DEFAULT_USER_ID", "user-1")

# HTTP client
API_BASE_URL = os.environ.get("API_BASE_URL", "http://127.0.0.1:8000")
HTTP_TIMEOUT_SECONDS = _parse_int_env("HTTP_TIMEOUT_SECONDS", 30)

# Logging
LOG_LEVEL = _parse_log_level("LOG_LEVEL", logging.INFO)

# Hosted sessions are dropped after this much inactivity
SESSION_IDLE_MINUTES = _parse_int_env("SESSION_IDLE_MINUTES", 180)
SESSION_CLEANUP_INTERVAL_SECONDS = _parse_int_env(
    "SESSION_CLEANUP_INTERVAL_SECONDS", 5 * 60
)
