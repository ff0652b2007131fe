"""
Error types and error logging for prothought.

Logs full stack traces for debugging while showing clean messages to users.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class ProthoughtError(Exception):
    """Base class for errors reported to the user."""


class InvalidPeriod(ProthoughtError, ValueError):
    """A period token that is neither a known keyword nor a YYYY-MM-DD date."""

    def __init__(self, value: str, supported: tuple[str, ...] = ()):
        self.value = value
        self.supported = supported
        super().__init__(f"Unsupported time period: {value}")


class StorageError(ProthoughtError):
    """Reading or writing the thoughts database failed.

    The underlying ``sqlite3.Error`` is chained as ``__cause__``.
    """


class SummarizationError(ProthoughtError):
    """The language model endpoint could not be reached or returned an unusable response."""


class SkillsError(ProthoughtError):
    """Skill files could not be installed."""


def _error_log_path(db_path: Optional[Path] = None) -> Path:
    """Resolve error log path, next to the database when known."""
    if db_path is None:
        env = os.environ.get("PROTHOUGHT_DB_PATH")
        db_path = Path(env).expanduser() if env else Path.home() / ".prothought.db"
    return db_path.parent / "prothought-errors.log"


def log_exception(exc: Exception, context: str = "", db_path: Optional[Path] = None) -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)
        db_path: Database file the log should sit beside

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path(db_path)
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # Can't write error log; don't crash over it
    return log_path
