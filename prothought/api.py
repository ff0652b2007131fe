"""
Core API for the thought journal.

This is the main entry point for saving, querying, retracting and
summarizing thoughts. The CLI is a thin layer over ``Journal``.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from .config import JournalConfig
from .logging_config import configure_ops_log, remove_ops_log
from .periods import resolve_period
from .providers.base import CompletionProvider
from .summarize import Summarizer
from .thought_store import ThoughtStore
from .types import Thought, is_struck, strike

logger = logging.getLogger(__name__)


class RetractStatus(enum.Enum):
    NO_THOUGHTS = "no_thoughts"
    ALREADY_RETRACTED = "already_retracted"
    RETRACTED = "retracted"


@dataclass(frozen=True)
class RetractResult:
    """Outcome of retract_last(); timestamp is that of the affected thought."""
    status: RetractStatus
    timestamp: Optional[str] = None


class Journal:
    """
    Personal thought journal backed by a local SQLite file.

    Usage:
        with Journal(JournalConfig.from_env()) as journal:
            journal.log("Fixed the login bug #work")
            for thought in journal.list_for_period(["today"], marker="work"):
                print(thought)
    """

    def __init__(
        self,
        config: Optional[JournalConfig] = None,
        *,
        provider: Optional[CompletionProvider] = None,
        ops_log: bool = True,
    ):
        """
        Args:
            config: Journal configuration; defaults to the environment
            provider: Completion provider for conclude(); created from
                config.llm on first use when not given
            ops_log: Write the persistent operations log beside the database
        """
        self.config = config if config is not None else JournalConfig.from_env()
        self._store = ThoughtStore(self.config.db_path)
        self._provider = provider
        self._owns_provider = False
        try:
            self._ops_handler = configure_ops_log(self.config.db_path) if ops_log else None
        except Exception:
            self._store.close()
            raise

    @property
    def store(self) -> ThoughtStore:
        return self._store

    @property
    def db_path(self) -> Path:
        return self.config.db_path

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def log(self, text: str) -> Thought:
        """
        Save a new thought; hashtags in the text become its markers.

        Raises:
            ValueError: If text is empty
            StorageError: If the database write fails
        """
        thought = self._store.append(text.strip())
        logger.info("Saved thought %d at %s markers=%s",
                    thought.id, thought.timestamp, ",".join(thought.markers))
        return thought

    def retract_last(self) -> RetractResult:
        """
        Strike through the most recent thought.

        The text is wrapped in ``~~`` once; calling again is a no-op that
        reports ALREADY_RETRACTED. Markers are kept, so a retracted
        thought still matches marker filters.
        """
        latest = self._store.latest()
        if latest is None:
            return RetractResult(RetractStatus.NO_THOUGHTS)

        if is_struck(latest.text):
            return RetractResult(RetractStatus.ALREADY_RETRACTED, latest.timestamp)

        self._store.amend(latest.id, strike(latest.text))
        logger.info("Retracted thought %d from %s", latest.id, latest.timestamp)
        return RetractResult(RetractStatus.RETRACTED, latest.timestamp)

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    def list_for_period(
        self,
        period_args: Sequence[str] = (),
        marker: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ) -> list[Thought]:
        """
        Thoughts in a period, oldest first, optionally filtered by marker.

        Args:
            period_args: Period tokens; the first one is used, "today" if empty
            marker: Tag to filter by (without '#'); case-insensitive
            today: Reference day for relative periods

        Raises:
            InvalidPeriod: If the period is not recognized
        """
        period = resolve_period(list(period_args), today=today)
        if marker:
            marker = marker.lower()
        logger.debug("Query %s..%s marker=%s", period.start, period.end, marker)
        return self._store.query_range(period.start, period.end, marker)

    def conclude(
        self,
        period_args: Sequence[str] = (),
        marker: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ) -> Optional[str]:
        """
        Summarize a period's thoughts with the language model.

        Returns:
            The summary, or None if the period has no thoughts

        Raises:
            InvalidPeriod: If the period is not recognized
            SummarizationError: If the model cannot be reached or its reply is unusable
        """
        thoughts = self.list_for_period(period_args, marker, today=today)
        summarizer = Summarizer(self._get_provider(), self.config.llm.system_prompt)
        return summarizer.summarize(thoughts)

    def _get_provider(self) -> CompletionProvider:
        if self._provider is None:
            from .providers.llm import OpenAICompatibleClient
            self._provider = OpenAICompatibleClient(self.config.llm)
            self._owns_provider = True
        return self._provider

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the database, any provider created here, and detach the operations log."""
        self._store.close()
        if self._owns_provider:
            self._provider.close()
            self._provider = None
            self._owns_provider = False
        if self._ops_handler is not None:
            remove_ops_log(self._ops_handler)
            self._ops_handler = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
