"""
Data types for the thought journal.
"""

from dataclasses import dataclass, field
from datetime import datetime

# Canonical timestamp format: local time, second precision, no zone suffix.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

STRIKE = "~~"


def local_now() -> str:
    """Current local timestamp in canonical format: YYYY-MM-DDTHH:MM:SS.

    Thoughts are recorded in local civil time, matching the way periods
    ("today", "yesterday") are resolved.
    """
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def is_struck(text: str) -> bool:
    """True if text is already wrapped in markdown strikethrough."""
    return text.startswith(STRIKE) and text.endswith(STRIKE)


def strike(text: str) -> str:
    """Wrap text in markdown strikethrough."""
    return f"{STRIKE}{text}{STRIKE}"


@dataclass
class Thought:
    """
    A single journal entry.

    ``timestamp`` is fixed at creation. ``text`` changes at most once, when
    the thought is retracted. ``markers`` are the hashtags captured when the
    thought was saved, in the order they first appeared.
    """
    id: int
    timestamp: str
    text: str
    markers: list[str] = field(default_factory=list)

    @property
    def retracted(self) -> bool:
        return is_struck(self.text)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "text": self.text,
            "markers": list(self.markers),
        }

    def __str__(self) -> str:
        return f"[{self.timestamp}] {self.text}"
