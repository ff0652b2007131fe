"""
Configuration for the journal and its language model endpoint.

Settings come only from environment variables. They are read once at
startup into immutable config objects that are passed to whatever needs
them; nothing below the CLI reads the environment directly.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

DB_FILENAME = ".prothought.db"

# Ollama's OpenAI-compatible API
DEFAULT_BASE_URL = "http://localhost:11434/v1"
DEFAULT_SYSTEM_PROMPT = "You summarise my daily thoughts."

ENV_DB_PATH = "PROTHOUGHT_DB_PATH"
ENV_BASE_URL = "PROTHOUGHT_LLM_BASE_URL"
ENV_API_KEY = "PROTHOUGHT_LLM_API_KEY"
ENV_MODEL = "PROTHOUGHT_LLM_MODEL"
ENV_TIMEOUT = "PROTHOUGHT_LLM_TIMEOUT"
ENV_SYSTEM_PROMPT = "PROTHOUGHT_SYSTEM_PROMPT"


def default_db_path() -> Path:
    return Path.home() / DB_FILENAME


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    """Positive float seconds, or None for no timeout."""
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{ENV_TIMEOUT} must be a number of seconds, got {raw!r}")
    return value if value > 0 else None


@dataclass(frozen=True)
class LLMConfig:
    """Connection settings for an OpenAI-compatible chat endpoint."""
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    model: Optional[str] = None  # None: pick from the endpoint's model list
    timeout: Optional[float] = None
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LLMConfig":
        env = os.environ if environ is None else environ
        return cls(
            base_url=(env.get(ENV_BASE_URL) or DEFAULT_BASE_URL).rstrip("/"),
            api_key=env.get(ENV_API_KEY) or None,
            model=env.get(ENV_MODEL) or None,
            timeout=_parse_timeout(env.get(ENV_TIMEOUT)),
            system_prompt=env.get(ENV_SYSTEM_PROMPT) or DEFAULT_SYSTEM_PROMPT,
        )


@dataclass(frozen=True)
class JournalConfig:
    """Complete journal configuration."""
    db_path: Path = field(default_factory=default_db_path)
    llm: LLMConfig = field(default_factory=LLMConfig)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        db_path: Optional[Path] = None,
    ) -> "JournalConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read (defaults to os.environ)
            db_path: Explicit database path, overrides PROTHOUGHT_DB_PATH
        """
        env = os.environ if environ is None else environ
        if db_path is None:
            raw = env.get(ENV_DB_PATH)
            db_path = Path(raw) if raw else default_db_path()
        return cls(db_path=Path(db_path).expanduser(), llm=LLMConfig.from_env(env))
