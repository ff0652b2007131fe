"""
prothought: a personal command-line journal.

Quick Start:
    from prothought import Journal, JournalConfig

    with Journal(JournalConfig.from_env()) as journal:
        journal.log("Fixed the login bug #work #bugfix")
        journal.list_for_period(["lastweek"], marker="work")
        journal.retract_last()

CLI Usage:
    prothought Fixed the login bug #work
    prothought summarize lastweek '#work'
    prothought conclude today
    prothought nvm

Environment Variables:
    PROTHOUGHT_DB_PATH        - Journal database (default: ~/.prothought.db)
    PROTHOUGHT_LLM_BASE_URL   - OpenAI-compatible endpoint (default: local Ollama)
    PROTHOUGHT_LLM_API_KEY    - Bearer token, if the endpoint needs one
    PROTHOUGHT_LLM_MODEL      - Model name (default: picked from the endpoint)
    PROTHOUGHT_LLM_TIMEOUT    - Request timeout in seconds (default: none)
    PROTHOUGHT_VERBOSE        - Set to 1 for debug logging
"""

from .api import Journal, RetractResult, RetractStatus
from .config import JournalConfig, LLMConfig
from .errors import InvalidPeriod, ProthoughtError, StorageError, SummarizationError
from .markers import extract_hashtags
from .periods import Period, resolve_period
from .types import Thought

__version__ = "0.1.0"

__all__ = [
    "Journal",
    "JournalConfig",
    "LLMConfig",
    "RetractResult",
    "RetractStatus",
    "Thought",
    "Period",
    "resolve_period",
    "extract_hashtags",
    "ProthoughtError",
    "InvalidPeriod",
    "StorageError",
    "SummarizationError",
]
