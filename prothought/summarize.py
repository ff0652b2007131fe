"""
Summarization of a period's thoughts through a language model.
"""

import logging
from typing import Optional, Sequence

from .config import DEFAULT_SYSTEM_PROMPT
from .providers.base import CompletionProvider
from .types import Thought

logger = logging.getLogger(__name__)


def build_prompt(thoughts: Sequence[Thought]) -> str:
    """One '[timestamp] text' line per thought, in the order given."""
    return "\n".join(f"[{t.timestamp}] {t.text}" for t in thoughts)


class Summarizer:
    """Turns a list of thoughts into a single completion request."""

    def __init__(self, provider: CompletionProvider, system_prompt: str = DEFAULT_SYSTEM_PROMPT):
        self.provider = provider
        self.system_prompt = system_prompt

    def summarize(self, thoughts: Sequence[Thought]) -> Optional[str]:
        """
        Summarize thoughts, oldest first.

        Returns:
            The model's reply as given, or None when there is nothing to
            summarize (the provider is not called)

        Raises:
            SummarizationError: If the provider fails
        """
        if not thoughts:
            return None
        prompt = build_prompt(thoughts)
        logger.info("Summarizing %d thoughts (%d chars)", len(thoughts), len(prompt))
        return self.provider.complete(prompt, self.system_prompt)
