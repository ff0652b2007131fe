"""
Language model providers.
"""

from .base import CompletionProvider
from .llm import OpenAICompatibleClient

__all__ = ["CompletionProvider", "OpenAICompatibleClient"]
