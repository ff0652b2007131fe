"""
Provider protocol for language model completion.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CompletionProvider(Protocol):
    """
    Anything that can turn a prompt into generated text.

    Implementations must raise ``SummarizationError`` for every failure
    (network, HTTP status, malformed response) so callers handle a single
    error type.

    Example implementation:
        class EchoCompletion:
            def complete(self, prompt: str, system_prompt: str) -> str:
                return prompt

            def list_models(self) -> list[str]:
                return ["echo"]
    """

    def complete(self, prompt: str, system_prompt: str) -> str:
        """Return the model's reply to prompt."""
        ...

    def list_models(self) -> list[str]:
        """Return identifiers of the models the endpoint serves."""
        ...
