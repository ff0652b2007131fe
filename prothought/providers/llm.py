"""
Completion provider for OpenAI-compatible chat APIs.

Works with a local Ollama server (the default), OpenAI itself, or any
server that implements ``/models`` and ``/chat/completions``.
"""

import logging
from typing import Optional

import requests

from ..config import LLMConfig
from ..errors import SummarizationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3"
DEFAULT_MODEL_FAMILY = "llama3"


class OpenAICompatibleClient:
    """
    Chat completion client for an OpenAI-compatible endpoint.

    One attempt per request; failures are raised as ``SummarizationError``
    and never retried.

    Authentication: ``Authorization: Bearer <api_key>`` is sent only when
    an API key is configured (Ollama ignores it).
    """

    def __init__(self, config: LLMConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self._session = session or requests.Session()
        self._model: Optional[str] = config.model

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> dict:
        """Send a request and return the decoded JSON object."""
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.config.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise SummarizationError(f"Cannot reach language model at {self.base_url}: {e}") from e

        if not response.ok:
            detail = response.text[:200] if response.text else ""
            raise SummarizationError(
                f"LLM request failed: HTTP {response.status_code} from {url}. {detail}".rstrip()
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SummarizationError(f"LLM returned invalid JSON from {url}") from e
        if not isinstance(data, dict):
            raise SummarizationError(f"Unexpected LLM response format from {url}")
        return data

    def list_models(self) -> list[str]:
        """Model identifiers advertised by the endpoint, in listed order."""
        data = self._request("GET", "/models")
        entries = data.get("data")
        if not isinstance(entries, list):
            raise SummarizationError("Unexpected model list format: missing 'data'")
        return [m["id"] for m in entries if isinstance(m, dict) and m.get("id")]

    def resolve_model(self) -> str:
        """
        The model to use for completions.

        Uses the configured model if set. Otherwise picks the first listed
        model in the default family, then the first listed model, then
        DEFAULT_MODEL if the endpoint cannot list models at all.
        """
        if self._model:
            return self._model

        try:
            models = self.list_models()
        except SummarizationError as e:
            logger.warning("Could not list models, using %s: %s", DEFAULT_MODEL, e)
            models = []

        preferred = [m for m in models if m.startswith(DEFAULT_MODEL_FAMILY)]
        if preferred:
            self._model = preferred[0]
        elif models:
            self._model = models[0]
        else:
            self._model = DEFAULT_MODEL
        logger.debug("Resolved model: %s", self._model)
        return self._model

    def complete(self, prompt: str, system_prompt: str) -> str:
        """Send a system + user message pair and return the reply text."""
        model = self.resolve_model()
        data = self._request(
            "POST",
            "/chat/completions",
            json={
                "model": model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
            },
        )

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise SummarizationError(f"Unexpected LLM response format (model={model}): no choices")
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise SummarizationError(f"Unexpected LLM response format (model={model}): no message content")
        return content

    def close(self) -> None:
        self._session.close()
