"""
Deal Hunter — OpenAI adapter

Chat Completions over httpx. The same request shape is reused by any
OpenAI-compatible vendor (see perplexity.py).
"""

from __future__ import annotations

from typing import Any

import structlog

from deal_hunter.config import ProviderName, settings
from deal_hunter.errors import MalformedResponse
from deal_hunter.providers.base import SYSTEM_PROMPT, HTTPProviderAdapter

logger = structlog.get_logger(__name__)


class ChatCompletionsAdapter(HTTPProviderAdapter):
    """Adapter for OpenAI-compatible `POST {base_url}/chat/completions` APIs."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float | None = None,
    ) -> None:
        super().__init__(api_key, model, timeout)
        self._base_url = base_url.rstrip("/")

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": settings.PROVIDER_TEMPERATURE,
            "max_tokens": settings.PROVIDER_MAX_TOKENS,
        }

    async def call(self, prompt: str) -> str:
        data = await self._post_json(
            f"{self._base_url}/chat/completions",
            payload=self._payload(prompt),
            headers={"Authorization": f"Bearer {self._api_key}"},
        )

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponse(f"{self.name.value} response has no message content") from e

        logger.info(
            "provider_call_complete",
            provider=self.name.value,
            model=self._model,
            response_chars=len(text or ""),
        )
        return text or ""


class OpenAIAdapter(ChatCompletionsAdapter):
    """OpenAI chat completions."""

    name = ProviderName.OPENAI

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            api_key,
            model or settings.OPENAI_MODEL,
            base_url or settings.OPENAI_BASE_URL,
            timeout,
        )
