"""
Deal Hunter — Google Gemini adapter

`POST {base_url}/models/{model}:generateContent` over httpx, authenticated
with the x-goog-api-key header.
"""

from __future__ import annotations

from typing import Any

import structlog

from deal_hunter.config import ProviderName, settings
from deal_hunter.errors import MalformedResponse
from deal_hunter.providers.base import SYSTEM_PROMPT, HTTPProviderAdapter

logger = structlog.get_logger(__name__)


class GeminiAdapter(HTTPProviderAdapter):
    """Gemini generateContent."""

    name = ProviderName.GEMINI

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(api_key, model or settings.GEMINI_MODEL, timeout)
        self._base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": settings.PROVIDER_TEMPERATURE,
                "maxOutputTokens": settings.PROVIDER_MAX_TOKENS,
            },
        }

    async def call(self, prompt: str) -> str:
        data = await self._post_json(
            f"{self._base_url}/models/{self._model}:generateContent",
            payload=self._payload(prompt),
            headers={"x-goog-api-key": self._api_key},
        )

        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise MalformedResponse("gemini response has no candidate content") from e

        logger.info(
            "provider_call_complete",
            provider=self.name.value,
            model=self._model,
            response_chars=len(text),
        )
        return text
