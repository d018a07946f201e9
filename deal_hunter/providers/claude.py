"""
Deal Hunter — Anthropic Claude adapter

Uses the official anthropic SDK. This is the one provider with web search
enabled, so Claude can look up live prices before answering. With search
on, the response interleaves tool-use and text blocks; only text blocks
are returned.
"""

from __future__ import annotations

from typing import Any

import anthropic
import structlog

from deal_hunter.config import ProviderName, settings
from deal_hunter.errors import ProviderCallFailure
from deal_hunter.providers.base import SYSTEM_PROMPT, ProviderAdapter

logger = structlog.get_logger(__name__)


class ClaudeAdapter(ProviderAdapter):
    """Claude messages API with the server-side web search tool."""

    name = ProviderName.ANTHROPIC

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        timeout: float | None = None,
        web_search: bool | None = None,
    ) -> None:
        super().__init__(api_key, model or settings.ANTHROPIC_MODEL, timeout)
        self._web_search = (
            web_search if web_search is not None else settings.ANTHROPIC_WEB_SEARCH_ENABLED
        )

    def _tools(self) -> list[dict[str, Any]]:
        if not self._web_search:
            return []
        return [{
            "type": "web_search_20250305",
            "name": "web_search",
            "max_uses": settings.ANTHROPIC_WEB_SEARCH_MAX_USES,
        }]

    async def call(self, prompt: str) -> str:
        request: dict[str, Any] = {
            "model": self._model,
            "max_tokens": settings.PROVIDER_MAX_TOKENS,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": prompt}],
        }
        tools = self._tools()
        if tools:
            request["tools"] = tools

        try:
            # No SDK-level retries; a failed call falls back to mock data once
            async with anthropic.AsyncAnthropic(
                api_key=self._api_key,
                timeout=self._timeout,
                max_retries=0,
            ) as client:
                response = await client.messages.create(**request)
        except anthropic.APIError as e:
            logger.warning(
                "provider_request_error",
                provider=self.name.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ProviderCallFailure(f"anthropic request failed: {e}") from e

        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )

        logger.info(
            "provider_call_complete",
            provider=self.name.value,
            model=self._model,
            web_search=self._web_search,
            response_chars=len(text),
        )
        return text
