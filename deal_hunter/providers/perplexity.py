"""
Deal Hunter — Perplexity adapter

Perplexity exposes an OpenAI-compatible chat completions endpoint, so this
only swaps the base URL and model.
"""

from __future__ import annotations

from deal_hunter.config import ProviderName, settings
from deal_hunter.providers.openai_chat import ChatCompletionsAdapter


class PerplexityAdapter(ChatCompletionsAdapter):
    """Perplexity Sonar models."""

    name = ProviderName.PERPLEXITY

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(
            api_key,
            model or settings.PERPLEXITY_MODEL,
            base_url or settings.PERPLEXITY_BASE_URL,
            timeout,
        )
