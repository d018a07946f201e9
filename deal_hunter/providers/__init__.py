"""Deal Hunter — LLM provider adapters."""

from __future__ import annotations

from deal_hunter.providers.base import HTTPProviderAdapter, ProviderAdapter
from deal_hunter.providers.claude import ClaudeAdapter
from deal_hunter.providers.gemini import GeminiAdapter
from deal_hunter.providers.openai_chat import ChatCompletionsAdapter, OpenAIAdapter
from deal_hunter.providers.perplexity import PerplexityAdapter
from deal_hunter.providers.prompt import build_deal_prompt

__all__ = [
    "ChatCompletionsAdapter",
    "ClaudeAdapter",
    "GeminiAdapter",
    "HTTPProviderAdapter",
    "OpenAIAdapter",
    "PerplexityAdapter",
    "ProviderAdapter",
    "build_deal_prompt",
]
