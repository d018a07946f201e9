"""
Deal Hunter — Provider configuration

Builds the immutable provider configuration the search orchestrator runs
against. It is rebuilt from scratch after every settings save rather than
mutated, so the next search picks up new credentials without a restart.
"""

from __future__ import annotations

from typing import Callable, Mapping, NamedTuple

import structlog

from deal_hunter.config import LIVE_PROVIDERS, ProviderName, settings
from deal_hunter.pipeline.settings_store import AppSettings
from deal_hunter.providers.base import ProviderAdapter
from deal_hunter.providers.claude import ClaudeAdapter
from deal_hunter.providers.gemini import GeminiAdapter
from deal_hunter.providers.openai_chat import OpenAIAdapter
from deal_hunter.providers.perplexity import PerplexityAdapter

logger = structlog.get_logger(__name__)

ADAPTER_FACTORIES: dict[ProviderName, Callable[[str], ProviderAdapter]] = {
    ProviderName.OPENAI: OpenAIAdapter,
    ProviderName.ANTHROPIC: ClaudeAdapter,
    ProviderName.GEMINI: GeminiAdapter,
    ProviderName.PERPLEXITY: PerplexityAdapter,
}

_ENV_KEYS: dict[ProviderName, str] = {
    ProviderName.OPENAI: "OPENAI_API_KEY",
    ProviderName.ANTHROPIC: "ANTHROPIC_API_KEY",
    ProviderName.GEMINI: "GEMINI_API_KEY",
    ProviderName.PERPLEXITY: "PERPLEXITY_API_KEY",
}


def resolve_api_key(app_settings: AppSettings, provider: ProviderName) -> str:
    """Stored key for `provider`, else the environment fallback, else ''."""
    stored = app_settings.api_keys.get(provider, "")
    if stored:
        return stored
    env_field = _ENV_KEYS.get(provider)
    return getattr(settings, env_field, "") if env_field else ""


class ProviderConfig(NamedTuple):
    """Active provider plus one adapter per provider that has a key."""

    active_provider: ProviderName
    adapters: Mapping[ProviderName, ProviderAdapter]

    def active_adapter(self) -> ProviderAdapter | None:
        """Adapter for the active provider; None for mock or a missing key."""
        return self.adapters.get(self.active_provider)

    def has_key(self, provider: ProviderName) -> bool:
        return provider in self.adapters


def build_provider_config(
    app_settings: AppSettings,
    factories: Mapping[ProviderName, Callable[[str], ProviderAdapter]] | None = None,
) -> ProviderConfig:
    """Construct adapters for every live provider with a usable API key."""
    factories = factories if factories is not None else ADAPTER_FACTORIES

    adapters: dict[ProviderName, ProviderAdapter] = {}
    for provider in LIVE_PROVIDERS:
        api_key = resolve_api_key(app_settings, provider)
        if api_key and provider in factories:
            adapters[provider] = factories[provider](api_key)

    logger.info(
        "provider_config_built",
        active_provider=app_settings.active_provider.value,
        configured=sorted(p.value for p in adapters),
    )
    return ProviderConfig(active_provider=app_settings.active_provider, adapters=adapters)
