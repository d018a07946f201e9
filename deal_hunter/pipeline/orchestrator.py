"""
Deal Hunter — Search Orchestrator

Routes a search to the active provider and falls back to mock data on any
failure: missing key, network error, timeout or unparseable response.
A search therefore never fails. There is no retry and no partial result;
the fallback happens once, unconditionally.

Results are tagged with their source ("live" or "mock") so tests and logs
can tell a real provider answer from a silent fallback, even though the UI
renders both the same way.
"""

from __future__ import annotations

import asyncio

import structlog
from pydantic import BaseModel, ConfigDict, Field

from deal_hunter.config import ALL_CATEGORIES, ProviderName, ResultSource, settings
from deal_hunter.engine.mock_generator import MockDealGenerator
from deal_hunter.engine.parser import parse_deals
from deal_hunter.errors import MissingCredential, ProviderCallFailure
from deal_hunter.models.deal import Deal
from deal_hunter.providers.prompt import build_deal_prompt
from deal_hunter.providers.registry import ProviderConfig

logger = structlog.get_logger(__name__)


class SearchResult(BaseModel):
    """Deals plus where they came from."""

    model_config = ConfigDict(frozen=True)

    source: ResultSource
    provider: ProviderName
    deals: list[Deal] = Field(default_factory=list)
    # Why a live provider was not used (empty for mock-by-choice and live results)
    fallback_reason: str = ""


class SearchOrchestrator:
    """
    Runs one search against the configured provider.

    Usage:
        orchestrator = SearchOrchestrator(build_provider_config(app_settings))
        deals = await orchestrator.search("headphones", "Electronics")
    """

    def __init__(
        self,
        config: ProviderConfig,
        generator: MockDealGenerator | None = None,
        timeout: float | None = None,
    ) -> None:
        self._config = config
        self._generator = generator or MockDealGenerator()
        self._timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS

    @property
    def config(self) -> ProviderConfig:
        return self._config

    def _mock(self, query: str, category: str, reason: str = "") -> SearchResult:
        return SearchResult(
            source=ResultSource.MOCK,
            provider=self._config.active_provider,
            deals=self._generator.generate(query, category),
            fallback_reason=reason,
        )

    async def _call_live(self, query: str, category: str) -> list[Deal]:
        adapter = self._config.active_adapter()
        if adapter is None:
            raise MissingCredential(
                f"no API key configured for {self._config.active_provider.value}"
            )

        prompt = build_deal_prompt(query, category)
        try:
            text = await asyncio.wait_for(adapter.call(prompt), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise ProviderCallFailure(
                f"{adapter.name.value} timed out after {self._timeout}s"
            ) from e

        return parse_deals(text, category)

    async def run(self, query: str = "", category: str = ALL_CATEGORIES) -> SearchResult:
        """Search and return a tagged result. Never raises for provider failures."""
        provider = self._config.active_provider

        if provider == ProviderName.MOCK:
            return self._mock(query, category)

        try:
            deals = await self._call_live(query, category)
        except Exception as e:
            logger.warning(
                "search_fallback_to_mock",
                provider=provider.value,
                query=query,
                category=category,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._mock(query, category, reason=type(e).__name__)

        logger.info(
            "search_complete",
            provider=provider.value,
            query=query,
            category=category,
            deal_count=len(deals),
            source=ResultSource.LIVE.value,
        )
        return SearchResult(source=ResultSource.LIVE, provider=provider, deals=deals)

    async def search(self, query: str = "", category: str = ALL_CATEGORIES) -> list[Deal]:
        """Deals for a search, from the live provider or the mock fallback."""
        result = await self.run(query, category)
        return result.deals
