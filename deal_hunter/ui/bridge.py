"""
Deal Hunter — UI channel

The only surface the UI talks to. Mirrors the four cross-boundary
operations: search-deals, get-settings, save-settings and check-api-key.
Payloads are plain camelCase dicts, as they would cross an IPC boundary.
The UI never touches providers or settings storage directly.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from deal_hunter.config import ALL_CATEGORIES, ProviderName
from deal_hunter.engine.mock_generator import MockDealGenerator
from deal_hunter.errors import SettingsSaveFailure
from deal_hunter.pipeline.orchestrator import SearchOrchestrator, SearchResult
from deal_hunter.pipeline.settings_store import AppSettings, SettingsStore
from deal_hunter.providers.registry import ProviderConfig, build_provider_config

logger = structlog.get_logger(__name__)


class DealHunterBridge:
    """
    Owns the current provider configuration and the last result set.

    Usage:
        bridge = await DealHunterBridge.create(SettingsStore(session_factory))
        deals = await bridge.search_deals("tv", "Electronics")
    """

    def __init__(
        self,
        store: SettingsStore,
        generator: MockDealGenerator | None = None,
    ) -> None:
        self._store = store
        self._generator = generator or MockDealGenerator()
        self._app_settings = AppSettings()
        self._orchestrator = SearchOrchestrator(
            build_provider_config(self._app_settings), self._generator
        )
        self.last_result: SearchResult | None = None

    @classmethod
    async def create(
        cls,
        store: SettingsStore,
        generator: MockDealGenerator | None = None,
    ) -> DealHunterBridge:
        """Build a bridge initialized from persisted settings."""
        bridge = cls(store, generator)
        await bridge.reload()
        return bridge

    @property
    def provider_config(self) -> ProviderConfig:
        return self._orchestrator.config

    async def reload(self) -> None:
        """Re-read settings and rebuild provider adapters (never mutated in place)."""
        self._app_settings = await self._store.load()
        self._orchestrator = SearchOrchestrator(
            build_provider_config(self._app_settings), self._generator
        )

    # -----------------------------------------------------------------------
    # Channel operations
    # -----------------------------------------------------------------------

    async def search_deals(
        self, query: str = "", category: str = ALL_CATEGORIES
    ) -> list[dict[str, Any]]:
        """search-deals(query, category) -> Deal[]"""
        result = await self._orchestrator.run(query, category or ALL_CATEGORIES)
        self.last_result = result
        return [deal.to_wire() for deal in result.deals]

    async def get_settings(self) -> dict[str, Any]:
        """get-settings() -> Settings, with API keys masked."""
        return SettingsStore.masked(self._app_settings)

    async def save_settings(self, payload: dict[str, Any]) -> dict[str, Any]:
        """save-settings(Settings) -> {success, error?}"""
        # A payload without aiProvider keeps the current selection
        merged = {"aiProvider": self._app_settings.active_provider.value, **payload}
        try:
            new_settings = AppSettings.model_validate(merged)
        except ValidationError as e:
            logger.warning("settings_payload_invalid", error_count=e.error_count())
            return {"success": False, "error": f"Invalid settings: {e.errors()[0]['msg']}"}

        try:
            await self._store.save(new_settings)
        except SettingsSaveFailure as e:
            return {"success": False, "error": str(e)}

        await self.reload()
        return {"success": True}

    async def check_api_key(self, provider: str) -> dict[str, bool]:
        """check-api-key(provider) -> {hasKey}"""
        try:
            name = ProviderName(provider)
        except ValueError:
            return {"hasKey": False}
        return {"hasKey": self.provider_config.has_key(name)}
