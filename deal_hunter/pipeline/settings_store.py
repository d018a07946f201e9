"""
Deal Hunter — Settings Store

Persists the active provider and one API key per provider in the
`app_settings` key/value table so they survive restarts.

Keys:
    aiProvider            -> active provider name
    apiKeys.<provider>    -> API key for that provider

Saving a blank key for a provider keeps whatever key was stored before;
only a non-empty value overwrites.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from deal_hunter.config import LIVE_PROVIDERS, ProviderName, settings
from deal_hunter.errors import SettingsSaveFailure
from deal_hunter.models.app_setting import AppSetting

logger = structlog.get_logger(__name__)

PROVIDER_KEY = "aiProvider"
API_KEY_PREFIX = "apiKeys."


class AppSettings(BaseModel):
    """Provider selection plus per-provider API keys."""

    model_config = ConfigDict(populate_by_name=True)

    active_provider: ProviderName = Field(
        default_factory=lambda: settings.DEFAULT_PROVIDER, alias="aiProvider"
    )
    api_keys: dict[ProviderName, str] = Field(default_factory=dict, alias="apiKeys")

    @field_validator("api_keys", mode="before")
    @classmethod
    def drop_empty_keys(cls, v: object) -> object:
        """None or blank entries mean 'no change' and are dropped."""
        if not isinstance(v, dict):
            return v
        return {
            provider: key.strip()
            for provider, key in v.items()
            if isinstance(key, str) and key.strip()
        }


def _mask(key: str) -> str:
    return "•" * 8 + key[-4:] if len(key) > 4 else "•" * 8


class SettingsStore:
    """
    Async key/value persistence for AppSettings.

    Usage:
        store = SettingsStore(session_factory)
        app_settings = await store.load()
        await store.save(app_settings)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load(self) -> AppSettings:
        """Read persisted settings. Missing or unknown values fall back to defaults."""
        async with self._session_factory() as session:
            result = await session.execute(select(AppSetting))
            values = {row.key: row.value for row in result.scalars().all()}

        active = settings.DEFAULT_PROVIDER
        raw_provider = values.get(PROVIDER_KEY)
        if raw_provider is not None:
            try:
                active = ProviderName(raw_provider)
            except ValueError:
                logger.warning(
                    "settings_unknown_provider",
                    stored_value=raw_provider,
                    fallback=active.value,
                )

        api_keys: dict[ProviderName, str] = {}
        for provider in LIVE_PROVIDERS:
            key = values.get(f"{API_KEY_PREFIX}{provider.value}", "")
            if key:
                api_keys[provider] = key

        logger.debug(
            "settings_loaded",
            active_provider=active.value,
            providers_with_keys=sorted(p.value for p in api_keys),
        )
        return AppSettings(active_provider=active, api_keys=api_keys)

    async def save(self, new_settings: AppSettings) -> None:
        """
        Persist settings immediately.

        Raises:
            SettingsSaveFailure: If the database write fails.
        """
        try:
            async with self._session_factory() as session:
                await self._put(session, PROVIDER_KEY, new_settings.active_provider.value)
                for provider, key in new_settings.api_keys.items():
                    if provider == ProviderName.MOCK or not key:
                        continue
                    await self._put(session, f"{API_KEY_PREFIX}{provider.value}", key)
                await session.commit()

        except SQLAlchemyError as e:
            logger.error(
                "settings_save_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise SettingsSaveFailure(f"could not save settings: {e}") from e

        logger.info(
            "settings_saved",
            active_provider=new_settings.active_provider.value,
            keys_updated=sorted(p.value for p in new_settings.api_keys),
        )

    @staticmethod
    async def _put(session: AsyncSession, key: str, value: str) -> None:
        row = await session.get(AppSetting, key)
        if row is None:
            session.add(AppSetting(key=key, value=value))
        else:
            row.value = value

    @staticmethod
    def masked(app_settings: AppSettings) -> dict[str, object]:
        """Wire form of settings with API keys masked to their last four characters."""
        return {
            "aiProvider": app_settings.active_provider.value,
            "apiKeys": {
                provider.value: _mask(key)
                for provider, key in app_settings.api_keys.items()
            },
        }
