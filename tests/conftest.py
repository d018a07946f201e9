"""
Deal Hunter — Shared pytest Fixtures & Configuration

Provides common fixtures for all test modules:
- Temporary SQLite settings database (aiosqlite)
- Seeded mock deal generator with a frozen clock
- Deal factory for hand-built records
- Isolation from API keys in the developer's environment
"""

from __future__ import annotations

import random
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from deal_hunter.config import settings
from deal_hunter.engine.mock_generator import MockDealGenerator
from deal_hunter.main import create_db_engine
from deal_hunter.models.deal import Deal
from deal_hunter.pipeline.settings_store import SettingsStore

FROZEN_EPOCH = 1_700_000_000.0


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _no_env_api_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keys and endpoint overrides exported in the shell must not reach tests."""
    for field in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY", "PERPLEXITY_API_KEY"):
        monkeypatch.setattr(settings, field, "")
    monkeypatch.delenv("ANTHROPIC_BASE_URL", raising=False)


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'deal_hunter.db'}"


@pytest_asyncio.fixture
async def session_factory(
    database_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory bound to a fresh file-backed SQLite database.

    A file (not :memory:) lets tests reopen the same database through a new
    engine to check that settings survive a restart.
    """
    engine, factory = await create_db_engine(database_url)
    yield factory
    await engine.dispose()


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> SettingsStore:
    return SettingsStore(session_factory)


# ---------------------------------------------------------------------------
# Generator Fixtures
# ---------------------------------------------------------------------------


def make_generator(seed: int = 42) -> MockDealGenerator:
    return MockDealGenerator(rng=random.Random(seed), clock=lambda: FROZEN_EPOCH)


@pytest.fixture
def generator() -> MockDealGenerator:
    """Deterministic generator: seeded RNG, frozen clock."""
    return make_generator()


@pytest.fixture
def generator_factory() -> Callable[[int], MockDealGenerator]:
    """Build independent generators that replay the same sequence for the same seed."""
    return make_generator


@pytest.fixture
def deal_factory() -> Callable[..., Deal]:
    """Build a Deal with sensible defaults; keyword overrides use snake_case names."""

    def _make(**overrides) -> Deal:
        data = {
            "id": "deal-1",
            "title": "Sony 4K TV",
            "description": "Black Friday deal on Sony 4K TV",
            "category": "Electronics",
            "original_price": "100.00",
            "sale_price": "80.00",
            "savings": "20.00",
            "discount_percent": 20,
            "rating": "4.5",
            "reviews": 120,
            "stock": 50,
            "seller": "Amazon",
            "shipping_cost": "FREE",
            "product_url": "#",
            "image_url": "https://example.com/tv.png",
        }
        data.update(overrides)
        return Deal(**data)

    return _make
