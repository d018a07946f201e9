"""
Deal Hunter — Application Entrypoint

Configures structlog, opens the settings database, builds the UI channel and
runs one command against it.

Run via:
    python -m deal_hunter.main search "headphones" --category Electronics --sort price-low
    python -m deal_hunter.main browse --view table
    python -m deal_hunter.main settings save --provider openai --api-key openai=sk-...
    python -m deal_hunter.main settings show
    python -m deal_hunter.main check-key anthropic
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from deal_hunter import __version__
from deal_hunter.config import (
    ALL_CATEGORIES,
    LIVE_PROVIDERS,
    ProviderName,
    SortKey,
    ViewMode,
    settings,
)
from deal_hunter.engine.sorting import sort_deals
from deal_hunter.models.base import Base
from deal_hunter.models.deal import Deal
from deal_hunter.pipeline.settings_store import SettingsStore
from deal_hunter.ui.bridge import DealHunterBridge
from deal_hunter.ui.render import render_deals


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def _configure_logging(log_level: str = "WARNING", json_output: bool = False) -> None:
    """
    Set up structured logging on stderr so stdout stays clean for results.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        json_output: Render JSON lines instead of the console format.
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    # stdlib logging for third-party libraries (httpx, sqlalchemy)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Database Setup
# ---------------------------------------------------------------------------


async def create_db_engine(
    database_url: str | None = None,
) -> tuple[Any, async_sessionmaker[AsyncSession]]:
    """
    Create the async engine and session factory, and ensure tables exist.

    Returns:
        (engine, session_factory) tuple.
    """
    logger = structlog.get_logger(__name__)
    url = database_url or settings.DATABASE_URL

    engine = create_async_engine(url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    logger.debug("database_engine_ready", database_url=url)
    return engine, session_factory


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _provider_key_pair(value: str) -> tuple[str, str]:
    provider, sep, key = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError("expected PROVIDER=KEY")
    if provider not in {p.value for p in LIVE_PROVIDERS}:
        raise argparse.ArgumentTypeError(f"unknown provider '{provider}'")
    return provider, key


def _add_display_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--sort",
        default=SortKey.DISCOUNT.value,
        choices=[k.value for k in SortKey],
        help="Result order (default: discount).",
    )
    parser.add_argument(
        "--view",
        default=ViewMode.GRID.value,
        choices=[v.value for v in ViewMode],
        help="Layout: grid cards or table rows (default: grid).",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="deal-hunter",
        description="Search Black Friday deals through an LLM provider or the offline generator.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  deal-hunter search "air fryer" --category "Home & Kitchen"
  deal-hunter browse --sort savings --view table
  deal-hunter settings save --provider gemini --api-key gemini=AIza...
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Search for deals.")
    search.add_argument("query", nargs="?", default="", help="Free-text search (optional).")
    search.add_argument(
        "--category",
        default=ALL_CATEGORIES,
        help=f"Category filter: all | {' | '.join(settings.DEAL_CATEGORIES)} (default: all).",
    )
    _add_display_options(search)

    browse = commands.add_parser("browse", help="Browse all deals (empty query, all categories).")
    _add_display_options(browse)

    settings_cmd = commands.add_parser("settings", help="Show or save provider settings.")
    settings_actions = settings_cmd.add_subparsers(dest="action", required=True)
    settings_actions.add_parser("show", help="Print the active provider and masked keys.")
    save = settings_actions.add_parser("save", help="Persist provider selection and API keys.")
    save.add_argument(
        "--provider",
        choices=[p.value for p in ProviderName],
        default=None,
        help="Active provider (default: keep current).",
    )
    save.add_argument(
        "--api-key",
        dest="api_keys",
        action="append",
        default=[],
        type=_provider_key_pair,
        metavar="PROVIDER=KEY",
        help="API key for a provider; repeatable. An empty KEY keeps the stored key.",
    )

    check = commands.add_parser("check-key", help="Report whether a provider has an API key.")
    check.add_argument("provider", help="Provider name.")

    return parser.parse_args(argv)


async def _run_search(
    bridge: DealHunterBridge,
    query: str,
    category: str,
    sort_key: str,
    view: str,
) -> int:
    try:
        wire_deals = await bridge.search_deals(query, category)
    except Exception as e:
        structlog.get_logger(__name__).error(
            "search_failed", error=str(e), error_type=type(e).__name__
        )
        print("Error searching for deals", file=sys.stderr)
        return 1

    deals = [Deal.model_validate(d) for d in wire_deals]
    print(render_deals(sort_deals(deals, sort_key), view, category))
    return 0


async def dispatch(args: argparse.Namespace, bridge: DealHunterBridge) -> int:
    """Run one parsed command against the bridge. Returns the exit code."""
    if args.command == "search":
        return await _run_search(bridge, args.query, args.category, args.sort, args.view)

    if args.command == "browse":
        return await _run_search(bridge, "", ALL_CATEGORIES, args.sort, args.view)

    if args.command == "settings" and args.action == "show":
        current = await bridge.get_settings()
        print(f"Active provider: {current['aiProvider']}")
        for provider in LIVE_PROVIDERS:
            masked = current["apiKeys"].get(provider.value, "(not set)")
            print(f"  {provider.value:<11} {masked}")
        return 0

    if args.command == "settings" and args.action == "save":
        payload: dict[str, Any] = {"apiKeys": dict(args.api_keys)}
        if args.provider:
            payload["aiProvider"] = args.provider
        outcome = await bridge.save_settings(payload)
        if not outcome["success"]:
            print(f"Warning: {outcome['error']}", file=sys.stderr)
            return 1
        print("Settings saved.")
        return 0

    if args.command == "check-key":
        outcome = await bridge.check_api_key(args.provider)
        print(f"{args.provider}: {'key configured' if outcome['hasKey'] else 'no key'}")
        return 0 if outcome["hasKey"] else 1

    return 2


# ---------------------------------------------------------------------------
# Application Startup
# ---------------------------------------------------------------------------


async def main(argv: Sequence[str] | None = None) -> int:
    """
    Application entrypoint.

    Execution order:
    1. Parse arguments and configure logging
    2. Open the settings database (creating tables on first run)
    3. Build the UI channel from persisted settings
    4. Run the command
    """
    args = parse_args(argv)
    _configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    logger = structlog.get_logger(__name__)

    logger.info("deal_hunter_startup", version=__version__, command=args.command)

    engine, session_factory = await create_db_engine()
    try:
        bridge = await DealHunterBridge.create(SettingsStore(session_factory))
        return await dispatch(args, bridge)
    finally:
        await engine.dispose()
        logger.info("deal_hunter_shutdown_complete")


def run() -> None:
    """Console-script entry."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
