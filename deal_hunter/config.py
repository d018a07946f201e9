"""
Deal Hunter — Configuration & Constants

Every provider endpoint, model id, default value and mock-data table lives
here. No hardcoded values in business logic.

Usage:
    from deal_hunter.config import settings
"""

from __future__ import annotations

from enum import Enum

from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ProviderName(str, Enum):
    """Selectable deal sources. MOCK is the built-in offline generator."""
    MOCK = "mock"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    PERPLEXITY = "perplexity"


# Providers backed by a vendor API (everything except the mock generator)
LIVE_PROVIDERS: tuple[ProviderName, ...] = (
    ProviderName.OPENAI,
    ProviderName.ANTHROPIC,
    ProviderName.GEMINI,
    ProviderName.PERPLEXITY,
)


class SortKey(str, Enum):
    """Presentation sort orders, values match the UI select options."""
    DISCOUNT = "discount"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"
    SAVINGS = "savings"


class ViewMode(str, Enum):
    GRID = "grid"
    TABLE = "table"


class ResultSource(str, Enum):
    """Where a result set came from."""
    LIVE = "live"
    MOCK = "mock"


ALL_CATEGORIES = "all"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Central configuration for Deal Hunter.

    Loads from environment variables with fallback defaults. API keys set
    here are only used when the settings store has no key for a provider.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # -----------------------------------------------------------------------
    # Environment fallback API keys
    # -----------------------------------------------------------------------
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    PERPLEXITY_API_KEY: str = ""

    # Provider used on first launch, before anything is saved
    DEFAULT_PROVIDER: ProviderName = ProviderName.MOCK

    # -----------------------------------------------------------------------
    # Persisted settings (key/value table)
    # -----------------------------------------------------------------------
    DATABASE_URL: str = "sqlite+aiosqlite:///deal_hunter.db"

    # -----------------------------------------------------------------------
    # Provider endpoints & models
    # -----------------------------------------------------------------------
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"

    ANTHROPIC_MODEL: str = "claude-sonnet-4-5"
    ANTHROPIC_WEB_SEARCH_ENABLED: bool = True
    ANTHROPIC_WEB_SEARCH_MAX_USES: int = 5

    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.0-flash"

    PERPLEXITY_BASE_URL: str = "https://api.perplexity.ai"
    PERPLEXITY_MODEL: str = "sonar"

    PROVIDER_MAX_TOKENS: int = 4096
    PROVIDER_TEMPERATURE: float = 0.7
    # A hung provider call falls back to mock data after this many seconds
    PROVIDER_TIMEOUT_SECONDS: float = 60.0

    # Deal count requested from a live provider
    PROMPT_MIN_DEALS: int = 15
    PROMPT_MAX_DEALS: int = 20

    # -----------------------------------------------------------------------
    # Mock generator tables
    # -----------------------------------------------------------------------
    DEAL_CATEGORIES: list[str] = [
        "Electronics",
        "Home & Kitchen",
        "Fashion",
        "Toys & Games",
        "Sports",
        "Books",
    ]
    DEAL_BRANDS: list[str] = [
        "Samsung", "Sony", "Apple", "LG", "Dell",
        "HP", "Nike", "Adidas", "Cuisinart", "KitchenAid",
    ]
    DEAL_RETAILERS: list[str] = ["Amazon", "Best Buy", "Walmart", "Target", "Newegg"]
    PRODUCT_NAMES: dict[str, list[str]] = {
        "Electronics": [
            "4K Smart TV", "Wireless Headphones", "Laptop", "Tablet",
            "Smart Watch", "Camera", "Gaming Console",
        ],
        "Home & Kitchen": [
            "Coffee Maker", "Blender", "Air Fryer", "Vacuum Cleaner",
            "Stand Mixer", "Toaster Oven",
        ],
        "Fashion": [
            "Winter Jacket", "Running Shoes", "Handbag", "Sunglasses",
            "Watch", "Sneakers",
        ],
        "Toys & Games": [
            "Board Game", "Action Figure", "LEGO Set", "Puzzle",
            "Doll House", "Remote Control Car",
        ],
        "Sports": [
            "Yoga Mat", "Dumbbells", "Treadmill", "Bike",
            "Fitness Tracker", "Tennis Racket",
        ],
        "Books": [
            "Bestseller Novel", "Cookbook", "Biography", "Self-Help Book",
            "Science Fiction",
        ],
    }
    # Product list used when the requested category has no table of its own
    FALLBACK_PRODUCT_CATEGORY: str = "Electronics"

    # Inclusive ranges
    MOCK_MIN_DEALS: int = 15
    MOCK_MAX_DEALS: int = 34
    MOCK_PRICE_MIN: int = 100
    MOCK_PRICE_MAX: int = 999
    MOCK_DISCOUNT_MIN: int = 20
    MOCK_DISCOUNT_MAX: int = 79
    MOCK_RATING_MIN: float = 3.0
    MOCK_RATING_MAX: float = 5.0
    MOCK_REVIEWS_MIN: int = 100
    MOCK_REVIEWS_MAX: int = 5099
    MOCK_STOCK_MIN: int = 10
    MOCK_STOCK_MAX: int = 109
    MOCK_FREE_SHIPPING_PROBABILITY: float = 0.6
    MOCK_SHIPPING_FEE_MIN: float = 5.0
    MOCK_SHIPPING_FEE_MAX: float = 25.0

    # -----------------------------------------------------------------------
    # Response normalization defaults
    # -----------------------------------------------------------------------
    DEFAULT_TITLE: str = "Product"
    DEFAULT_CATEGORY: str = "General"
    DEFAULT_SELLER: str = "Amazon"
    DEFAULT_SHIPPING: str = "FREE"
    DEFAULT_RATING: str = "4.5"
    DEFAULT_PRICE: str = "0.00"
    DEFAULT_PRODUCT_URL: str = "#"
    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/300x300/0066cc/ffffff?text={text}"

    # -----------------------------------------------------------------------
    # Presentation
    # -----------------------------------------------------------------------
    LOW_STOCK_THRESHOLD: int = 30
    TABLE_TITLE_WIDTH: int = 32

    # -----------------------------------------------------------------------
    # Logging
    # -----------------------------------------------------------------------
    LOG_LEVEL: str = "WARNING"
    LOG_JSON: bool = False


# Singleton instance
settings = Settings()
