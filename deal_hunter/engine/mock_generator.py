"""
Deal Hunter — Mock Deal Generator

Offline data source. Used directly when the mock provider is selected and
as the fallback whenever a live provider is unconfigured or fails.

Prices are computed forward from the original price and discount, so
salePrice = originalPrice × (1 − discount/100) and
savings = originalPrice − salePrice hold exactly for every mock deal.
"""

from __future__ import annotations

import random
import time
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Iterable

import structlog

from deal_hunter.config import ALL_CATEGORIES, settings
from deal_hunter.engine.parser import placeholder_image_url
from deal_hunter.models.deal import Deal

logger = structlog.get_logger(__name__)

_TWO_DP = Decimal("0.01")
_HUNDRED = Decimal("100")


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(_TWO_DP, rounding=ROUND_HALF_UP)


def filter_deals(deals: Iterable[Deal], query: str) -> list[Deal]:
    """
    Keep deals whose title, description or category contains the query.

    Case-insensitive substring match on the query as typed, surrounding
    spaces included. A blank query keeps everything.
    """
    if not query or not query.strip():
        return list(deals)
    needle = query.lower()
    return [
        deal for deal in deals
        if needle in deal.title.lower()
        or needle in deal.description.lower()
        or needle in deal.category.lower()
    ]


class MockDealGenerator:
    """
    Produces plausible random deals from fixed lookup tables.

    Usage:
        generator = MockDealGenerator(rng=random.Random(7))
        deals = generator.generate("laptop", "Electronics")
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock

    def _make_deal(self, index: int, category: str, timestamp_ms: int) -> Deal:
        rng = self._rng

        original = Decimal(rng.randint(settings.MOCK_PRICE_MIN, settings.MOCK_PRICE_MAX))
        discount = rng.randint(settings.MOCK_DISCOUNT_MIN, settings.MOCK_DISCOUNT_MAX)
        sale = _quantize(original * (_HUNDRED - discount) / _HUNDRED)
        savings = original - sale

        if category and category != ALL_CATEGORIES:
            deal_category = category
        else:
            deal_category = rng.choice(settings.DEAL_CATEGORIES)
        brand = rng.choice(settings.DEAL_BRANDS)
        products = settings.PRODUCT_NAMES.get(
            deal_category, settings.PRODUCT_NAMES[settings.FALLBACK_PRODUCT_CATEGORY]
        )
        product_name = rng.choice(products)
        title = f"{brand} {product_name}"

        if rng.random() < settings.MOCK_FREE_SHIPPING_PROBABILITY:
            shipping = "FREE"
        else:
            fee = rng.uniform(settings.MOCK_SHIPPING_FEE_MIN, settings.MOCK_SHIPPING_FEE_MAX)
            shipping = f"${fee:.2f}"

        return Deal(
            id=f"deal-{timestamp_ms}-{index}",
            title=title,
            description=f"Amazing Black Friday deal on {title}. Limited time offer!",
            category=deal_category,
            original_price=str(_quantize(original)),
            sale_price=str(sale),
            savings=str(_quantize(savings)),
            discount_percent=discount,
            rating=f"{rng.uniform(settings.MOCK_RATING_MIN, settings.MOCK_RATING_MAX):.1f}",
            reviews=rng.randint(settings.MOCK_REVIEWS_MIN, settings.MOCK_REVIEWS_MAX),
            stock=rng.randint(settings.MOCK_STOCK_MIN, settings.MOCK_STOCK_MAX),
            seller=rng.choice(settings.DEAL_RETAILERS),
            shipping_cost=shipping,
            product_url=settings.DEFAULT_PRODUCT_URL,
            image_url=placeholder_image_url(product_name),
        )

    def generate_unfiltered(self, category: str = ALL_CATEGORIES) -> list[Deal]:
        """Draw a fresh batch of deals without applying any query filter."""
        count = self._rng.randint(settings.MOCK_MIN_DEALS, settings.MOCK_MAX_DEALS)
        timestamp_ms = int(self._clock() * 1000)
        return [self._make_deal(i, category, timestamp_ms) for i in range(count)]

    def generate(self, query: str = "", category: str = ALL_CATEGORIES) -> list[Deal]:
        """
        Generate deals for a search.

        The query filter runs after generation, so a query matching none of
        the generated titles legitimately returns an empty list.
        """
        candidates = self.generate_unfiltered(category)
        deals = filter_deals(candidates, query)

        logger.info(
            "mock_deals_generated",
            query=query,
            category=category,
            generated=len(candidates),
            returned=len(deals),
            source="mock",
        )
        return deals
