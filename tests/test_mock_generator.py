"""Tests for the offline mock deal generator and query filter."""

from __future__ import annotations

import random
import re
from decimal import Decimal, ROUND_HALF_UP

import pytest

from deal_hunter.config import settings
from deal_hunter.engine.mock_generator import MockDealGenerator, filter_deals

TWO_DP = Decimal("0.01")


class TestGeneratedShape:
    @pytest.mark.parametrize("seed", range(10))
    def test_batch_size_in_range(self, generator_factory, seed: int) -> None:
        deals = generator_factory(seed).generate_unfiltered()
        assert settings.MOCK_MIN_DEALS <= len(deals) <= settings.MOCK_MAX_DEALS

    def test_price_invariants_hold_exactly(self, generator) -> None:
        """salePrice and savings are derived from originalPrice and the discount."""
        for deal in generator.generate_unfiltered():
            original = Decimal(deal.original_price)
            sale = Decimal(deal.sale_price)
            savings = Decimal(deal.savings)
            expected_sale = (original * (100 - deal.discount_percent) / 100).quantize(
                TWO_DP, rounding=ROUND_HALF_UP
            )

            assert sale == expected_sale
            assert savings == original - sale
            assert abs(original - sale - savings) <= Decimal("0.01")

    def test_fields_within_configured_ranges(self, generator) -> None:
        for deal in generator.generate_unfiltered():
            assert settings.MOCK_PRICE_MIN <= Decimal(deal.original_price) <= settings.MOCK_PRICE_MAX
            assert settings.MOCK_DISCOUNT_MIN <= deal.discount_percent <= settings.MOCK_DISCOUNT_MAX
            assert settings.MOCK_RATING_MIN <= float(deal.rating) <= settings.MOCK_RATING_MAX
            assert re.fullmatch(r"\d\.\d", deal.rating)
            assert settings.MOCK_REVIEWS_MIN <= deal.reviews <= settings.MOCK_REVIEWS_MAX
            assert settings.MOCK_STOCK_MIN <= deal.stock <= settings.MOCK_STOCK_MAX
            assert deal.seller in settings.DEAL_RETAILERS
            assert deal.product_url == "#"

    def test_shipping_is_free_or_a_fee(self, generator) -> None:
        for deal in generator.generate_unfiltered():
            if deal.shipping_cost == "FREE":
                continue
            match = re.fullmatch(r"\$(\d+\.\d{2})", deal.shipping_cost)
            assert match is not None
            fee = float(match.group(1))
            assert settings.MOCK_SHIPPING_FEE_MIN <= fee <= settings.MOCK_SHIPPING_FEE_MAX

    def test_ids_use_timestamp_and_index(self, generator) -> None:
        deals = generator.generate_unfiltered()
        assert [d.id for d in deals] == [
            f"deal-1700000000000-{i}" for i in range(len(deals))
        ]

    def test_title_is_brand_and_product(self, generator) -> None:
        for deal in generator.generate_unfiltered():
            brand, _, product = deal.title.partition(" ")
            assert brand in settings.DEAL_BRANDS
            assert product in settings.PRODUCT_NAMES[deal.category]
            assert deal.description == (
                f"Amazing Black Friday deal on {deal.title}. Limited time offer!"
            )

    def test_same_seed_replays_same_deals(self, generator_factory) -> None:
        assert generator_factory(7).generate("", "all") == generator_factory(7).generate("", "all")


class TestCategories:
    def test_all_draws_from_known_categories(self, generator) -> None:
        categories = {d.category for d in generator.generate_unfiltered("all")}
        assert categories <= set(settings.DEAL_CATEGORIES)

    def test_requested_category_is_used_for_every_deal(self, generator) -> None:
        deals = generator.generate_unfiltered("Toys & Games")
        assert {d.category for d in deals} == {"Toys & Games"}
        assert all(
            d.title.partition(" ")[2] in settings.PRODUCT_NAMES["Toys & Games"] for d in deals
        )

    def test_unknown_category_uses_fallback_product_names(self, generator) -> None:
        deals = generator.generate_unfiltered("Garden")
        fallback = settings.PRODUCT_NAMES[settings.FALLBACK_PRODUCT_CATEGORY]

        assert {d.category for d in deals} == {"Garden"}
        assert all(d.title.partition(" ")[2] in fallback for d in deals)


class TestQueryFilter:
    def test_case_insensitive_title_match(self, deal_factory) -> None:
        deals = [deal_factory(title="Apple Laptop"), deal_factory(title="Sony TV")]

        result = filter_deals(deals, "apple")

        assert [d.title for d in result] == ["Apple Laptop"]

    def test_matches_description_and_category(self, deal_factory) -> None:
        deals = [
            deal_factory(title="A", description="great for GAMING", category="Toys"),
            deal_factory(title="B", description="plain", category="Sports"),
            deal_factory(title="C", description="plain", category="Books"),
        ]

        assert [d.title for d in filter_deals(deals, "gaming")] == ["A"]
        assert [d.title for d in filter_deals(deals, "sports")] == ["B"]

    def test_query_matched_as_typed(self, deal_factory) -> None:
        """Surrounding spaces are part of the query."""
        deals = [
            deal_factory(title="TV Stand", description="oak"),
            deal_factory(title="Sony TV", description="oak"),
        ]

        assert [d.title for d in filter_deals(deals, " tv")] == ["Sony TV"]
        assert [d.title for d in filter_deals(deals, "tv ")] == ["TV Stand"]

    def test_blank_query_keeps_everything(self, deal_factory) -> None:
        deals = [deal_factory(id="1"), deal_factory(id="2")]
        assert filter_deals(deals, "   ") == deals
        assert filter_deals(deals, "") == deals

    def test_non_matching_query_yields_empty_list(self, generator) -> None:
        assert generator.generate("zzz-no-such-product", "all") == []

    def test_category_name_query_keeps_whole_batch(self) -> None:
        rng_a, rng_b = random.Random(3), random.Random(3)
        unfiltered = MockDealGenerator(rng=rng_a, clock=lambda: 1.0).generate_unfiltered("Books")
        filtered = MockDealGenerator(rng=rng_b, clock=lambda: 1.0).generate("books", "Books")

        assert filtered == unfiltered
