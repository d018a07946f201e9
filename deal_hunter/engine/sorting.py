"""
Deal Hunter — Result Ordering

Sorts an in-memory deal list for display. Python's sort is stable, so deals
with equal keys keep their relative order.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

from deal_hunter.config import SortKey
from deal_hunter.models.deal import Deal


def numeric_value(value: str) -> float:
    """Numeric value of a string amount ("1,299.99" -> 1299.99). Unparseable or non-finite -> 0.0."""
    try:
        number = float(value.replace(",", "").strip())
    except (AttributeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


# key function, descending
_ORDERINGS: dict[SortKey, tuple[Callable[[Deal], float], bool]] = {
    SortKey.DISCOUNT: (lambda d: d.discount_percent, True),
    SortKey.PRICE_LOW: (lambda d: numeric_value(d.sale_price), False),
    SortKey.PRICE_HIGH: (lambda d: numeric_value(d.sale_price), True),
    SortKey.RATING: (lambda d: numeric_value(d.rating), True),
    SortKey.SAVINGS: (lambda d: numeric_value(d.savings), True),
}


def sort_deals(deals: Sequence[Deal], key: SortKey | str) -> list[Deal]:
    """
    Return a new list of deals ordered by `key`.

    Unknown keys leave the input order unchanged. The input is never mutated.
    """
    try:
        ordering = _ORDERINGS[SortKey(key)]
    except ValueError:
        return list(deals)

    key_fn, descending = ordering
    return sorted(deals, key=key_fn, reverse=descending)
