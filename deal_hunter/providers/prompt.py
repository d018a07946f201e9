"""
Deal Hunter — Deal search prompt

One prompt template shared by every provider. It asks for ONLY a JSON array
in the canonical Deal shape, with the category filter interpolated.
"""

from __future__ import annotations

from deal_hunter.config import ALL_CATEGORIES, settings

_DEAL_SHAPE = """{
  "id": "unique string",
  "title": "brand and product name",
  "description": "one sentence about the deal",
  "category": "category name",
  "originalPrice": "199.99",
  "salePrice": "149.99",
  "savings": "50.00",
  "discountPercent": 25,
  "rating": "4.6",
  "reviews": 1520,
  "stock": 42,
  "seller": "retailer name",
  "shippingCost": "FREE",
  "productUrl": "https://...",
  "imageUrl": "https://..."
}"""


def _category_clause(category: str) -> str:
    if category and category != ALL_CATEGORIES:
        return (
            f'Only include products in the "{category}" category, '
            f'and set "category" to "{category}" on every deal.'
        )
    return (
        "Spread the deals across these categories: "
        + ", ".join(settings.DEAL_CATEGORIES)
        + '. Set "category" to one of them.'
    )


def build_deal_prompt(query: str, category: str = ALL_CATEGORIES) -> str:
    """Build the user prompt for a deal search."""
    query = (query or "").strip()
    subject = f'matching "{query}"' if query else "across popular products"

    return (
        f"Find {settings.PROMPT_MIN_DEALS}-{settings.PROMPT_MAX_DEALS} current "
        f"Black Friday deals {subject}.\n"
        f"{_category_clause(category)}\n\n"
        "Return ONLY a JSON array. No prose, no explanation, no markdown.\n"
        "Each element must be an object with exactly these fields:\n"
        f"{_DEAL_SHAPE}\n\n"
        "Rules:\n"
        "- originalPrice, salePrice and savings are strings with two decimals and no currency symbol.\n"
        "- savings must equal originalPrice minus salePrice.\n"
        "- discountPercent is an integer from 0 to 100.\n"
        '- rating is a string between "3.0" and "5.0".\n'
        "- reviews and stock are non-negative integers.\n"
        '- shippingCost is "FREE" or a price such as "$5.99".\n'
        "- Use real retailers and real product pages where you know them."
    )
