"""
Deal Hunter — Text rendering

Formats a sorted deal list as grid cards or table rows for the terminal.
Pure functions of their input; no network or storage access.
"""

from __future__ import annotations

from typing import Sequence

from deal_hunter.config import ALL_CATEGORIES, ViewMode, settings
from deal_hunter.models.deal import Deal

_TABLE_COLUMNS: tuple[str, ...] = (
    "Product", "Category", "Original", "Sale", "Savings", "Discount",
    "Rating", "Reviews", "Seller", "Shipping", "Stock",
)


def _stock_label(deal: Deal) -> str:
    if deal.stock < settings.LOW_STOCK_THRESHOLD:
        return f"{deal.stock} left (low)"
    return f"{deal.stock} left"


def _truncate(value: str, width: int) -> str:
    return value if len(value) <= width else value[: width - 1] + "…"


def results_summary(count: int, category: str = ALL_CATEGORIES) -> str:
    """Results count line shown above the listing."""
    if count == 0:
        return "No deals found"
    plural = "" if count == 1 else "s"
    category_text = "" if not category or category == ALL_CATEGORIES else f" in {category}"
    return f"Found {count} deal{plural}{category_text}"


def _fmt_card(deal: Deal) -> str:
    """One grid card."""
    shipping = "FREE shipping" if deal.shipping_cost == "FREE" else f"Shipping {deal.shipping_cost}"
    lines = [
        f"┌ {deal.title}  [{deal.discount_percent}% OFF]",
        f"│ {deal.category}",
        f"│ {deal.description}",
        f"│ ${deal.sale_price}  (was ${deal.original_price})  Save ${deal.savings}",
        f"│ ⭐ {deal.rating}  ({deal.reviews:,} reviews)  {deal.seller}",
        f"│ {shipping}  ·  {_stock_label(deal)}",
        f"└ View Deal → {deal.product_url}",
    ]
    return "\n".join(lines)


def render_grid(deals: Sequence[Deal]) -> str:
    return "\n\n".join(_fmt_card(deal) for deal in deals)


def _table_row(deal: Deal) -> tuple[str, ...]:
    return (
        _truncate(deal.title, settings.TABLE_TITLE_WIDTH),
        deal.category,
        f"${deal.original_price}",
        f"${deal.sale_price}",
        f"${deal.savings}",
        f"{deal.discount_percent}%",
        f"⭐ {deal.rating}",
        f"{deal.reviews:,}",
        deal.seller,
        deal.shipping_cost,
        f"{deal.stock}*" if deal.stock < settings.LOW_STOCK_THRESHOLD else str(deal.stock),
    )


def render_table(deals: Sequence[Deal]) -> str:
    """Fixed-width table; low-stock counts are starred."""
    rows = [_TABLE_COLUMNS] + [_table_row(deal) for deal in deals]
    widths = [max(len(row[i]) for row in rows) for i in range(len(_TABLE_COLUMNS))]

    def fmt(row: tuple[str, ...]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip()

    divider = "  ".join("-" * width for width in widths)
    return "\n".join([fmt(rows[0]), divider] + [fmt(row) for row in rows[1:]])


def render_deals(
    deals: Sequence[Deal],
    view: ViewMode | str = ViewMode.GRID,
    category: str = ALL_CATEGORIES,
) -> str:
    """Summary line followed by the deals in the requested layout."""
    summary = results_summary(len(deals), category)
    if not deals:
        return summary
    body = render_table(deals) if ViewMode(view) == ViewMode.TABLE else render_grid(deals)
    return f"{summary}\n\n{body}"
