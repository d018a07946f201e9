"""
Deal Hunter — Provider Response Parser

Turns free-form model text into a list of normalized Deal records.

Extraction policy:
1. Strip a fenced code block wrapping the whole response (```json ... ```).
2. If what remains is not a clean JSON array, use the first balanced
   [...] span in the text.
3. Parse as JSON. Anything unparseable raises MalformedResponse; the
   search orchestrator is responsible for falling back to mock data.

Normalization is applied to each element independently. A missing or
unusable field gets a fixed default, so parsing never fails on content,
only on syntax.
"""

from __future__ import annotations

import json
import math
import re
import time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any
from urllib.parse import quote

import structlog

from deal_hunter.config import ALL_CATEGORIES, settings
from deal_hunter.errors import MalformedResponse
from deal_hunter.models.deal import Deal

logger = structlog.get_logger(__name__)

_TWO_DP = Decimal("0.01")

_CODE_FENCE: re.Pattern[str] = re.compile(
    r"^```[\w+-]*[ \t]*\n?(?P<body>.*?)\n?[ \t]*```$", re.DOTALL
)
_CURRENCY_PREFIX: re.Pattern[str] = re.compile(r"^\s*(?:US\$|[$€£¥₹])\s*")


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def strip_code_fence(text: str) -> str:
    """Remove a fenced code block wrapping the entire text, if present."""
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    if match:
        return match.group("body").strip()
    return stripped


def find_array_span(text: str) -> str | None:
    """
    Return the first balanced [...] substring, or None.

    Brackets inside JSON string literals are ignored.
    """
    start = text.find("[")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        char = text[pos]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return text[start:pos + 1]
    return None


def extract_json_array(text: str) -> list[Any]:
    """
    Pull the JSON array out of a model response.

    Raises:
        MalformedResponse: If no array can be located or parsed.
    """
    body = strip_code_fence(text)

    if body.startswith("[") and body.endswith("]"):
        try:
            parsed = json.loads(body)
        except (ValueError, RecursionError):
            parsed = None
        if isinstance(parsed, list):
            return parsed

    span = find_array_span(body)
    if span is None:
        raise MalformedResponse("no JSON array found in provider response")

    try:
        parsed = json.loads(span)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"invalid JSON array: {e.msg}") from e
    except (ValueError, RecursionError) as e:
        raise MalformedResponse(f"unreadable JSON array: {type(e).__name__}") from e

    if not isinstance(parsed, list):
        raise MalformedResponse("provider response is not a JSON array")
    return parsed


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def _coerce_str(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return str(value)
    return None


def _coerce_int(value: Any, default: int) -> int:
    """Numeric parsing with default on failure. Negative values take the default."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        result = int(value)
    elif isinstance(value, str):
        cleaned = value.strip().rstrip("%").replace(",", "").strip()
        try:
            result = int(Decimal(cleaned))
        except (InvalidOperation, ValueError, OverflowError):
            return default
    else:
        return default
    return result if result >= 0 else default


def _coerce_price(value: Any) -> str:
    """
    Price fields stay strings.

    Numbers are formatted to two decimals. Strings lose a leading currency
    symbol and keep the remainder untouched. Negative or unrepresentable
    amounts take the default.
    """
    if isinstance(value, bool) or value is None:
        return settings.DEFAULT_PRICE
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return settings.DEFAULT_PRICE
        if value < 0:
            return settings.DEFAULT_PRICE
        try:
            return str(Decimal(str(value)).quantize(_TWO_DP, rounding=ROUND_HALF_UP))
        except InvalidOperation:
            return settings.DEFAULT_PRICE
    if isinstance(value, str):
        remainder = _CURRENCY_PREFIX.sub("", value).strip()
        if not remainder or remainder.startswith("-"):
            return settings.DEFAULT_PRICE
        return remainder
    return settings.DEFAULT_PRICE


def _coerce_rating(value: Any) -> str:
    text = _coerce_str(value)
    if text is None:
        return settings.DEFAULT_RATING
    try:
        float(text)
    except ValueError:
        return settings.DEFAULT_RATING
    return text


def placeholder_image_url(title: str) -> str:
    """Placeholder image URL labelled with the product title."""
    return settings.PLACEHOLDER_IMAGE_URL.format(text=quote(title, safe=""))


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_deal(
    raw: Any,
    index: int,
    category_fallback: str,
    timestamp_ms: int,
) -> Deal:
    """
    Build a fully populated Deal from one parsed array element.

    Non-object elements are treated as empty objects.
    """
    data: dict[str, Any] = raw if isinstance(raw, dict) else {}

    if category_fallback and category_fallback != ALL_CATEGORIES:
        default_category = category_fallback
    else:
        default_category = settings.DEFAULT_CATEGORY

    title = _coerce_str(data.get("title")) or settings.DEFAULT_TITLE

    return Deal(
        id=_coerce_str(data.get("id")) or f"deal-{timestamp_ms}-{index}",
        title=title,
        description=_coerce_str(data.get("description")) or f"Black Friday deal on {title}",
        category=_coerce_str(data.get("category")) or default_category,
        original_price=_coerce_price(data.get("originalPrice")),
        sale_price=_coerce_price(data.get("salePrice")),
        savings=_coerce_price(data.get("savings")),
        discount_percent=_coerce_int(data.get("discountPercent"), 0),
        rating=_coerce_rating(data.get("rating")),
        reviews=_coerce_int(data.get("reviews"), 0),
        stock=_coerce_int(data.get("stock"), 0),
        seller=_coerce_str(data.get("seller")) or settings.DEFAULT_SELLER,
        shipping_cost=_coerce_str(data.get("shippingCost")) or settings.DEFAULT_SHIPPING,
        product_url=_coerce_str(data.get("productUrl")) or settings.DEFAULT_PRODUCT_URL,
        image_url=_coerce_str(data.get("imageUrl")) or placeholder_image_url(title),
    )


def parse_deals(
    text: str,
    category_fallback: str = ALL_CATEGORIES,
    timestamp_ms: int | None = None,
) -> list[Deal]:
    """
    Parse a provider response into normalized deals.

    Args:
        text: Raw model output.
        category_fallback: Category assigned to deals that omit one.
        timestamp_ms: Timestamp used in synthesized ids (default: now).

    Returns:
        One Deal per array element, in response order.

    Raises:
        MalformedResponse: If the text holds no parseable JSON array.
    """
    items = extract_json_array(text)
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)

    deals = [
        normalize_deal(item, index, category_fallback, ts)
        for index, item in enumerate(items)
    ]

    logger.debug(
        "provider_response_parsed",
        deal_count=len(deals),
        category_fallback=category_fallback,
    )
    return deals
