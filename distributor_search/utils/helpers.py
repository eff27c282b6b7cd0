"""Utility helper functions shared by the supplier connectors."""

import hashlib
import math
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional


def first_present(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value under ``keys`` that is not None or empty."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def parse_price(value: Any) -> Optional[float]:
    """Parse an upstream price; zero, negative and garbage become None."""
    try:
        price = float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or math.isinf(price) or price <= 0:
        return None
    return price


def parse_quantity(value: Any) -> int:
    """Parse a stock quantity, clamping unknown or negative values to 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        quantity = int(float(str(value).strip()))
    except (TypeError, ValueError):
        return 0
    return max(quantity, 0)


def days_until(value: Any, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days (rounded up) from now until a future date.

    Past dates, today, and values that do not parse as ISO dates yield None.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        target = value
    else:
        try:
            target = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if target.tzinfo is None:
        target = target.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    days = math.ceil((target - now).total_seconds() / 86400)
    return days if days > 0 else None


def truncate_text(text: str, max_length: int = 80) -> str:
    """Truncate text to ``max_length`` characters followed by an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def stable_product_id(supplier_slug: str, sku: str) -> str:
    """Deterministic product id, identical across fetches of the same SKU."""
    digest = hashlib.sha1(f"{supplier_slug}:{sku}".encode("utf-8")).hexdigest()
    return digest[:16]


def matches_query(query: Optional[str], values: Iterable[Optional[str]]) -> bool:
    """Case-insensitive substring match of ``query`` against any of ``values``."""
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    return any(value and needle in str(value).lower() for value in values)


def optional_str(value: Any) -> Optional[str]:
    """Stringify a scalar upstream value, mapping None and blanks to None."""
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None
