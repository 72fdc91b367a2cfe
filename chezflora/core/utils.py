"""Small helpers shared across the storefront services."""

import re
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")

CENT = Decimal("0.01")


def utc_now() -> datetime:
    """Naive UTC timestamp, the form every table stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def slugify(value: str, fallback_prefix: str = "cat") -> str:
    """Turn a display name into a URL slug.

    Lowercases, strips non-word characters, collapses whitespace, underscore
    and hyphen runs to a single ``-`` and trims leading and trailing hyphens.
    Falls back to ``<prefix>-<timestamp>`` when nothing is left.
    """
    slug = _NON_WORD.sub("", (value or "").lower().strip())
    slug = _SEPARATORS.sub("-", slug).strip("-")
    if not slug:
        slug = f"{fallback_prefix}-{int(utc_now().timestamp() * 1000)}"
    return slug


def money(value) -> Decimal:
    """Quantize an amount to cents."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_valid_email(email: str) -> bool:
    local, _, domain = (email or "").partition("@")
    return bool(local) and bool(domain)
