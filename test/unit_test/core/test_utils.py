"""Unit tests for the shared helpers."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from chezflora.core.utils import is_valid_email, money, normalize_email, slugify, to_naive_utc, utc_now


class TestSlugify:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Fresh flowers", "fresh-flowers"),
            ("  Wedding   Bouquets ", "wedding-bouquets"),
            ("Roses & Tulips!", "roses-tulips"),
            ("snake_case_name", "snake-case-name"),
            ("--Already--dashed--", "already-dashed"),
            ("Plantes d'intérieur", "plantes-dintérieur"),
        ],
    )
    def test_slugify(self, value, expected):
        assert slugify(value) == expected

    def test_fallback_when_nothing_is_left(self):
        slug = slugify("!!!")
        assert slug.startswith("cat-")
        assert slug[4:].isdigit()

    def test_fallback_prefix(self):
        assert slugify("", fallback_prefix="product").startswith("product-")


def test_money_rounds_half_up_to_cents():
    assert money("10") == Decimal("10.00")
    assert money(Decimal("2.345")) == Decimal("2.35")
    assert money(Decimal("2.344")) == Decimal("2.34")


def test_normalize_email():
    assert normalize_email("  Alice@Example.COM ") == "alice@example.com"
    assert normalize_email(None) == ""


@pytest.mark.parametrize(
    "email,valid",
    [("a@b", True), ("client@gmail.com", True), ("no-at-sign", False), ("@domain", False), ("local@", False), ("", False)],
)
def test_is_valid_email(email, valid):
    assert is_valid_email(email) is valid


def test_utc_now_is_naive():
    assert utc_now().tzinfo is None


def test_to_naive_utc():
    aware = datetime(2026, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_naive_utc(aware) == datetime(2026, 5, 1, 10, 0)
    naive = datetime(2026, 5, 1, 12, 0)
    assert to_naive_utc(naive) is naive
    assert to_naive_utc(None) is None
