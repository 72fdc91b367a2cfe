"""Unit tests for the settings model."""

from decimal import Decimal

from chezflora.server.core import constant
from chezflora.server.core.config import Settings, settings


def test_defaults(monkeypatch):
    for name in ("DATABASE__URL", "CHEZFLORA_SERVER_PORT", "SECURITY__BCRYPT_ROUNDS", "SECURITY__JWT_SECRET", "BLOG__SCHEDULER_ENABLED"):
        monkeypatch.delenv(name, raising=False)

    fresh = Settings(_env_file=None)

    assert fresh.server_port == 8000
    assert fresh.database.url.startswith("sqlite+aiosqlite")
    assert fresh.security.jwt_algorithm == "HS256"
    assert fresh.security.bcrypt_rounds == 12
    assert fresh.shop.standard_shipping_cost == Decimal("7.90")
    assert fresh.shop.express_shipping_cost == Decimal("12.90")
    assert fresh.shop.quote_tax_rate == Decimal("0.20")
    assert fresh.blog.scheduler_enabled is True


def test_nested_environment_variables(monkeypatch):
    monkeypatch.setenv("SHOP__EXPRESS_SHIPPING_COST", "15.50")
    monkeypatch.setenv("BLOG__PUBLISH_INTERVAL_SECONDS", "5")
    monkeypatch.setenv("CHEZFLORA_SERVER_PORT", "9001")

    fresh = Settings(_env_file=None)

    assert fresh.shop.express_shipping_cost == Decimal("15.50")
    assert fresh.blog.publish_interval_seconds == 5
    assert fresh.server_port == 9001


def test_suite_settings_are_pinned():
    assert settings.database.url == "sqlite+aiosqlite:///:memory:"
    assert settings.blog.scheduler_enabled is False
    assert settings.security.bcrypt_rounds == 4


def test_api_prefix():
    assert constant.API_V1_STR == "/api/v1"
