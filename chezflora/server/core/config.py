"""
ChezFlora server settings.

Values come from the environment and from a local ``.env`` file; the
defaults below are suitable for development against SQLite.

Nested groups use a double underscore (``__``) as delimiter, for example
``DATABASE__URL`` maps to ``settings.database.url`` and
``SHOP__EXPRESS_SHIPPING_COST`` maps to ``settings.shop.express_shipping_cost``.
"""

from decimal import Decimal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./chezflora.db",
        description="Async SQLAlchemy connection URL for the application database",
    )
    echo: bool = Field(default=False, description="Echo SQL statements to the log")
    create_tables_on_startup: bool = Field(
        default=True,
        description="Create missing tables at startup (development only, use Alembic in production)",
    )


class SecurityConfig(BaseModel):
    """Password hashing and access token configuration."""

    jwt_secret: str = Field(default="change-me-in-production", description="Secret key for token signing")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(default=60, ge=1, description="Access token lifetime in minutes")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt cost factor")


class CORSConfig(BaseModel):
    """Origins allowed to call the API from a browser."""

    origins: list[str] = Field(default=["*"], description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(default=True, description="Allow credentials in CORS requests")
    allow_methods: list[str] = Field(default=["*"], description="Allowed HTTP methods (use * for all)")
    allow_headers: list[str] = Field(default=["*"], description="Allowed HTTP headers (use * for all)")


class ShopConfig(BaseModel):
    """Storefront pricing rules."""

    standard_shipping_cost: Decimal = Field(default=Decimal("7.90"), description="Standard delivery fee")
    express_shipping_cost: Decimal = Field(default=Decimal("12.90"), description="Express delivery fee")
    quote_validity_days: int = Field(default=30, ge=1, description="Days a sent quote stays valid")
    quote_tax_rate: Decimal = Field(default=Decimal("0.20"), ge=0, description="Default tax rate applied to quotes")
    currency: str = Field(default="EUR", description="ISO currency code")


class BlogConfig(BaseModel):
    """Blog publication and moderation configuration."""

    scheduler_enabled: bool = Field(default=True, description="Run the scheduled-post publisher")
    publish_interval_seconds: int = Field(default=60, ge=1, description="Scheduled-post publisher interval")
    comments_need_approval: bool = Field(default=True, description="Hold new comments for moderation")


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """Root settings object, imported everywhere as ``settings``."""

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
        populate_by_name=True,
    )

    # =====================================================================
    # ChezFlora Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="ChezFlora server host address to bind to",
        alias="CHEZFLORA_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="ChezFlora server port number",
        alias="CHEZFLORA_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="ChezFlora logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="CHEZFLORA_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="CHEZFLORA_LOG_FORMAT",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to logs/chezflora.log",
        alias="CHEZFLORA_ENABLE_FILE_LOGGING",
    )

    # =====================================================================
    # Grouped Configuration
    # =====================================================================
    database: DatabaseConfig = Field(default_factory=DatabaseConfig, description="Database configuration")
    security: SecurityConfig = Field(default_factory=SecurityConfig, description="Security configuration")
    cors: CORSConfig = Field(default_factory=CORSConfig, description="CORS configuration")
    shop: ShopConfig = Field(default_factory=ShopConfig, description="Storefront pricing configuration")
    blog: BlogConfig = Field(default_factory=BlogConfig, description="Blog configuration")


settings = Settings()
