"""Initial schema and seed data for ChezFlora

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

This is the initial migration that creates all tables of the storefront and
seeds the default data:
- Accounts: users, audit log
- Catalog: categories, products, tags, product tags, favorites
- Shopping: carts, cart items, addresses, orders with items and status history
- Quotes with items and status history
- Blog posts, comments, comment reactions
- Newsletter subscriptions
- Default accounts (client, admin, superadmin), catalog, tags and blog posts

Revision format: YYYYMMDD_HHMMSS_description

"""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Sequence, Union

import bcrypt
import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(10, 2)
DEFAULT_PASSWORD = "00000000"


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables and seed initial data."""

    # Accounts
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_role", "role"),
        sa.Index("ix_users_status", "status"),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("actor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("target_type", sa.String(64), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Index("ix_audit_logs_actor_id", "actor_id"),
        sa.Index("ix_audit_logs_action", "action"),
        sa.Index("ix_audit_logs_timestamp", "timestamp"),
    )

    # Catalog
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slug", sa.String(120), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.Index("ix_categories_slug", "slug", unique=True),
        sa.Index("ix_categories_parent_id", "parent_id"),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slug", sa.String(160), nullable=False),
        sa.Column("name", sa.String(160), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", MONEY, nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("images", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("sku", sa.String(64), nullable=True, unique=True),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("popular", sa.Boolean(), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.Index("ix_products_slug", "slug", unique=True),
        sa.Index("ix_products_category_id", "category_id"),
        sa.Index("ix_products_popular", "popular"),
        sa.Index("ix_products_featured", "featured"),
        sa.Index("ix_products_is_active", "is_active"),
        sa.Index("ix_products_created_at", "created_at"),
    )

    op.create_table(
        "tags",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slug", sa.String(80), nullable=False),
        sa.Column("name", sa.String(80), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(20), nullable=True),
        *_timestamps(),
        sa.Index("ix_tags_slug", "slug", unique=True),
    )

    op.create_table(
        "product_tags",
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", sa.Integer(), sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "favorites",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "product_id", name="uq_favorites_user_product"),
        sa.Index("ix_favorites_user_id", "user_id"),
        sa.Index("ix_favorites_product_id", "product_id"),
        sa.Index("ix_favorites_created_at", "created_at"),
    )

    # Shopping
    op.create_table(
        "carts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True, unique=True),
        sa.Column("guest_token", sa.String(64), nullable=True),
        *_timestamps(),
        sa.Index("ix_carts_guest_token", "guest_token", unique=True),
    )

    op.create_table(
        "cart_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cart_id", sa.Integer(), sa.ForeignKey("carts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("added_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        sa.Index("ix_cart_items_cart_id", "cart_id"),
        sa.Index("ix_cart_items_product_id", "product_id"),
    )

    op.create_table(
        "addresses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("address_line1", sa.String(255), nullable=False),
        sa.Column("address_line2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("postal_code", sa.String(20), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.Index("ix_addresses_user_id", "user_id"),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("subtotal", MONEY, nullable=False),
        sa.Column("shipping_cost", MONEY, nullable=False),
        sa.Column("total", MONEY, nullable=False),
        sa.Column("shipping_option", sa.String(20), nullable=False),
        sa.Column("payment_method", sa.String(40), nullable=False),
        sa.Column("shipping_address", sa.Text(), nullable=False),
        sa.Column("billing_address", sa.Text(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.Index("ix_orders_user_id", "user_id"),
        sa.Index("ix_orders_status", "status"),
        sa.Index("ix_orders_created_at", "created_at"),
    )

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("product_name", sa.String(160), nullable=False),
        sa.Column("unit_price", MONEY, nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Index("ix_order_items_order_id", "order_id"),
        sa.Index("ix_order_items_product_id", "product_id"),
    )

    op.create_table(
        "order_status_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("changed_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Index("ix_order_status_history_order_id", "order_id"),
    )

    # Quotes
    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("event_type", sa.String(80), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("budget", MONEY, nullable=True),
        sa.Column("customer_name", sa.String(200), nullable=False),
        sa.Column("customer_email", sa.String(255), nullable=False),
        sa.Column("customer_phone", sa.String(40), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("subtotal", MONEY, nullable=False),
        sa.Column("tax", MONEY, nullable=False),
        sa.Column("total", MONEY, nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 4), nullable=True),
        sa.Column("valid_until", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.Index("ix_quotes_user_id", "user_id"),
        sa.Index("ix_quotes_status", "status"),
        sa.Index("ix_quotes_created_at", "created_at"),
    )

    op.create_table(
        "quote_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quote_id", sa.Integer(), sa.ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", MONEY, nullable=False),
        sa.Column("total", MONEY, nullable=False),
        sa.Index("ix_quote_items_quote_id", "quote_id"),
    )

    op.create_table(
        "quote_status_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quote_id", sa.Integer(), sa.ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("changed_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Index("ix_quote_status_history_quote_id", "quote_id"),
    )

    # Blog
    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("excerpt", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(80), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("tags", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("author_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("author_name", sa.String(200), nullable=False),
        sa.Column("publish_date", sa.DateTime(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.Index("ix_blog_posts_category", "category"),
        sa.Index("ix_blog_posts_status", "status"),
        sa.Index("ix_blog_posts_publish_date", "publish_date"),
        sa.Index("ix_blog_posts_scheduled_at", "scheduled_at"),
    )

    op.create_table(
        "blog_comments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("post_id", sa.Integer(), sa.ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "parent_id", sa.Integer(), sa.ForeignKey("blog_comments.id", ondelete="CASCADE"), nullable=True
        ),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("author", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Index("ix_blog_comments_post_id", "post_id"),
        sa.Index("ix_blog_comments_parent_id", "parent_id"),
        sa.Index("ix_blog_comments_approved", "approved"),
        sa.Index("ix_blog_comments_created_at", "created_at"),
    )

    op.create_table(
        "comment_reactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "comment_id", sa.Integer(), sa.ForeignKey("blog_comments.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.UniqueConstraint("comment_id", "type", name="uq_comment_reactions_comment_type"),
        sa.Index("ix_comment_reactions_comment_id", "comment_id"),
    )

    # Newsletter
    op.create_table(
        "newsletter_subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("subscribed_at", sa.DateTime(), nullable=False),
        sa.Index("ix_newsletter_subscriptions_email", "email", unique=True),
    )

    _seed()


def _seed() -> None:
    """Insert the default accounts, catalog, tags and blog posts."""
    now = datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)

    # Seed default accounts, all sharing the demo password
    users = sa.table(
        "users",
        sa.column("id", sa.Integer),
        sa.column("email", sa.String),
        sa.column("password_hash", sa.String),
        sa.column("first_name", sa.String),
        sa.column("last_name", sa.String),
        sa.column("role", sa.String),
        sa.column("status", sa.String),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    password_hash = bcrypt.hashpw(DEFAULT_PASSWORD.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
    default_users = [
        {"id": 1, "email": "client@gmail.com", "first_name": "Claire", "last_name": "Martin", "role": "client"},
        {"id": 2, "email": "admin@gmail.com", "first_name": "Julien", "last_name": "Bernard", "role": "admin"},
        {"id": 3, "email": "sadmin@gmail.com", "first_name": "Sophie", "last_name": "Laurent", "role": "superadmin"},
    ]
    op.bulk_insert(
        users,
        [
            {**user, "password_hash": password_hash, "status": "active", "created_at": now, "updated_at": now}
            for user in default_users
        ],
    )

    # Seed the category tree: four roots, three subcategories
    categories = sa.table(
        "categories",
        sa.column("id", sa.Integer),
        sa.column("slug", sa.String),
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("parent_id", sa.Integer),
        sa.column("position", sa.Integer),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    default_categories = [
        (1, "fresh-flowers", "Fresh flowers", "Cut flowers from local growers", None, 1),
        (2, "bouquets", "Bouquets", "Hand-tied bouquets for every occasion", None, 2),
        (3, "potted-plants", "Potted plants", "Indoor and outdoor plants", None, 3),
        (4, "floral-decor", "Floral decor", "Arrangements and decoration for events", None, 4),
        (5, "roses", "Roses", "Garden and long-stem roses", 1, 1),
        (6, "tulips", "Tulips", "Seasonal tulips", 1, 2),
        (7, "wedding-bouquets", "Wedding bouquets", "Bridal and bridesmaid bouquets", 2, 1),
    ]
    op.bulk_insert(
        categories,
        [
            {
                "id": cid,
                "slug": slug,
                "name": name,
                "description": description,
                "parent_id": parent_id,
                "position": position,
                "created_at": now,
                "updated_at": now,
            }
            for cid, slug, name, description, parent_id, position in default_categories
        ],
    )

    # Seed tags
    tags = sa.table(
        "tags",
        sa.column("id", sa.Integer),
        sa.column("slug", sa.String),
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("color", sa.String),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    default_tags = [
        (1, "promotion", "Promotion", "Discounted products", "#e53935"),
        (2, "new", "New", "Recently added products", "#43a047"),
        (3, "bestseller", "Bestseller", "Customer favourites", "#fb8c00"),
        (4, "eco-friendly", "Eco-friendly", "Locally grown, plastic-free packaging", "#2e7d32"),
    ]
    op.bulk_insert(
        tags,
        [
            {
                "id": tid,
                "slug": slug,
                "name": name,
                "description": description,
                "color": color,
                "created_at": now,
                "updated_at": now,
            }
            for tid, slug, name, description, color in default_tags
        ],
    )

    # Seed products with their tags
    products = sa.table(
        "products",
        sa.column("id", sa.Integer),
        sa.column("slug", sa.String),
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("price", MONEY),
        sa.column("stock", sa.Integer),
        sa.column("images", sa.Text),
        sa.column("sku", sa.String),
        sa.column("category_id", sa.Integer),
        sa.column("popular", sa.Boolean),
        sa.column("featured", sa.Boolean),
        sa.column("is_active", sa.Boolean),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    default_products = [
        {
            "id": 1,
            "slug": "red-rose-bouquet",
            "name": "Red rose bouquet",
            "description": "Twelve long-stem red roses.",
            "price": Decimal("49.90"),
            "stock": 25,
            "images": json.dumps(["/images/products/red-rose-bouquet.jpg"]),
            "sku": "CF-ROS-001",
            "category_id": 5,
            "popular": True,
            "featured": True,
        },
        {
            "id": 2,
            "slug": "spring-tulips",
            "name": "Spring tulips",
            "description": "A bunch of fifteen mixed tulips.",
            "price": Decimal("24.50"),
            "stock": 40,
            "images": json.dumps(["/images/products/spring-tulips.jpg"]),
            "sku": "CF-TUL-001",
            "category_id": 6,
            "popular": True,
            "featured": False,
        },
        {
            "id": 3,
            "slug": "bridal-bouquet",
            "name": "Bridal bouquet",
            "description": "White roses, peonies and eucalyptus.",
            "price": Decimal("120.00"),
            "stock": 5,
            "images": json.dumps(["/images/products/bridal-bouquet.jpg"]),
            "sku": "CF-WED-001",
            "category_id": 7,
            "popular": False,
            "featured": True,
        },
        {
            "id": 4,
            "slug": "monstera-deliciosa",
            "name": "Monstera deliciosa",
            "description": "Easy-care indoor plant in a ceramic pot.",
            "price": Decimal("35.00"),
            "stock": 12,
            "images": json.dumps(["/images/products/monstera.jpg"]),
            "sku": "CF-PLT-001",
            "category_id": 3,
            "popular": False,
            "featured": False,
        },
    ]
    op.bulk_insert(
        products,
        [{**product, "is_active": True, "created_at": now, "updated_at": now} for product in default_products],
    )

    product_tags = sa.table(
        "product_tags",
        sa.column("product_id", sa.Integer),
        sa.column("tag_id", sa.Integer),
        sa.column("created_at", sa.DateTime),
    )
    op.bulk_insert(
        product_tags,
        [
            {"product_id": product_id, "tag_id": tag_id, "created_at": now}
            for product_id, tag_id in [(1, 3), (1, 1), (2, 2), (2, 4), (3, 2), (4, 4)]
        ],
    )

    # Seed published blog posts
    blog_posts = sa.table(
        "blog_posts",
        sa.column("id", sa.Integer),
        sa.column("title", sa.String),
        sa.column("excerpt", sa.Text),
        sa.column("content", sa.Text),
        sa.column("category", sa.String),
        sa.column("image_url", sa.Text),
        sa.column("tags", sa.Text),
        sa.column("status", sa.String),
        sa.column("featured", sa.Boolean),
        sa.column("author_id", sa.Integer),
        sa.column("author_name", sa.String),
        sa.column("publish_date", sa.DateTime),
        sa.column("view_count", sa.Integer),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    default_posts = [
        {
            "id": 1,
            "title": "How to keep cut flowers fresh longer",
            "excerpt": "Simple habits that add days to your bouquet.",
            "content": "Trim the stems at an angle, change the water every two days and keep the vase away from fruit.",
            "category": "Care tips",
            "image_url": "/images/blog/fresh-flowers.jpg",
            "tags": json.dumps(["care", "bouquets"], ensure_ascii=False),
            "featured": True,
            "publish_date": now - timedelta(days=7),
        },
        {
            "id": 2,
            "title": "Choosing flowers for your wedding",
            "excerpt": "Seasonal picks and colour palettes for the big day.",
            "content": "Start from the season, then match the bouquet to the venue and the dress.",
            "category": "Weddings",
            "image_url": "/images/blog/wedding-flowers.jpg",
            "tags": json.dumps(["weddings", "seasonal"], ensure_ascii=False),
            "featured": False,
            "publish_date": now - timedelta(days=2),
        },
    ]
    op.bulk_insert(
        blog_posts,
        [
            {
                **post,
                "status": "published",
                "author_id": 2,
                "author_name": "Julien Bernard",
                "view_count": 0,
                "created_at": now,
                "updated_at": now,
            }
            for post in default_posts
        ],
    )

    # Postgres sequences must continue after the explicit ids
    if op.get_bind().dialect.name == "postgresql":
        for table in ("users", "categories", "tags", "products", "blog_posts"):
            op.execute(f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), (SELECT MAX(id) FROM {table}))")


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("newsletter_subscriptions")
    op.drop_table("comment_reactions")
    op.drop_table("blog_comments")
    op.drop_table("blog_posts")
    op.drop_table("quote_status_history")
    op.drop_table("quote_items")
    op.drop_table("quotes")
    op.drop_table("order_status_history")
    op.drop_table("order_items")
    op.drop_table("orders")
    op.drop_table("addresses")
    op.drop_table("cart_items")
    op.drop_table("carts")
    op.drop_table("favorites")
    op.drop_table("product_tags")
    op.drop_table("tags")
    op.drop_table("products")
    op.drop_table("categories")
    op.drop_table("audit_logs")
    op.drop_table("users")
