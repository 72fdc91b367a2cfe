"""
Catalog entity models.

This module contains the database entities for the product catalog:
hierarchical categories, products, tags with their product links, and
customer favorites.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from chezflora.core.utils import utc_now

from ..base import Base, MoneyField, TimestampField


class Category(Base, table=True):
    """Catalog category; categories nest through ``parent_id``.

    Table: categories
    """

    __tablename__ = "categories"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=120, unique=True, index=True)
    name: str = Field(max_length=120)
    description: Optional[str] = Field(default=None)
    parent_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    position: int = Field(default=1, description="1-based order among siblings")

    created_at: datetime = TimestampField(default_factory=utc_now)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Category(id={self.id}, slug={self.slug}, parent_id={self.parent_id})"


class Product(Base, table=True):
    """Sellable product.

    Table: products
    """

    __tablename__ = "products"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=160, unique=True, index=True)
    name: str = Field(max_length=160)
    description: Optional[str] = Field(default=None)
    price: Decimal = MoneyField(nullable=False)
    stock: int = Field(default=0)
    images: str = Field(default="[]", description="JSON-encoded list of image URLs")
    sku: Optional[str] = Field(default=None, max_length=64, unique=True)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    popular: bool = Field(default=False, index=True)
    featured: bool = Field(default=False, index=True)
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = TimestampField(default_factory=utc_now, index=True)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_images(self) -> List[str]:
        return json.loads(self.images) if self.images else []

    def set_images(self, value: Optional[List[str]]) -> None:
        self.images = json.dumps(list(value or []))

    @property
    def main_image(self) -> Optional[str]:
        images = self.get_images()
        return images[0] if images else None

    def __repr__(self) -> str:
        return f"Product(id={self.id}, slug={self.slug}, stock={self.stock})"


class Tag(Base, table=True):
    """Product tag (promotion, new, bestseller...).

    Table: tags
    """

    __tablename__ = "tags"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=80, unique=True, index=True)
    name: str = Field(max_length=80)
    description: Optional[str] = Field(default=None)
    color: Optional[str] = Field(default=None, max_length=20)

    created_at: datetime = TimestampField(default_factory=utc_now)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class ProductTag(Base, table=True):
    """Link between a product and a tag.

    Table: product_tags
    """

    __tablename__ = "product_tags"
    __table_args__ = ({"extend_existing": True},)

    product_id: int = Field(foreign_key="products.id", primary_key=True, ondelete="CASCADE")
    tag_id: int = Field(foreign_key="tags.id", primary_key=True, ondelete="CASCADE")
    created_at: datetime = TimestampField(default_factory=utc_now)


class Favorite(Base, table=True):
    """Product on a user's wishlist.

    Table: favorites
    """

    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_favorites_user_product"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    product_id: int = Field(foreign_key="products.id", index=True, ondelete="CASCADE")
    created_at: datetime = TimestampField(default_factory=utc_now, index=True)
