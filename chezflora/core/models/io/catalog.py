"""
Catalog I/O models: categories, products, tags and favorites.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    position: int
    created_at: datetime
    updated_at: datetime


class CategoryNode(CategoryRead):
    """Category with its nested children, as returned by the tree endpoint."""

    children: List[CategoryNode] = Field(default_factory=list)


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    slug: Optional[str] = Field(default=None, max_length=120, description="Derived from the name when omitted")
    description: Optional[str] = None
    parent_id: Optional[int] = None
    position: Optional[int] = Field(default=None, ge=1, description="Appended after the last sibling when omitted")


class CategoryUpdate(BaseModel):
    """Partial update; send ``parent_id: null`` explicitly to move a category to the root."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    position: Optional[int] = Field(default=None, ge=1)


class CategoryReorder(BaseModel):
    position: int = Field(ge=1)
    parent_id: Optional[int] = None


class TagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=80)
    slug: Optional[str] = Field(default=None, max_length=80)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=20)


class TagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=80)
    slug: Optional[str] = Field(default=None, max_length=80)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=20)


class ProductTagsUpdate(BaseModel):
    tag_ids: List[int] = Field(default_factory=list)


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    description: Optional[str] = None
    price: Decimal
    stock: int
    images: List[str] = Field(default_factory=list)
    sku: Optional[str] = None
    category_id: Optional[int] = None
    popular: bool
    featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("images", mode="before")
    @classmethod
    def _decode_images(cls, value: Any) -> Any:
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value or []


class ProductDetail(ProductRead):
    """Product with its tags and the breadcrumb path of its category."""

    tags: List[TagRead] = Field(default_factory=list)
    category_path: List[CategoryRead] = Field(default_factory=list)


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=160)
    slug: Optional[str] = Field(default=None, max_length=160)
    description: Optional[str] = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    images: List[str] = Field(default_factory=list)
    sku: Optional[str] = Field(default=None, max_length=64)
    category_id: Optional[int] = None
    popular: bool = False
    featured: bool = False
    is_active: bool = True
    tag_ids: List[int] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=160)
    slug: Optional[str] = Field(default=None, max_length=160)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0)
    images: Optional[List[str]] = None
    sku: Optional[str] = Field(default=None, max_length=64)
    category_id: Optional[int] = None
    popular: Optional[bool] = None
    featured: Optional[bool] = None
    is_active: Optional[bool] = None


class StockUpdate(BaseModel):
    stock: int = Field(ge=0)


class FavoriteRead(BaseModel):
    product: ProductRead
    added_at: datetime
