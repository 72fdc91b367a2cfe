"""
Tag service: tag CRUD and product tagging.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.catalog import Product, Tag
from chezflora.core.database.repositories import ProductRepository, TagRepository
from chezflora.core.errors import ConflictError, NotFoundError
from chezflora.core.models.io import TagCreate
from chezflora.core.utils import slugify

logger = logging.getLogger(__name__)


class TagService:
    """Service for tags and their attachment to products."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tags = TagRepository(session)
        self.products = ProductRepository(session)

    async def get_tag(self, tag_id: int) -> Tag:
        tag = await self.tags.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError("Tag", tag_id)
        return tag

    async def _get_product(self, product_id: int) -> Product:
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    async def search_tags(self, q: Optional[str] = None) -> List[Tag]:
        """All tags, or those whose name or description contains ``q``."""
        return await self.tags.search(q)

    async def _unique_slug(self, slug: str, exclude_id: Optional[int] = None) -> str:
        existing = await self.tags.get_by_slug(slug)
        if existing and existing.id != exclude_id:
            raise ConflictError(f"Tag slug '{slug}' already exists")
        return slug

    async def create_tag(self, data: TagCreate) -> Tag:
        slug = await self._unique_slug(slugify(data.slug or data.name, fallback_prefix="tag"))
        tag = await self.tags.create(
            Tag(slug=slug, name=data.name.strip(), description=data.description, color=data.color)
        )
        await self.session.commit()
        logger.info(f"Created tag {tag.id} ({tag.slug})")
        return tag

    async def update_tag(self, tag_id: int, fields: Dict[str, Any]) -> Tag:
        tag = await self.get_tag(tag_id)
        if fields.get("slug"):
            tag.slug = await self._unique_slug(slugify(fields["slug"], fallback_prefix="tag"), exclude_id=tag.id)
        if fields.get("name"):
            tag.name = fields["name"].strip()
        for key in ("description", "color"):
            if key in fields:
                setattr(tag, key, fields[key])
        tag = await self.tags.update(tag)
        await self.session.commit()
        return tag

    async def delete_tag(self, tag_id: int) -> None:
        tag = await self.get_tag(tag_id)
        await self.tags.remove_links_for_tag(tag.id)
        await self.session.delete(tag)
        await self.session.commit()
        logger.info(f"Deleted tag {tag_id}")

    async def product_tags(self, product_id: int) -> List[Tag]:
        await self._get_product(product_id)
        return await self.tags.for_product(product_id)

    async def set_product_tags(self, product_id: int, tag_ids: List[int]) -> List[Tag]:
        """Replace the product's tags with ``tag_ids``."""
        await self._get_product(product_id)
        wanted = list(dict.fromkeys(tag_ids))
        for tag_id in wanted:
            await self.get_tag(tag_id)
        await self.tags.remove_links_for_product(product_id)
        for tag_id in wanted:
            await self.tags.add_link(product_id, tag_id)
        await self.session.commit()
        return await self.tags.for_product(product_id)

    async def add_tag_to_product(self, product_id: int, tag_id: int) -> List[Tag]:
        await self._get_product(product_id)
        await self.get_tag(tag_id)
        if await self.tags.get_link(product_id, tag_id) is not None:
            raise ConflictError(f"Tag {tag_id} is already attached to product {product_id}")
        await self.tags.add_link(product_id, tag_id)
        await self.session.commit()
        return await self.tags.for_product(product_id)

    async def remove_tag_from_product(self, product_id: int, tag_id: int) -> List[Tag]:
        await self._get_product(product_id)
        link = await self.tags.get_link(product_id, tag_id)
        if link is None:
            raise NotFoundError("Tag", tag_id, detail=f"Tag {tag_id} is not attached to product {product_id}")
        await self.session.delete(link)
        await self.session.commit()
        return await self.tags.for_product(product_id)

    async def products_by_tag(self, tag_id: int) -> List[Product]:
        await self.get_tag(tag_id)
        return await self.tags.products(tag_id)
