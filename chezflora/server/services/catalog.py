"""
Catalog service: category hierarchy and products.

Categories form a forest through ``parent_id``; sibling order is kept in
``position`` (1-based). Product listing resolves a category reference
(slug or id) and by default includes every descendant category.
"""

from __future__ import annotations

import logging
from collections import deque
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.catalog import Category, Product
from chezflora.core.database.repositories import (
    CartRepository,
    CategoryRepository,
    FavoriteRepository,
    ProductRepository,
    TagRepository,
)
from chezflora.core.errors import ConflictError, InvalidOperationError, NotFoundError
from chezflora.core.models.io import CategoryCreate, CategoryNode, CategoryRead, ProductCreate
from chezflora.core.monitoring import log_business_event
from chezflora.core.utils import slugify

logger = logging.getLogger(__name__)

_REQUIRED_PRODUCT_FIELDS = {"name", "price", "stock", "popular", "featured", "is_active"}


def _lookup(reference: str | int):
    """Split a path reference into (id, slug)."""
    if isinstance(reference, int):
        return reference, None
    text = str(reference).strip()
    if text.isdigit():
        return int(text), None
    return None, text


class CategoryService:
    """Service for the category hierarchy."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.categories = CategoryRepository(session)
        self.products = ProductRepository(session)

    async def get_category(self, reference: str | int) -> Category:
        category_id, slug = _lookup(reference)
        if category_id is not None:
            category = await self.categories.get_by_id(category_id)
        else:
            category = await self.categories.get_by_slug(slug)
        if category is None:
            raise NotFoundError("Category", reference)
        return category

    async def list_categories(self) -> List[Category]:
        return await self.categories.list_all()

    async def main_categories(self) -> List[Category]:
        return await self.categories.children(None)

    async def child_categories(self, reference: str | int) -> List[Category]:
        parent = await self.get_category(reference)
        return await self.categories.children(parent.id)

    async def category_path(self, reference: str | int) -> List[Category]:
        """Breadcrumbs from the root down to the category."""
        category = await self.get_category(reference)
        by_id = {c.id: c for c in await self.categories.list_all()}
        path = [category]
        seen = {category.id}
        while path[0].parent_id is not None and path[0].parent_id not in seen:
            parent = by_id.get(path[0].parent_id)
            if parent is None:
                break
            seen.add(parent.id)
            path.insert(0, parent)
        return path

    async def subcategory_ids(self, category_id: int) -> List[int]:
        """Ids of every descendant of a category, breadth first."""
        children: Dict[Optional[int], List[int]] = {}
        for c in await self.categories.list_all():
            children.setdefault(c.parent_id, []).append(c.id)
        found: List[int] = []
        queue = deque(children.get(category_id, []))
        while queue:
            current = queue.popleft()
            if current in found or current == category_id:
                continue
            found.append(current)
            queue.extend(children.get(current, []))
        return found

    async def category_tree(self) -> List[CategoryNode]:
        nodes = {
            c.id: CategoryNode(**CategoryRead.model_validate(c).model_dump())
            for c in await self.categories.list_all()
        }
        roots: List[CategoryNode] = []
        for node in nodes.values():
            parent = nodes.get(node.parent_id) if node.parent_id is not None else None
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
        for node in nodes.values():
            node.children.sort(key=lambda n: (n.position, n.id))
        roots.sort(key=lambda n: (n.position, n.id))
        return roots

    async def _unique_slug(self, slug: str, exclude_id: Optional[int] = None) -> str:
        existing = await self.categories.get_by_slug(slug)
        if existing and existing.id != exclude_id:
            raise ConflictError(f"Category slug '{slug}' already exists")
        return slug

    async def _check_parent(self, category_id: Optional[int], parent_id: Optional[int]) -> None:
        if parent_id is None:
            return
        if await self.categories.get_by_id(parent_id) is None:
            raise NotFoundError("Parent category", parent_id)
        if category_id is not None and (
            parent_id == category_id or parent_id in await self.subcategory_ids(category_id)
        ):
            raise InvalidOperationError("A category cannot be moved under itself or one of its descendants")

    async def create_category(self, data: CategoryCreate) -> Category:
        slug = await self._unique_slug(slugify(data.slug or data.name))
        await self._check_parent(None, data.parent_id)
        position = data.position or await self.categories.max_position(data.parent_id) + 1
        category = await self.categories.create(
            Category(
                slug=slug,
                name=data.name.strip(),
                description=data.description,
                parent_id=data.parent_id,
                position=position,
            )
        )
        await self.session.commit()
        logger.info(f"Created category {category.id} ({category.slug})")
        return category

    async def update_category(self, reference: str | int, fields: Dict[str, Any]) -> Category:
        category = await self.get_category(reference)
        if fields.get("slug"):
            category.slug = await self._unique_slug(slugify(fields["slug"]), exclude_id=category.id)
        if fields.get("name"):
            category.name = fields["name"].strip()
        if "description" in fields:
            category.description = fields["description"]
        if "parent_id" in fields and fields["parent_id"] != category.parent_id:
            await self._check_parent(category.id, fields["parent_id"])
            category.parent_id = fields["parent_id"]
            if not fields.get("position"):
                category.position = await self.categories.max_position(category.parent_id) + 1
        if fields.get("position"):
            category.position = fields["position"]
        category = await self.categories.update(category)
        await self.session.commit()
        return category

    async def delete_category(self, reference: str | int, reassign_products: bool = False) -> None:
        """
        Delete a category.

        Direct children move up to the deleted category's parent, after the
        existing siblings there. Products block the deletion unless
        ``reassign_products`` is set, in which case they move to the parent
        (or become uncategorized for a root category).

        Raises:
            ConflictError: If products are attached and reassignment was not requested
        """
        category = await self.get_category(reference)
        product_count = await self.products.count_in_category(category.id)
        if product_count and not reassign_products:
            raise ConflictError(
                f"Category contains {product_count} product(s); pass reassign_products=true to move them"
            )
        if product_count:
            await self.products.reassign_category(category.id, category.parent_id)

        next_position = await self.categories.max_position(category.parent_id)
        for child in await self.categories.children(category.id):
            next_position += 1
            child.parent_id = category.parent_id
            child.position = next_position
            self.session.add(child)

        await self.session.delete(category)
        await self.session.commit()
        logger.info(f"Deleted category {category.id}; moved {product_count} product(s) to {category.parent_id}")

    async def reorder_category(self, reference: str | int, position: int, parent_id: Optional[int]) -> Category:
        """Place a category at ``position`` under ``parent_id`` and renumber its siblings 1..n."""
        category = await self.get_category(reference)
        if parent_id != category.parent_id:
            await self._check_parent(category.id, parent_id)

        siblings = [c for c in await self.categories.children(parent_id) if c.id != category.id]
        position = max(1, min(position, len(siblings) + 1))
        category.parent_id = parent_id
        category.position = position
        self.session.add(category)

        counter = 1
        for sibling in siblings:
            if counter == position:
                counter += 1
            sibling.position = counter
            self.session.add(sibling)
            counter += 1

        await self.session.commit()
        await self.session.refresh(category)
        return category


class ProductService:
    """Service for products."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.products = ProductRepository(session)
        self.tags = TagRepository(session)
        self.categories = CategoryService(session)

    async def get_product(self, reference: str | int, include_inactive: bool = False) -> Product:
        product_id, slug = _lookup(reference)
        if product_id is not None:
            product = await self.products.get_by_id(product_id)
        else:
            product = await self.products.get_by_slug(slug)
        if product is None or (not product.is_active and not include_inactive):
            raise NotFoundError("Product", reference)
        return product

    async def product_detail(self, product: Product) -> Dict[str, Any]:
        """Product fields plus its tags and the breadcrumb path of its category."""
        detail: Dict[str, Any] = product.model_dump()
        detail["tags"] = await self.tags.for_product(product.id)
        detail["category_path"] = (
            await self.categories.category_path(product.category_id) if product.category_id else []
        )
        return detail

    async def list_products(
        self,
        category: Optional[str] = None,
        include_subcategories: bool = True,
        tag: Optional[str] = None,
        q: Optional[str] = None,
        popular: Optional[bool] = None,
        featured: Optional[bool] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        sort: str = "newest",
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        include_inactive: bool = False,
    ) -> List[Product]:
        category_ids = None
        if category:
            root = await self.categories.get_category(category)
            category_ids = [root.id]
            if include_subcategories:
                category_ids += await self.categories.subcategory_ids(root.id)

        tag_id = None
        if tag:
            tag_ref, tag_slug = _lookup(tag)
            found = await self.tags.get_by_id(tag_ref) if tag_ref is not None else await self.tags.get_by_slug(tag_slug)
            if found is None:
                raise NotFoundError("Tag", tag)
            tag_id = found.id

        return await self.products.search(
            category_ids=category_ids,
            tag_id=tag_id,
            q=q,
            popular=popular,
            featured=featured,
            min_price=min_price,
            max_price=max_price,
            include_inactive=include_inactive,
            sort=sort,
            limit=limit,
            offset=offset,
        )

    async def popular_products(self, limit: int = 8) -> List[Product]:
        return await self.products.search(popular=True, limit=limit)

    async def featured_products(self, limit: int = 8) -> List[Product]:
        return await self.products.search(featured=True, limit=limit)

    async def _check_unique(self, slug: str, sku: Optional[str], exclude_id: Optional[int] = None) -> None:
        existing = await self.products.get_by_slug(slug)
        if existing and existing.id != exclude_id:
            raise ConflictError(f"Product slug '{slug}' already exists")
        if sku:
            existing = await self.products.get_by_sku(sku)
            if existing and existing.id != exclude_id:
                raise ConflictError(f"Product SKU '{sku}' already exists")

    async def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None:
            await self.categories.get_category(category_id)

    async def create_product(self, data: ProductCreate) -> Product:
        slug = slugify(data.slug or data.name, fallback_prefix="product")
        await self._check_unique(slug, data.sku)
        await self._check_category(data.category_id)

        product = Product(
            slug=slug,
            name=data.name.strip(),
            description=data.description,
            price=data.price,
            stock=data.stock,
            sku=data.sku,
            category_id=data.category_id,
            popular=data.popular,
            featured=data.featured,
            is_active=data.is_active,
        )
        product.set_images(data.images)
        product = await self.products.create(product)
        for tag_id in dict.fromkeys(data.tag_ids):
            if await self.tags.get_by_id(tag_id) is None:
                raise NotFoundError("Tag", tag_id)
            await self.tags.add_link(product.id, tag_id)
        await self.session.commit()
        logger.info(f"Created product {product.id} ({product.slug})")
        log_business_event("product.created", product_id=product.id, price=str(product.price))
        return product

    async def update_product(self, reference: str | int, fields: Dict[str, Any]) -> Product:
        product = await self.get_product(reference, include_inactive=True)
        if "slug" in fields or "sku" in fields:
            slug = slugify(fields["slug"], fallback_prefix="product") if fields.get("slug") else product.slug
            await self._check_unique(slug, fields.get("sku"), exclude_id=product.id)
            product.slug = slug
        if "category_id" in fields:
            await self._check_category(fields["category_id"])
        if "images" in fields:
            product.set_images(fields.pop("images"))
        for key, value in fields.items():
            if key == "slug" or (value is None and key in _REQUIRED_PRODUCT_FIELDS):
                continue
            if key == "name" and value:
                value = value.strip()
            setattr(product, key, value)
        product = await self.products.update(product)
        await self.session.commit()
        return product

    async def update_stock(self, reference: str | int, stock: int) -> Product:
        product = await self.get_product(reference, include_inactive=True)
        product.stock = stock
        product = await self.products.update(product)
        await self.session.commit()
        logger.info(f"Stock of product {product.id} set to {stock}")
        return product

    async def delete_product(self, reference: str | int) -> None:
        """Delete a product with its tag links, favorites and cart lines; orders keep their snapshot."""
        product = await self.get_product(reference, include_inactive=True)
        await self.tags.remove_links_for_product(product.id)
        await FavoriteRepository(self.session).remove_for_product(product.id)
        await CartRepository(self.session).remove_product_everywhere(product.id)
        await self.session.delete(product)
        await self.session.commit()
        logger.info(f"Deleted product {product.id}")
