"""
Catalog repositories: categories, products, tags and favorites.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import delete, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.catalog import Category, Favorite, Product, ProductTag, Tag
from .base import AsyncBaseRepository, QueryBuilder

PRODUCT_SORTS = {
    "newest": (Product.created_at.desc(), Product.id.desc()),
    "price_asc": (Product.price.asc(), Product.id.asc()),
    "price_desc": (Product.price.desc(), Product.id.asc()),
    "name": (Product.name.asc(), Product.id.asc()),
}


class CategoryRepository(AsyncBaseRepository[Category]):
    """Repository for catalog categories."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Category)

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        result = await self.session.execute(select(Category).where(Category.slug == slug))
        return result.scalars().first()

    async def list_all(self) -> List[Category]:
        """Every category, ordered by parent then position."""
        stmt = select(Category).order_by(Category.parent_id, Category.position, Category.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def children(self, parent_id: Optional[int]) -> List[Category]:
        """Direct children of ``parent_id`` (roots when ``None``), ordered by position."""
        stmt = select(Category)
        if parent_id is None:
            stmt = stmt.where(Category.parent_id.is_(None))
        else:
            stmt = stmt.where(Category.parent_id == parent_id)
        result = await self.session.execute(stmt.order_by(Category.position, Category.id))
        return list(result.scalars().all())

    async def max_position(self, parent_id: Optional[int]) -> int:
        stmt = select(func.max(Category.position))
        if parent_id is None:
            stmt = stmt.where(Category.parent_id.is_(None))
        else:
            stmt = stmt.where(Category.parent_id == parent_id)
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

class ProductRepository(AsyncBaseRepository[Product]):
    """Repository for products."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)

    async def get_by_slug(self, slug: str) -> Optional[Product]:
        result = await self.session.execute(select(Product).where(Product.slug == slug))
        return result.scalars().first()

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        result = await self.session.execute(select(Product).where(Product.sku == sku))
        return result.scalars().first()

    async def search(
        self,
        category_ids: Optional[Sequence[int]] = None,
        tag_id: Optional[int] = None,
        q: Optional[str] = None,
        popular: Optional[bool] = None,
        featured: Optional[bool] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        include_inactive: bool = False,
        sort: str = "newest",
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Product]:
        """Filtered product listing used by the public catalog and the back-office."""
        stmt = select(Product)
        if not include_inactive:
            stmt = stmt.where(Product.is_active.is_(True))
        if category_ids is not None:
            stmt = stmt.where(Product.category_id.in_(list(category_ids)))
        if tag_id is not None:
            stmt = stmt.join(ProductTag, ProductTag.product_id == Product.id).where(ProductTag.tag_id == tag_id)
        if q:
            pattern = QueryBuilder.contains_pattern(q.strip().lower())
            stmt = stmt.outerjoin(Category, Category.id == Product.category_id).where(
                or_(
                    Product.name.ilike(pattern, escape="\\"),
                    Product.description.ilike(pattern, escape="\\"),
                    Product.sku.ilike(pattern, escape="\\"),
                    Category.slug.ilike(pattern, escape="\\"),
                )
            )
        stmt = QueryBuilder.apply_filters(stmt, Product, {"popular": popular, "featured": featured})
        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)
        stmt = stmt.order_by(*PRODUCT_SORTS.get(sort, PRODUCT_SORTS["newest"]))
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_in_category(self, category_id: int) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.category_id == category_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def reassign_category(self, from_category_id: int, to_category_id: Optional[int]) -> None:
        await self.session.execute(
            update(Product).where(Product.category_id == from_category_id).values(category_id=to_category_id)
        )

    async def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """Take ``quantity`` out of stock only if enough is left; False when it is not."""
        result = await self.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
        )
        return result.rowcount == 1

    async def adjust_stock(self, product_id: int, delta: int) -> None:
        """Add ``delta`` to the stock in a single UPDATE."""
        await self.session.execute(
            update(Product).where(Product.id == product_id).values(stock=Product.stock + delta)
        )


class TagRepository(AsyncBaseRepository[Tag]):
    """Repository for tags and their product links."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Tag)

    async def get_by_slug(self, slug: str) -> Optional[Tag]:
        result = await self.session.execute(select(Tag).where(Tag.slug == slug))
        return result.scalars().first()

    async def search(self, q: Optional[str] = None) -> List[Tag]:
        stmt = select(Tag)
        if q:
            pattern = QueryBuilder.contains_pattern(q.strip().lower())
            stmt = stmt.where(or_(Tag.name.ilike(pattern, escape="\\"), Tag.description.ilike(pattern, escape="\\")))
        result = await self.session.execute(stmt.order_by(Tag.name))
        return list(result.scalars().all())

    async def for_product(self, product_id: int) -> List[Tag]:
        stmt = (
            select(Tag)
            .join(ProductTag, ProductTag.tag_id == Tag.id)
            .where(ProductTag.product_id == product_id)
            .order_by(Tag.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_link(self, product_id: int, tag_id: int) -> Optional[ProductTag]:
        return await self.session.get(ProductTag, (product_id, tag_id))

    async def add_link(self, product_id: int, tag_id: int) -> ProductTag:
        link = ProductTag(product_id=product_id, tag_id=tag_id)
        self.session.add(link)
        await self.session.flush()
        return link

    async def remove_links_for_product(self, product_id: int) -> None:
        await self.session.execute(delete(ProductTag).where(ProductTag.product_id == product_id))

    async def remove_links_for_tag(self, tag_id: int) -> None:
        await self.session.execute(delete(ProductTag).where(ProductTag.tag_id == tag_id))

    async def products(self, tag_id: int, include_inactive: bool = False) -> List[Product]:
        stmt = (
            select(Product)
            .join(ProductTag, ProductTag.product_id == Product.id)
            .where(ProductTag.tag_id == tag_id)
            .order_by(Product.name)
        )
        if not include_inactive:
            stmt = stmt.where(Product.is_active.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class FavoriteRepository(AsyncBaseRepository[Favorite]):
    """Repository for user wishlists."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Favorite)

    async def get_for(self, user_id: int, product_id: int) -> Optional[Favorite]:
        stmt = select(Favorite).where(Favorite.user_id == user_id, Favorite.product_id == product_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_with_products(self, user_id: int) -> List[tuple[Favorite, Product]]:
        """Favorites joined with their product, newest first."""
        stmt = (
            select(Favorite, Product)
            .join(Product, Product.id == Favorite.product_id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        )
        result = await self.session.execute(stmt)
        return [(fav, product) for fav, product in result.all()]

    async def remove_for_product(self, product_id: int) -> None:
        await self.session.execute(delete(Favorite).where(Favorite.product_id == product_id))

    async def remove_for_user(self, user_id: int) -> None:
        await self.session.execute(delete(Favorite).where(Favorite.user_id == user_id))
