"""
Favorites service: a user's product wishlist.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.catalog import Favorite, Product
from chezflora.core.database.entities.users import User
from chezflora.core.database.repositories import FavoriteRepository, ProductRepository
from chezflora.core.errors import NotFoundError

logger = logging.getLogger(__name__)


class FavoriteService:
    def __init__(self, session: AsyncSession, user: User):
        self.session = session
        self.user = user
        self.favorites = FavoriteRepository(session)
        self.products = ProductRepository(session)

    async def list_favorites(self) -> List[Tuple[Favorite, Product]]:
        """Favorites with their products, most recently added first."""
        return await self.favorites.list_with_products(self.user.id)

    async def add_favorite(self, product_id: int) -> Tuple[Favorite, Product, bool]:
        """Add a product; returns ``created=False`` when it was already a favorite."""
        product = await self.products.get_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFoundError("Product", product_id)
        existing = await self.favorites.get_for(self.user.id, product_id)
        if existing is not None:
            return existing, product, False
        favorite = await self.favorites.create(Favorite(user_id=self.user.id, product_id=product_id))
        await self.session.commit()
        logger.debug(f"User {self.user.id} added product {product_id} to favorites")
        return favorite, product, True

    async def remove_favorite(self, product_id: int) -> None:
        favorite = await self.favorites.get_for(self.user.id, product_id)
        if favorite is None:
            raise NotFoundError("Favorite", product_id, detail=f"Product {product_id} is not in favorites")
        await self.session.delete(favorite)
        await self.session.commit()
