"""
Favorite Endpoints.

The signed-in user's wishlist.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.models.io import FavoriteRead, ProductRead
from chezflora.server.services.deps import CurrentUserDep
from chezflora.server.services.favorites import FavoriteService

router = APIRouter(tags=["favorites"])


@router.get("", response_model=List[FavoriteRead], summary="List Favorites", description="Newest favorites first.")
async def list_favorites(user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> List[FavoriteRead]:
    favorites = await FavoriteService(session, user).list_favorites()
    return [FavoriteRead(product=ProductRead.model_validate(p), added_at=f.created_at) for f, p in favorites]


@router.post(
    "/{product_id}",
    response_model=FavoriteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Favorite",
    description="Add a product to the wishlist. Answers 200 when it is already there.",
    responses={200: {"description": "Product already in favorites"}, 404: {"description": "Product not found"}},
)
async def add_favorite(
    product_id: int,
    response: Response,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> FavoriteRead:
    favorite, product, created = await FavoriteService(session, user).add_favorite(product_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return FavoriteRead(product=ProductRead.model_validate(product), added_at=favorite.created_at)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Favorite",
    responses={404: {"description": "Product is not in favorites"}},
)
async def remove_favorite(product_id: int, user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> Response:
    await FavoriteService(session, user).remove_favorite(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
