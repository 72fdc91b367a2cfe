"""
Cart Endpoints.

Signed-in users work on their own cart. Guests are identified by the token
returned in ``guest_token`` (and echoed in the ``X-Guest-Cart`` response
header) which they send back in the ``X-Guest-Cart`` request header.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.database.entities.carts import Cart
from chezflora.core.models.io import CartItemAdd, CartItemUpdate, CartMerge, CartRead
from chezflora.server.core.constant import GUEST_CART_HEADER
from chezflora.server.services.cart import CartService
from chezflora.server.services.deps import CurrentUserDep, GuestTokenDep, OptionalUserDep

router = APIRouter(tags=["cart"])


async def _render(service: CartService, cart: Cart, response: Response) -> CartRead:
    view = await service.view(cart)
    if view.guest_token:
        response.headers[GUEST_CART_HEADER] = view.guest_token
    return view


@router.get(
    "",
    response_model=CartRead,
    summary="Get Cart",
    description="The caller's cart. Anonymous callers without a known token get a new guest cart.",
)
async def get_cart(
    response: Response,
    user: OptionalUserDep,
    guest_token: GuestTokenDep,
    session: AsyncSession = Depends(get_session),
) -> CartRead:
    service = CartService(session)
    return await _render(service, await service.resolve_cart(user, guest_token), response)


@router.delete("", response_model=CartRead, summary="Clear Cart")
async def clear_cart(
    response: Response,
    user: OptionalUserDep,
    guest_token: GuestTokenDep,
    session: AsyncSession = Depends(get_session),
) -> CartRead:
    service = CartService(session)
    cart = await service.clear(await service.resolve_cart(user, guest_token))
    return await _render(service, cart, response)


@router.post(
    "/items",
    response_model=CartRead,
    summary="Add Item",
    description="Add a product to the cart, summing with the quantity already there.",
    responses={404: {"description": "Product not found"}, 409: {"description": "Not enough stock"}},
)
async def add_item(
    payload: CartItemAdd,
    response: Response,
    user: OptionalUserDep,
    guest_token: GuestTokenDep,
    session: AsyncSession = Depends(get_session),
) -> CartRead:
    service = CartService(session)
    cart = await service.resolve_cart(user, guest_token)
    cart = await service.add_item(cart, payload.product_id, payload.quantity)
    return await _render(service, cart, response)


@router.patch(
    "/items/{product_id}",
    response_model=CartRead,
    summary="Update Item",
    description="Set the quantity of a line. Zero or less removes it.",
    responses={404: {"description": "Product not in the cart"}, 409: {"description": "Not enough stock"}},
)
async def update_item(
    product_id: int,
    payload: CartItemUpdate,
    response: Response,
    user: OptionalUserDep,
    guest_token: GuestTokenDep,
    session: AsyncSession = Depends(get_session),
) -> CartRead:
    service = CartService(session)
    cart = await service.resolve_cart(user, guest_token)
    cart = await service.update_item(cart, product_id, payload.quantity)
    return await _render(service, cart, response)


@router.delete(
    "/items/{product_id}",
    response_model=CartRead,
    summary="Remove Item",
    responses={404: {"description": "Product not in the cart"}},
)
async def remove_item(
    product_id: int,
    response: Response,
    user: OptionalUserDep,
    guest_token: GuestTokenDep,
    session: AsyncSession = Depends(get_session),
) -> CartRead:
    service = CartService(session)
    cart = await service.remove_item(await service.resolve_cart(user, guest_token), product_id)
    return await _render(service, cart, response)


@router.post(
    "/merge",
    response_model=CartRead,
    summary="Merge Guest Cart",
    description="Fold a guest cart into the signed-in user's cart. Quantities are capped at the available stock.",
)
async def merge_cart(
    payload: CartMerge,
    response: Response,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> CartRead:
    service = CartService(session)
    cart = await service.merge_guest_cart(user, payload.guest_token)
    return await _render(service, cart, response)
