"""
Order Endpoints.

Checkout and order history for customers; order management for admins.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.database.entities.orders import OrderStatus
from chezflora.core.models.io import CheckoutRequest, OrderCancel, OrderRead, OrderStatusUpdate
from chezflora.server.services.deps import AdminDep, CurrentUserDep
from chezflora.server.services.orders import OrderService

router = APIRouter(tags=["orders"])


@router.post(
    "/checkout",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
    summary="Checkout",
    description="Turn the signed-in user's cart into a pending order. Stock is reserved and the cart emptied in the same transaction.",
    responses={
        400: {"description": "Empty cart or unknown address"},
        409: {"description": "Not enough stock for an item"},
    },
)
async def checkout(
    payload: CheckoutRequest,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    service = OrderService(session)
    order = await service.checkout(user, payload)
    return OrderRead.model_validate(await service.view(order))


@router.get("/mine", response_model=List[OrderRead], summary="My Orders", description="Newest first.")
async def list_my_orders(user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> List[OrderRead]:
    service = OrderService(session)
    return [OrderRead.model_validate(await service.view(o)) for o in await service.list_my_orders(user)]


@router.get("/mine/{order_id}", response_model=OrderRead, summary="My Order")
async def get_my_order(order_id: int, user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> OrderRead:
    service = OrderService(session)
    return OrderRead.model_validate(await service.view(await service.get_my_order(user, order_id)))


@router.post(
    "/mine/{order_id}/cancel",
    response_model=OrderRead,
    summary="Cancel My Order",
    description="Cancel a pending or processing order and put its items back in stock.",
    responses={400: {"description": "Order can no longer be cancelled"}},
)
async def cancel_my_order(
    order_id: int,
    user: CurrentUserDep,
    payload: Optional[OrderCancel] = None,
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    service = OrderService(session)
    order = await service.cancel_my_order(user, order_id, payload.reason if payload else None)
    return OrderRead.model_validate(await service.view(order))


@router.get("", response_model=List[OrderRead], summary="List Orders")
async def list_orders(
    admin: AdminDep,
    order_status: Optional[OrderStatus] = Query(default=None, alias="status"),
    user_id: Optional[int] = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> List[OrderRead]:
    service = OrderService(session)
    orders = await service.list_orders(
        status=order_status.value if order_status else None, user_id=user_id, limit=limit, offset=offset
    )
    return [OrderRead.model_validate(await service.view(o)) for o in orders]


@router.get("/{order_id}", response_model=OrderRead, summary="Get Order")
async def get_order(order_id: int, admin: AdminDep, session: AsyncSession = Depends(get_session)) -> OrderRead:
    service = OrderService(session)
    return OrderRead.model_validate(await service.view(await service.get_order(order_id)))


@router.put(
    "/{order_id}/status",
    response_model=OrderRead,
    summary="Update Order Status",
    description="Record a status change. Cancelling restocks the items; a cancelled order stays cancelled.",
    responses={400: {"description": "Order is cancelled"}},
)
async def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> OrderRead:
    service = OrderService(session)
    order = await service.update_status(order_id, payload.status.value, payload.comment, actor=admin)
    return OrderRead.model_validate(await service.view(order))
