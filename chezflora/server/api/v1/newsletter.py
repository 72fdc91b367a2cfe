"""
Newsletter Endpoints.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.models.io import (
    SubscribeResponse,
    SubscriptionRead,
    SubscriptionRequest,
    SubscriptionStatus,
)
from chezflora.core.utils import normalize_email
from chezflora.server.services.deps import AdminDep
from chezflora.server.services.newsletter import NewsletterService

router = APIRouter(tags=["newsletter"])


@router.post(
    "/subscribe",
    response_model=SubscribeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Subscribe",
    responses={200: {"description": "Email already subscribed"}, 422: {"description": "Invalid email"}},
)
async def subscribe(
    payload: SubscriptionRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
) -> SubscribeResponse:
    subscription, created = await NewsletterService(session).subscribe(payload.email)
    if not created:
        response.status_code = status.HTTP_200_OK
    return SubscribeResponse(
        status="subscribed" if created else "already_subscribed",
        email=subscription.email,
        subscribed_at=subscription.subscribed_at,
    )


@router.post(
    "/unsubscribe",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unsubscribe",
    responses={404: {"description": "Email is not subscribed"}},
)
async def unsubscribe(payload: SubscriptionRequest, session: AsyncSession = Depends(get_session)) -> Response:
    await NewsletterService(session).unsubscribe(payload.email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/status", response_model=SubscriptionStatus, summary="Subscription Status")
async def subscription_status(
    email: str = Query(min_length=1),
    session: AsyncSession = Depends(get_session),
) -> SubscriptionStatus:
    email = normalize_email(email)
    return SubscriptionStatus(email=email, subscribed=await NewsletterService(session).is_subscribed(email))


@router.get("/subscribers", response_model=List[SubscriptionRead], summary="List Subscribers")
async def list_subscribers(admin: AdminDep, session: AsyncSession = Depends(get_session)) -> List[SubscriptionRead]:
    return [SubscriptionRead.model_validate(s) for s in await NewsletterService(session).list_subscribers()]


@router.get(
    "/export",
    summary="Export Subscribers",
    description="Subscribers as CSV with the header Email,SubscribedAt.",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_subscribers(admin: AdminDep, session: AsyncSession = Depends(get_session)) -> Response:
    body = await NewsletterService(session).export_csv()
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="newsletter-subscribers.csv"'},
    )
