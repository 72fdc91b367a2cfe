"""
Quote Endpoints.

Clients request custom arrangements and answer the priced quotes; admins
price, send and follow them up.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.database.entities.quotes import QuoteStatus
from chezflora.core.models.io import (
    QuoteCreate,
    QuoteDecision,
    QuoteRead,
    QuoteSend,
    QuoteStatusUpdate,
    QuoteUpdate,
)
from chezflora.server.services.deps import AdminDep, CurrentUserDep
from chezflora.server.services.quotes import QuoteService

router = APIRouter(tags=["quotes"])


@router.post(
    "",
    response_model=QuoteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request Quote",
    description="Create a quote request. Customer name and email come from the account.",
)
async def create_quote(
    payload: QuoteCreate,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> QuoteRead:
    service = QuoteService(session)
    quote = await service.create_quote(user, payload)
    return QuoteRead.model_validate(await service.view(quote))


@router.get("/mine", response_model=List[QuoteRead], summary="My Quotes")
async def list_my_quotes(user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> List[QuoteRead]:
    service = QuoteService(session)
    return [QuoteRead.model_validate(await service.view(q)) for q in await service.list_my_quotes(user)]


@router.get("/mine/{quote_id}", response_model=QuoteRead, summary="My Quote")
async def get_my_quote(quote_id: int, user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> QuoteRead:
    service = QuoteService(session)
    return QuoteRead.model_validate(await service.view(await service.get_my_quote(user, quote_id)))


@router.post(
    "/mine/{quote_id}/accept",
    response_model=QuoteRead,
    summary="Accept Quote",
    responses={400: {"description": "Quote is not awaiting an answer or has expired"}},
)
async def accept_quote(
    quote_id: int,
    user: CurrentUserDep,
    payload: Optional[QuoteDecision] = None,
    session: AsyncSession = Depends(get_session),
) -> QuoteRead:
    service = QuoteService(session)
    quote = await service.accept_quote(user, quote_id, payload.comment if payload else None)
    return QuoteRead.model_validate(await service.view(quote))


@router.post(
    "/mine/{quote_id}/decline",
    response_model=QuoteRead,
    summary="Decline Quote",
    responses={400: {"description": "Quote is not awaiting an answer or has expired"}},
)
async def decline_quote(
    quote_id: int,
    user: CurrentUserDep,
    payload: Optional[QuoteDecision] = None,
    session: AsyncSession = Depends(get_session),
) -> QuoteRead:
    service = QuoteService(session)
    quote = await service.decline_quote(user, quote_id, payload.comment if payload else None)
    return QuoteRead.model_validate(await service.view(quote))


@router.post(
    "/mine/{quote_id}/cancel",
    response_model=QuoteRead,
    summary="Cancel Quote Request",
    responses={400: {"description": "Quote is already settled"}},
)
async def cancel_my_quote(
    quote_id: int,
    user: CurrentUserDep,
    payload: Optional[QuoteDecision] = None,
    session: AsyncSession = Depends(get_session),
) -> QuoteRead:
    service = QuoteService(session)
    quote = await service.cancel_my_quote(user, quote_id, payload.comment if payload else None)
    return QuoteRead.model_validate(await service.view(quote))


@router.get("", response_model=List[QuoteRead], summary="List Quotes")
async def list_quotes(
    admin: AdminDep,
    quote_status: Optional[QuoteStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> List[QuoteRead]:
    service = QuoteService(session)
    quotes = await service.list_quotes(status=quote_status.value if quote_status else None, limit=limit, offset=offset)
    return [QuoteRead.model_validate(await service.view(q)) for q in quotes]


@router.get("/{quote_id}", response_model=QuoteRead, summary="Get Quote")
async def get_quote(quote_id: int, admin: AdminDep, session: AsyncSession = Depends(get_session)) -> QuoteRead:
    service = QuoteService(session)
    return QuoteRead.model_validate(await service.view(await service.get_quote(quote_id)))


@router.patch("/{quote_id}", response_model=QuoteRead, summary="Update Quote")
async def update_quote(
    quote_id: int,
    payload: QuoteUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> QuoteRead:
    service = QuoteService(session)
    quote = await service.update_quote(quote_id, payload.model_dump(exclude_unset=True))
    return QuoteRead.model_validate(await service.view(quote))


@router.put("/{quote_id}/status", response_model=QuoteRead, summary="Update Quote Status")
async def update_quote_status(
    quote_id: int,
    payload: QuoteStatusUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> QuoteRead:
    service = QuoteService(session)
    quote = await service.update_status(quote_id, payload.status.value, payload.comment, actor=admin)
    return QuoteRead.model_validate(await service.view(quote))


@router.post(
    "/{quote_id}/send",
    response_model=QuoteRead,
    summary="Send Quote",
    description="Price the quote from its line items and send it to the customer.",
    responses={400: {"description": "Quote is settled or the validity date is in the past"}},
)
async def send_quote(
    quote_id: int,
    payload: QuoteSend,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> QuoteRead:
    service = QuoteService(session)
    quote = await service.send_quote(quote_id, payload, actor=admin)
    return QuoteRead.model_validate(await service.view(quote))


@router.delete("/{quote_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Quote")
async def delete_quote(quote_id: int, admin: AdminDep, session: AsyncSession = Depends(get_session)) -> Response:
    await QuoteService(session).delete_quote(quote_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
