"""
Tag Endpoints.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.models.io import ProductRead, TagCreate, TagRead, TagUpdate
from chezflora.server.services.deps import AdminDep
from chezflora.server.services.tags import TagService

router = APIRouter(tags=["tags"])


@router.get(
    "",
    response_model=List[TagRead],
    summary="List Tags",
    description="All tags, or those whose name or description contains q.",
)
async def list_tags(q: Optional[str] = None, session: AsyncSession = Depends(get_session)) -> List[TagRead]:
    return [TagRead.model_validate(t) for t in await TagService(session).search_tags(q)]


@router.get("/{tag_id}", response_model=TagRead, summary="Get Tag")
async def get_tag(tag_id: int, session: AsyncSession = Depends(get_session)) -> TagRead:
    return TagRead.model_validate(await TagService(session).get_tag(tag_id))


@router.get("/{tag_id}/products", response_model=List[ProductRead], summary="Products With Tag")
async def products_by_tag(tag_id: int, session: AsyncSession = Depends(get_session)) -> List[ProductRead]:
    return [ProductRead.model_validate(p) for p in await TagService(session).products_by_tag(tag_id)]


@router.post(
    "",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Tag",
    responses={409: {"description": "Slug already in use"}},
)
async def create_tag(
    payload: TagCreate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> TagRead:
    return TagRead.model_validate(await TagService(session).create_tag(payload))


@router.patch("/{tag_id}", response_model=TagRead, summary="Update Tag")
async def update_tag(
    tag_id: int,
    payload: TagUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> TagRead:
    tag = await TagService(session).update_tag(tag_id, payload.model_dump(exclude_unset=True))
    return TagRead.model_validate(tag)


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Tag",
    description="Delete a tag and detach it from every product.",
)
async def delete_tag(
    tag_id: int,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> Response:
    await TagService(session).delete_tag(tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
