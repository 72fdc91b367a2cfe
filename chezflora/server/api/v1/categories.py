"""
Category Endpoints.

Read access to the category hierarchy is public; changes require an admin.
Categories are addressed by numeric id or by slug.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.models.io import (
    CategoryCreate,
    CategoryNode,
    CategoryRead,
    CategoryReorder,
    CategoryUpdate,
)
from chezflora.server.services.catalog import CategoryService
from chezflora.server.services.deps import AdminDep

router = APIRouter(tags=["categories"])


@router.get(
    "",
    response_model=List[CategoryRead],
    summary="List Categories",
    description="Every category as a flat list, ordered by parent then position.",
)
async def list_categories(session: AsyncSession = Depends(get_session)) -> List[CategoryRead]:
    return [CategoryRead.model_validate(c) for c in await CategoryService(session).list_categories()]


@router.get(
    "/tree",
    response_model=List[CategoryNode],
    summary="Category Tree",
    description="Root categories with their children nested recursively.",
)
async def category_tree(session: AsyncSession = Depends(get_session)) -> List[CategoryNode]:
    return await CategoryService(session).category_tree()


@router.get(
    "/main",
    response_model=List[CategoryRead],
    summary="Main Categories",
    description="Root categories ordered by position.",
)
async def main_categories(session: AsyncSession = Depends(get_session)) -> List[CategoryRead]:
    return [CategoryRead.model_validate(c) for c in await CategoryService(session).main_categories()]


@router.get(
    "/{category_ref}",
    response_model=CategoryRead,
    summary="Get Category",
    responses={404: {"description": "Category not found"}},
)
async def get_category(category_ref: str, session: AsyncSession = Depends(get_session)) -> CategoryRead:
    return CategoryRead.model_validate(await CategoryService(session).get_category(category_ref))


@router.get(
    "/{category_ref}/children",
    response_model=List[CategoryRead],
    summary="Child Categories",
    description="Direct children of a category ordered by position.",
)
async def child_categories(category_ref: str, session: AsyncSession = Depends(get_session)) -> List[CategoryRead]:
    children = await CategoryService(session).child_categories(category_ref)
    return [CategoryRead.model_validate(c) for c in children]


@router.get(
    "/{category_ref}/path",
    response_model=List[CategoryRead],
    summary="Category Path",
    description="Breadcrumbs from the root category down to this one.",
)
async def category_path(category_ref: str, session: AsyncSession = Depends(get_session)) -> List[CategoryRead]:
    path = await CategoryService(session).category_path(category_ref)
    return [CategoryRead.model_validate(c) for c in path]


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    description="Create a category. The slug is derived from the name and the position appended after the last sibling when omitted.",
    responses={
        404: {"description": "Parent category not found"},
        409: {"description": "Slug already in use"},
    },
)
async def create_category(
    payload: CategoryCreate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> CategoryRead:
    return CategoryRead.model_validate(await CategoryService(session).create_category(payload))


@router.patch(
    "/{category_ref}",
    response_model=CategoryRead,
    summary="Update Category",
    responses={
        400: {"description": "Cannot move a category under itself or a descendant"},
        409: {"description": "Slug already in use"},
    },
)
async def update_category(
    category_ref: str,
    payload: CategoryUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> CategoryRead:
    category = await CategoryService(session).update_category(category_ref, payload.model_dump(exclude_unset=True))
    return CategoryRead.model_validate(category)


@router.put(
    "/{category_ref}/position",
    response_model=CategoryRead,
    summary="Reorder Category",
    description="Move a category to a position under a parent (null for the root level); siblings are renumbered 1..n.",
)
async def reorder_category(
    category_ref: str,
    payload: CategoryReorder,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> CategoryRead:
    category = await CategoryService(session).reorder_category(category_ref, payload.position, payload.parent_id)
    return CategoryRead.model_validate(category)


@router.delete(
    "/{category_ref}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Category",
    description="Delete a category. Its children move up to its parent. Products block the deletion unless reassign_products is true.",
    responses={409: {"description": "Category still holds products"}},
)
async def delete_category(
    category_ref: str,
    admin: AdminDep,
    reassign_products: bool = Query(default=False),
    session: AsyncSession = Depends(get_session),
) -> Response:
    await CategoryService(session).delete_category(category_ref, reassign_products=reassign_products)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
