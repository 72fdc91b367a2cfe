"""
Product Endpoints.

Public catalog browsing plus admin product management and tagging.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.models.io import (
    ProductCreate,
    ProductDetail,
    ProductRead,
    ProductTagsUpdate,
    ProductUpdate,
    StockUpdate,
    TagRead,
)
from chezflora.server.services.catalog import ProductService
from chezflora.server.services.deps import AdminDep, OptionalUserDep
from chezflora.server.services.tags import TagService

router = APIRouter(tags=["products"])

ProductSort = Literal["newest", "price_asc", "price_desc", "name"]


@router.get(
    "",
    response_model=List[ProductRead],
    summary="List Products",
    description="Browse active products. The category filter accepts a slug or an id and includes subcategories by default.",
)
async def list_products(
    viewer: OptionalUserDep,
    category: Optional[str] = None,
    include_subcategories: bool = True,
    tag: Optional[str] = None,
    q: Optional[str] = Query(default=None, description="Search name, description, SKU and category slug"),
    popular: Optional[bool] = None,
    featured: Optional[bool] = None,
    min_price: Optional[Decimal] = Query(default=None, ge=0),
    max_price: Optional[Decimal] = Query(default=None, ge=0),
    sort: ProductSort = "newest",
    include_inactive: bool = Query(default=False, description="Admins only"),
    limit: int = Query(default=24, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> List[ProductRead]:
    products = await ProductService(session).list_products(
        category=category,
        include_subcategories=include_subcategories,
        tag=tag,
        q=q,
        popular=popular,
        featured=featured,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        limit=limit,
        offset=offset,
        include_inactive=include_inactive and viewer is not None and viewer.is_admin,
    )
    return [ProductRead.model_validate(p) for p in products]


@router.get("/popular", response_model=List[ProductRead], summary="Popular Products")
async def popular_products(
    limit: int = Query(default=8, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
) -> List[ProductRead]:
    return [ProductRead.model_validate(p) for p in await ProductService(session).popular_products(limit)]


@router.get("/featured", response_model=List[ProductRead], summary="Featured Products")
async def featured_products(
    limit: int = Query(default=8, ge=1, le=50),
    session: AsyncSession = Depends(get_session),
) -> List[ProductRead]:
    return [ProductRead.model_validate(p) for p in await ProductService(session).featured_products(limit)]


@router.get(
    "/{product_ref}",
    response_model=ProductDetail,
    summary="Get Product",
    description="Product by id or slug, with its tags and category breadcrumbs. Inactive products are only visible to admins.",
    responses={404: {"description": "Product not found"}},
)
async def get_product(
    product_ref: str,
    viewer: OptionalUserDep,
    session: AsyncSession = Depends(get_session),
) -> ProductDetail:
    service = ProductService(session)
    product = await service.get_product(product_ref, include_inactive=viewer is not None and viewer.is_admin)
    return ProductDetail.model_validate(await service.product_detail(product))


@router.post(
    "",
    response_model=ProductDetail,
    status_code=status.HTTP_201_CREATED,
    summary="Create Product",
    responses={
        404: {"description": "Category or tag not found"},
        409: {"description": "Slug or SKU already in use"},
    },
)
async def create_product(
    payload: ProductCreate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> ProductDetail:
    service = ProductService(session)
    product = await service.create_product(payload)
    return ProductDetail.model_validate(await service.product_detail(product))


@router.patch("/{product_id}", response_model=ProductDetail, summary="Update Product")
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> ProductDetail:
    service = ProductService(session)
    product = await service.update_product(product_id, payload.model_dump(exclude_unset=True))
    return ProductDetail.model_validate(await service.product_detail(product))


@router.put("/{product_id}/stock", response_model=ProductRead, summary="Update Stock")
async def update_stock(
    product_id: int,
    payload: StockUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> ProductRead:
    return ProductRead.model_validate(await ProductService(session).update_stock(product_id, payload.stock))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Product")
async def delete_product(
    product_id: int,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> Response:
    await ProductService(session).delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{product_id}/tags", response_model=List[TagRead], summary="Product Tags")
async def product_tags(product_id: int, session: AsyncSession = Depends(get_session)) -> List[TagRead]:
    return [TagRead.model_validate(t) for t in await TagService(session).product_tags(product_id)]


@router.put(
    "/{product_id}/tags",
    response_model=List[TagRead],
    summary="Replace Product Tags",
    description="Replace every tag of a product with the given tag ids.",
)
async def set_product_tags(
    product_id: int,
    payload: ProductTagsUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> List[TagRead]:
    tags = await TagService(session).set_product_tags(product_id, payload.tag_ids)
    return [TagRead.model_validate(t) for t in tags]


@router.post(
    "/{product_id}/tags/{tag_id}",
    response_model=List[TagRead],
    status_code=status.HTTP_201_CREATED,
    summary="Attach Tag",
    responses={409: {"description": "Tag already attached"}},
)
async def add_product_tag(
    product_id: int,
    tag_id: int,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> List[TagRead]:
    tags = await TagService(session).add_tag_to_product(product_id, tag_id)
    return [TagRead.model_validate(t) for t in tags]


@router.delete(
    "/{product_id}/tags/{tag_id}",
    response_model=List[TagRead],
    summary="Detach Tag",
    responses={404: {"description": "Tag not attached to the product"}},
)
async def remove_product_tag(
    product_id: int,
    tag_id: int,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> List[TagRead]:
    tags = await TagService(session).remove_tag_from_product(product_id, tag_id)
    return [TagRead.model_validate(t) for t in tags]
