"""
Address Endpoints.

Address book of the signed-in user. Addresses of other users answer 404.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.database.entities.addresses import AddressType
from chezflora.core.models.io import AddressCreate, AddressRead, AddressUpdate
from chezflora.server.services.addresses import AddressService
from chezflora.server.services.deps import CurrentUserDep

router = APIRouter(tags=["addresses"])


@router.get("", response_model=List[AddressRead], summary="List Addresses")
async def list_addresses(
    user: CurrentUserDep,
    type: Optional[AddressType] = None,
    session: AsyncSession = Depends(get_session),
) -> List[AddressRead]:
    addresses = await AddressService(session, user).list_addresses(type.value if type else None)
    return [AddressRead.model_validate(a) for a in addresses]


@router.post(
    "",
    response_model=AddressRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Address",
    description="The first address of a type becomes its default.",
)
async def add_address(
    payload: AddressCreate,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> AddressRead:
    return AddressRead.model_validate(await AddressService(session, user).add_address(payload))


@router.get(
    "/default/{address_type}",
    response_model=AddressRead,
    summary="Default Address",
    responses={404: {"description": "No address of this type"}},
)
async def default_address(
    address_type: AddressType,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> AddressRead:
    return AddressRead.model_validate(await AddressService(session, user).default_address(address_type.value))


@router.get("/{address_id}", response_model=AddressRead, summary="Get Address")
async def get_address(address_id: int, user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> AddressRead:
    return AddressRead.model_validate(await AddressService(session, user).get_address(address_id))


@router.patch("/{address_id}", response_model=AddressRead, summary="Update Address")
async def update_address(
    address_id: int,
    payload: AddressUpdate,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> AddressRead:
    address = await AddressService(session, user).update_address(address_id, payload.model_dump(exclude_unset=True))
    return AddressRead.model_validate(address)


@router.put("/{address_id}/default", response_model=AddressRead, summary="Set Default Address")
async def set_default_address(
    address_id: int,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> AddressRead:
    return AddressRead.model_validate(await AddressService(session, user).set_default(address_id))


@router.delete(
    "/{address_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Address",
    description="Deleting the default address promotes the oldest remaining one of the same type.",
)
async def delete_address(address_id: int, user: CurrentUserDep, session: AsyncSession = Depends(get_session)) -> Response:
    await AddressService(session, user).delete_address(address_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
