"""
Address book service.

Every operation is scoped to the signed-in user; another user's address is
reported as not found. Each (user, type) pair keeps at most one default.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.addresses import Address
from chezflora.core.database.entities.users import User
from chezflora.core.database.repositories import AddressRepository
from chezflora.core.errors import NotFoundError
from chezflora.core.models.io import AddressCreate

logger = logging.getLogger(__name__)


class AddressService:
    def __init__(self, session: AsyncSession, user: User):
        self.session = session
        self.user = user
        self.addresses = AddressRepository(session)

    async def list_addresses(self, address_type: Optional[str] = None) -> List[Address]:
        return await self.addresses.list_for_user(self.user.id, address_type)

    async def get_address(self, address_id: int) -> Address:
        address = await self.addresses.get_for_user(self.user.id, address_id)
        if address is None:
            raise NotFoundError("Address", address_id)
        return address

    async def default_address(self, address_type: str) -> Address:
        address = await self.addresses.get_default(self.user.id, address_type)
        if address is None:
            raise NotFoundError("Address", detail=f"No default {address_type} address")
        return address

    async def add_address(self, data: AddressCreate) -> Address:
        """Add an address; the first one of its type becomes the default."""
        address_type = data.type.value
        is_default = data.is_default or await self.addresses.count_of_type(self.user.id, address_type) == 0
        if is_default:
            await self.addresses.reset_defaults(self.user.id, address_type)
        address = await self.addresses.create(
            Address(
                user_id=self.user.id,
                type=address_type,
                is_default=is_default,
                **data.model_dump(exclude={"type", "is_default"}),
            )
        )
        await self.session.commit()
        logger.debug(f"User {self.user.id} added {address_type} address {address.id}")
        return address

    async def update_address(self, address_id: int, fields: Dict[str, Any]) -> Address:
        address = await self.get_address(address_id)
        make_default = fields.pop("is_default", None)
        for key, value in fields.items():
            if value is None and key not in ("address_line2", "phone"):
                continue
            setattr(address, key, value)
        if make_default:
            await self.addresses.reset_defaults(self.user.id, address.type, keep_id=address.id)
            address.is_default = True
        elif make_default is False:
            address.is_default = False
        address = await self.addresses.update(address)
        await self.session.commit()
        return address

    async def set_default(self, address_id: int) -> Address:
        return await self.update_address(address_id, {"is_default": True})

    async def delete_address(self, address_id: int) -> None:
        """Delete an address; removing the default promotes the oldest remaining one of that type."""
        address = await self.get_address(address_id)
        was_default = address.is_default
        address_type = address.type
        await self.session.delete(address)
        await self.session.flush()
        if was_default:
            successor = await self.addresses.oldest_of_type(self.user.id, address_type)
            if successor is not None:
                successor.is_default = True
                self.session.add(successor)
        await self.session.commit()
