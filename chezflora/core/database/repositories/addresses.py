"""
Address repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.addresses import Address
from .base import AsyncBaseRepository


class AddressRepository(AsyncBaseRepository[Address]):
    """Repository for addresses, always scoped to their owner."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Address)

    async def list_for_user(self, user_id: int, address_type: Optional[str] = None) -> List[Address]:
        """Owner's addresses, defaults first then oldest first."""
        stmt = select(Address).where(Address.user_id == user_id)
        if address_type:
            stmt = stmt.where(Address.type == address_type)
        stmt = stmt.order_by(Address.is_default.desc(), Address.created_at, Address.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_user(self, user_id: int, address_id: int) -> Optional[Address]:
        stmt = select(Address).where(Address.id == address_id, Address.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_default(self, user_id: int, address_type: str) -> Optional[Address]:
        stmt = select(Address).where(
            Address.user_id == user_id,
            Address.type == address_type,
            Address.is_default.is_(True),
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_of_type(self, user_id: int, address_type: str) -> int:
        return len(await self.list_for_user(user_id, address_type))

    async def reset_defaults(self, user_id: int, address_type: str, keep_id: Optional[int] = None) -> None:
        """Clear ``is_default`` on every address of the type except ``keep_id``."""
        stmt = update(Address).where(Address.user_id == user_id, Address.type == address_type)
        if keep_id is not None:
            stmt = stmt.where(Address.id != keep_id)
        await self.session.execute(stmt.values(is_default=False))

    async def oldest_of_type(self, user_id: int, address_type: str) -> Optional[Address]:
        stmt = (
            select(Address)
            .where(Address.user_id == user_id, Address.type == address_type)
            .order_by(Address.created_at, Address.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def remove_for_user(self, user_id: int) -> None:
        await self.session.execute(delete(Address).where(Address.user_id == user_id))
