"""
Generic async repository shared by every storefront aggregate.

Repositories only ``flush``; committing is left to the service layer so that
a business operation spanning several tables (checkout, merge of a guest
cart) commits or rolls back as one unit.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from chezflora.core.utils import utc_now

EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(Generic[EntityType]):
    """CRUD, bulk lookup and filtered listing for one SQLModel table.

    Subclasses bind ``model`` in their constructor and add the queries that
    are specific to their table.
    """

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    async def create(self, entity: EntityType) -> EntityType:
        """Add ``entity`` and flush so that its primary key and defaults are populated."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def get_many(self, entity_ids: Iterable[int]) -> Dict[int, EntityType]:
        """Load several rows at once, keyed by id; unknown ids are simply absent."""
        ids = list(set(entity_ids))
        if not ids:
            return {}
        result = await self.session.execute(select(self.model).where(self.model.id.in_(ids)))
        return {entity.id: entity for entity in result.scalars().all()}

    async def update(self, entity: EntityType) -> EntityType:
        """Flush pending changes, stamping ``updated_at`` on tables that carry it."""
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: int) -> bool:
        """Delete by id; returns False when there was nothing to delete."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.flush()
        return True

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Any = None,
    ) -> List[EntityType]:
        """
        List rows of the table.

        Args:
            limit: Page size
            offset: Rows to skip
            filters: Column filters, see ``QueryBuilder.apply_filters``
            order_by: Column expression to sort by; defaults to the primary key
        """
        stmt = select(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = stmt.order_by(order_by if order_by is not None else self.model.id)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = select(func.count()).select_from(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class QueryBuilder:
    """Statement helpers shared by the repositories' listing queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """
        Narrow ``stmt`` by column values.

        ``None`` values and names that are not columns of ``model`` are
        ignored, so optional query parameters can be passed straight through.
        Lists, tuples and sets become ``IN`` clauses.
        """
        for key, value in filters.items():
            if value is None or not hasattr(model, key):
                continue
            column = getattr(model, key)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            else:
                stmt = stmt.where(column == value)
        return stmt

    @staticmethod
    def contains_pattern(text: str) -> str:
        """``%text%`` for ``like(..., escape="\\")`` with the LIKE wildcards in ``text`` escaped."""
        escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"%{escaped}%"

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        return stmt
