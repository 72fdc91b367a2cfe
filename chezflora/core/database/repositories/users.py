"""
User and audit log repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import AuditLog, User
from .base import AsyncBaseRepository, QueryBuilder


class UserRepository(AsyncBaseRepository[User]):
    """Repository for account data access."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Look up an account by its normalized email."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def search(
        self,
        role: Optional[str] = None,
        status: Optional[str] = None,
        q: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[User]:
        """Filter accounts by role, status and a free-text match on name or email."""
        stmt = QueryBuilder.apply_filters(select(User), User, {"role": role, "status": status})
        if q:
            pattern = QueryBuilder.contains_pattern(q.strip().lower())
            stmt = stmt.where(
                or_(
                    User.email.ilike(pattern, escape="\\"),
                    User.first_name.ilike(pattern, escape="\\"),
                    User.last_name.ilike(pattern, escape="\\"),
                )
            )
        stmt = QueryBuilder.apply_pagination(stmt.order_by(User.id), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class AuditLogRepository(AsyncBaseRepository[AuditLog]):
    """Repository for the admin audit trail."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AuditLog)

    async def list_recent(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[AuditLog]:
        """Entries newest first."""
        stmt = select(AuditLog).order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
