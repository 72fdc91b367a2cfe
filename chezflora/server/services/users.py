"""
Back-office user management.

Every mutation is recorded in the audit log with the acting admin, the
target and a small JSON description of what changed. Only a superadmin may
grant the superadmin role or touch a superadmin's account.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.users import AuditLog, User, UserRole
from chezflora.core.database.repositories import (
    AddressRepository,
    AuditLogRepository,
    BlogPostRepository,
    CartRepository,
    FavoriteRepository,
    OrderRepository,
    QuoteRepository,
    UserRepository,
)
from chezflora.core.errors import ConflictError, InvalidOperationError, NotFoundError, PermissionDeniedError
from chezflora.core.models.io import UserCreate, UserUpdate
from chezflora.core.security import hash_password

logger = logging.getLogger(__name__)

SUPERADMIN = UserRole.SUPERADMIN.value


class UserAdminService:
    """Service for admin-side account management, bound to the acting admin."""

    def __init__(self, session: AsyncSession, actor: User):
        self.session = session
        self.actor = actor
        self.users = UserRepository(session)
        self.audit = AuditLogRepository(session)

    async def _record(
        self, action: str, target_id: Optional[int], details: Optional[Dict[str, Any]] = None
    ) -> None:
        entry = AuditLog(actor_id=self.actor.id, action=action, target_type="user", target_id=target_id)
        entry.set_details(details)
        await self.audit.create(entry)

    def _guard_superadmin(self, target: Optional[User], new_role: Optional[str] = None) -> None:
        touches_superadmin = new_role == SUPERADMIN or (target is not None and target.role == SUPERADMIN)
        if touches_superadmin and self.actor.role != SUPERADMIN:
            raise PermissionDeniedError("Only a superadmin can manage superadmin accounts")

    async def _ensure_email_free(self, email: str, exclude_id: Optional[int] = None) -> None:
        existing = await self.users.get_by_email(email)
        if existing and existing.id != exclude_id:
            raise ConflictError("An account with this email already exists")

    async def list_users(
        self,
        role: Optional[str] = None,
        status: Optional[str] = None,
        q: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[User]:
        return await self.users.search(role=role, status=status, q=q, limit=limit, offset=offset)

    async def get_user(self, user_id: int) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def create_user(self, data: UserCreate) -> User:
        self._guard_superadmin(None, data.role.value)
        await self._ensure_email_free(data.email)
        user = await self.users.create(
            User(
                email=data.email,
                password_hash=hash_password(data.password),
                first_name=data.first_name.strip(),
                last_name=data.last_name.strip(),
                role=data.role.value,
                status=data.status.value,
            )
        )
        await self._record("user.create", user.id, {"email": user.email, "role": user.role})
        await self.session.commit()
        logger.info(f"Admin {self.actor.id} created user {user.id}")
        return user

    async def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = await self.get_user(user_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        self._guard_superadmin(user, fields.get("role"))

        if "email" in fields and fields["email"] != user.email:
            await self._ensure_email_free(fields["email"], exclude_id=user.id)

        changes = {}
        for key, value in fields.items():
            if getattr(user, key) != value:
                changes[key] = {"from": getattr(user, key), "to": value}
                setattr(user, key, value)
        user = await self.users.update(user)
        await self._record("user.update", user.id, changes)
        await self.session.commit()
        return user

    async def change_status(self, user_id: int, status: str) -> User:
        user = await self.get_user(user_id)
        self._guard_superadmin(user)
        previous = user.status
        user.status = status
        user = await self.users.update(user)
        await self._record("user.status", user.id, {"from": previous, "to": status})
        await self.session.commit()
        logger.info(f"Admin {self.actor.id} set user {user.id} status to {status}")
        return user

    async def change_role(self, user_id: int, role: str) -> User:
        user = await self.get_user(user_id)
        self._guard_superadmin(user, role)
        previous = user.role
        user.role = role
        user = await self.users.update(user)
        await self._record("user.role", user.id, {"from": previous, "to": role})
        await self.session.commit()
        logger.info(f"Admin {self.actor.id} set user {user.id} role to {role}")
        return user

    async def change_password(self, user_id: int, password: str) -> User:
        user = await self.get_user(user_id)
        self._guard_superadmin(user)
        user.password_hash = hash_password(password)
        user = await self.users.update(user)
        await self._record("user.password", user.id)
        await self.session.commit()
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete an account; orders, quotes and posts stay, detached from it."""
        if user_id == self.actor.id:
            raise InvalidOperationError("You cannot delete your own account")
        user = await self.get_user(user_id)
        self._guard_superadmin(user)

        cart = await CartRepository(self.session).get_by_user(user.id)
        if cart is not None:
            await CartRepository(self.session).delete_cart(cart)
        await FavoriteRepository(self.session).remove_for_user(user.id)
        await AddressRepository(self.session).remove_for_user(user.id)
        await OrderRepository(self.session).detach_user(user.id)
        await QuoteRepository(self.session).detach_user(user.id)
        await BlogPostRepository(self.session).detach_author(user.id)

        email = user.email
        await self.session.delete(user)
        await self._record("user.delete", user_id, {"email": email})
        await self.session.commit()
        logger.info(f"Admin {self.actor.id} deleted user {user_id}")

    async def list_audit_logs(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[AuditLog]:
        return await self.audit.list_recent(limit=limit, offset=offset)
