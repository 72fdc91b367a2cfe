"""
User Management Endpoints.

Back-office account administration. Every route requires an admin; changes
to superadmin accounts require a superadmin. All mutations are audited.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.database.entities.users import UserRole, UserStatus
from chezflora.core.models.io import (
    AuditLogRead,
    PasswordReset,
    RoleChange,
    StatusChange,
    UserCreate,
    UserRead,
    UserUpdate,
)
from chezflora.server.services.deps import AdminDep
from chezflora.server.services.users import UserAdminService

router = APIRouter(tags=["users"])


@router.get(
    "",
    response_model=List[UserRead],
    summary="List Users",
    description="List accounts, filtered by role, status or a search on name and email.",
)
async def list_users(
    admin: AdminDep,
    role: Optional[UserRole] = None,
    account_status: Optional[UserStatus] = Query(default=None, alias="status"),
    q: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> List[UserRead]:
    users = await UserAdminService(session, admin).list_users(
        role=role.value if role else None,
        status=account_status.value if account_status else None,
        q=q,
        limit=limit,
        offset=offset,
    )
    return [UserRead.model_validate(u) for u in users]


@router.get(
    "/audit-logs",
    response_model=List[AuditLogRead],
    summary="Audit Log",
    description="Administrative actions on accounts, newest first.",
)
async def list_audit_logs(
    admin: AdminDep,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> List[AuditLogRead]:
    entries = await UserAdminService(session, admin).list_audit_logs(limit=limit, offset=offset)
    return [AuditLogRead.model_validate(e) for e in entries]


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    responses={
        403: {"description": "Only a superadmin can create a superadmin"},
        409: {"description": "Email already registered"},
    },
)
async def create_user(
    payload: UserCreate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    user = await UserAdminService(session, admin).create_user(payload)
    return UserRead.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
async def get_user(
    user_id: int,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    return UserRead.model_validate(await UserAdminService(session, admin).get_user(user_id))


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    summary="Update User",
    responses={
        403: {"description": "Only a superadmin can manage superadmin accounts"},
        404: {"description": "User not found"},
        409: {"description": "Email already registered"},
    },
)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    user = await UserAdminService(session, admin).update_user(user_id, payload)
    return UserRead.model_validate(user)


@router.put("/{user_id}/status", response_model=UserRead, summary="Change Account Status")
async def change_status(
    user_id: int,
    payload: StatusChange,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    user = await UserAdminService(session, admin).change_status(user_id, payload.status.value)
    return UserRead.model_validate(user)


@router.put("/{user_id}/role", response_model=UserRead, summary="Change Role")
async def change_role(
    user_id: int,
    payload: RoleChange,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    user = await UserAdminService(session, admin).change_role(user_id, payload.role.value)
    return UserRead.model_validate(user)


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT, summary="Reset Password")
async def reset_password(
    user_id: int,
    payload: PasswordReset,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> Response:
    await UserAdminService(session, admin).change_password(user_id, payload.password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete User",
    responses={
        400: {"description": "Admins cannot delete their own account"},
        404: {"description": "User not found"},
    },
)
async def delete_user(
    user_id: int,
    admin: AdminDep,
    session: AsyncSession = Depends(get_session),
) -> Response:
    await UserAdminService(session, admin).delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
