"""Unit tests for back-office account management and its audit trail."""

from decimal import Decimal

import pytest

from chezflora.core.database.entities.orders import Order
from chezflora.core.database.entities.users import User
from chezflora.core.errors import ConflictError, InvalidOperationError, PermissionDeniedError
from chezflora.core.models.io import UserCreate, UserUpdate
from chezflora.core.security import verify_password
from chezflora.server.services.users import UserAdminService


async def test_create_user_is_audited(session, admin_user):
    service = UserAdminService(session, admin_user)
    user = await service.create_user(UserCreate(email="new@example.com", password="flowers123", first_name="Léa"))

    assert user.role == "client"
    logs = await service.list_audit_logs()
    assert logs[0].action == "user.create"
    assert logs[0].actor_id == admin_user.id
    assert logs[0].get_details() == {"email": "new@example.com", "role": "client"}


async def test_create_duplicate_email(session, admin_user, client_user):
    with pytest.raises(ConflictError):
        await UserAdminService(session, admin_user).create_user(
            UserCreate(email=client_user.email, password="flowers123")
        )


async def test_update_records_changes(session, admin_user, client_user):
    service = UserAdminService(session, admin_user)
    updated = await service.update_user(client_user.id, UserUpdate(first_name="Clara"))

    assert updated.first_name == "Clara"
    log = (await service.list_audit_logs())[0]
    assert log.action == "user.update"
    assert log.get_details() == {"first_name": {"from": "Claire", "to": "Clara"}}


async def test_status_role_and_password(session, admin_user, client_user):
    service = UserAdminService(session, admin_user)
    await service.change_status(client_user.id, "suspended")
    await service.change_role(client_user.id, "admin")
    user = await service.change_password(client_user.id, "brand-new-pass")

    assert user.status == "suspended"
    assert user.role == "admin"
    assert verify_password("brand-new-pass", user.password_hash)
    actions = [log.action for log in await service.list_audit_logs()]
    assert {"user.status", "user.role", "user.password"} <= set(actions)


async def test_admin_cannot_touch_superadmins(session, admin_user, superadmin_user, client_user):
    service = UserAdminService(session, admin_user)
    with pytest.raises(PermissionDeniedError, match="Only a superadmin"):
        await service.change_status(superadmin_user.id, "locked")
    with pytest.raises(PermissionDeniedError):
        await service.change_role(client_user.id, "superadmin")
    with pytest.raises(PermissionDeniedError):
        await service.create_user(UserCreate(email="boss@example.com", password="flowers123", role="superadmin"))


async def test_superadmin_can_promote(session, superadmin_user, client_user):
    user = await UserAdminService(session, superadmin_user).change_role(client_user.id, "superadmin")
    assert user.role == "superadmin"


async def test_cannot_delete_self(session, admin_user):
    with pytest.raises(InvalidOperationError, match="You cannot delete your own account"):
        await UserAdminService(session, admin_user).delete_user(admin_user.id)


async def test_delete_detaches_orders(session, session_maker, admin_user, client_user):
    async with session_maker() as setup:
        order = Order(
            user_id=client_user.id,
            subtotal=Decimal("10.00"),
            total=Decimal("17.90"),
            shipping_cost=Decimal("7.90"),
            payment_method="card",
            shipping_address="{}",
            billing_address="{}",
        )
        setup.add(order)
        await setup.commit()
        order_id = order.id

    service = UserAdminService(session, admin_user)
    await service.delete_user(client_user.id)

    async with session_maker() as check:
        assert await check.get(User, client_user.id) is None
        assert (await check.get(Order, order_id)).user_id is None
    assert (await service.list_audit_logs())[0].action == "user.delete"
