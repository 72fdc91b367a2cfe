"""Unit tests for newsletter subscriptions."""

import pytest

from chezflora.core.errors import InvalidOperationError, NotFoundError
from chezflora.server.services.newsletter import NewsletterService

pytestmark = pytest.mark.asyncio


async def test_subscribe_is_idempotent_and_normalized(session):
    service = NewsletterService(session)
    first, created = await service.subscribe("  Rose@Example.com ")
    again, created_again = await service.subscribe("rose@example.com")

    assert created is True
    assert created_again is False
    assert first.id == again.id
    assert first.email == "rose@example.com"
    assert await service.is_subscribed("ROSE@example.com")


async def test_invalid_email(session):
    with pytest.raises(InvalidOperationError):
        await NewsletterService(session).subscribe("not-an-email")


async def test_unsubscribe(session):
    service = NewsletterService(session)
    await service.subscribe("lily@example.com")
    await service.unsubscribe("lily@example.com")

    assert not await service.is_subscribed("lily@example.com")
    with pytest.raises(NotFoundError, match="This email is not subscribed"):
        await service.unsubscribe("lily@example.com")


async def test_export_csv(session):
    service = NewsletterService(session)
    await service.subscribe("a@example.com")
    await service.subscribe("b@example.com")

    lines = (await service.export_csv()).splitlines()
    assert lines[0] == "Email,SubscribedAt"
    assert {line.split(",")[0] for line in lines[1:]} == {"a@example.com", "b@example.com"}
