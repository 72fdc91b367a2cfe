"""
Process-wide engine and the ``get_session`` request dependency.

The engine is built once from ``settings.database``; tests swap
``get_session`` out through ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = logging.getLogger(__name__)

engine = create_engine(settings.database.url, echo=settings.database.echo)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request; it is closed when the request ends."""
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Prepare the schema at startup.

    Creates missing tables when ``database.create_tables_on_startup`` is set,
    which is the development default. Deployments that run ``alembic upgrade
    head`` turn it off and this becomes a no-op.
    """
    if not settings.database.create_tables_on_startup:
        logger.info("Table creation on startup disabled; relying on Alembic migrations")
        return
    await create_all(engine)
    logger.info("Database tables ensured")
