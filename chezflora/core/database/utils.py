"""
Engine, session factory and DDL helpers for the storefront database.

SQLite (``aiosqlite``) serves development and the test-suite; Postgres
deployments may hand in Heroku-style ``postgres://`` URLs, which are moved to
the ``asyncpg`` driver here.
"""

from __future__ import annotations

import re

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base

_POSTGRES_SCHEME = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")


def normalize_url(db_url: str) -> str:
    """Rewrite ``postgres://`` style URLs to the ``postgresql+asyncpg://`` driver."""
    return _POSTGRES_SCHEME.sub("postgresql+asyncpg://", db_url, count=1)


def is_sqlite(db_url: str) -> bool:
    return make_url(normalize_url(db_url)).get_backend_name() == "sqlite"


def create_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """Build the async engine for ``db_url``.

    Server databases get ``pool_pre_ping`` so connections dropped by the
    server are replaced transparently; SQLite files have no pool to check.
    """
    url = normalize_url(db_url)
    if is_sqlite(url):
        return create_async_engine(url, echo=echo)
    return create_async_engine(url, echo=echo, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Services return entities after commit, so attributes must stay loaded
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create every storefront table that does not exist yet.

    Used by the test-suite and by development startups; deployed databases are
    managed by ``alembic upgrade head``.
    """
    from . import entities  # noqa: F401  registers the tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
