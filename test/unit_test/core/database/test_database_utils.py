import pytest
from sqlalchemy import DateTime, inspect

from chezflora.core.database.base import Base
from chezflora.core.database.entities.blog import BlogPost
from chezflora.core.database.utils import create_all, create_engine, create_sessionmaker, is_sqlite, normalize_url
from chezflora.core.utils import utc_now


@pytest.mark.parametrize(
    "url,expected",
    [
        ("postgres://u:p@db:5432/shop", "postgresql+asyncpg://u:p@db:5432/shop"),
        ("postgresql://u:p@db/shop", "postgresql+asyncpg://u:p@db/shop"),
        ("postgresql+psycopg2://u:p@db/shop", "postgresql+asyncpg://u:p@db/shop"),
        ("postgresql+asyncpg://u:p@db/shop", "postgresql+asyncpg://u:p@db/shop"),
        ("sqlite+aiosqlite:///./chezflora.db", "sqlite+aiosqlite:///./chezflora.db"),
    ],
)
def test_normalize_url(url: str, expected: str):
    assert normalize_url(url) == expected


def test_is_sqlite():
    assert is_sqlite("sqlite+aiosqlite:///:memory:")
    assert not is_sqlite("postgres://u:p@db/shop")


@pytest.mark.asyncio
async def test_create_all_builds_every_table():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    try:
        await create_all(engine)
        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    finally:
        await engine.dispose()

    assert {"users", "categories", "products", "carts", "orders", "quotes", "blog_posts", "blog_comments"} <= tables


def test_timestamp_columns_are_naive():
    from chezflora.core.database import entities  # noqa: F401

    columns = [
        column
        for table in Base.metadata.tables.values()
        for column in table.columns
        if isinstance(column.type, DateTime)
    ]
    assert columns
    assert all(column.type.timezone is False for column in columns)
    assert BlogPost.__table__.c.scheduled_at.nullable is True
    assert BlogPost.__table__.c.created_at.nullable is False


@pytest.mark.asyncio
async def test_naive_utc_timestamps_round_trip():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    try:
        await create_all(engine)
        async with create_sessionmaker(engine)() as session:
            post = BlogPost(title="Peonies", content="Cut at an angle.", scheduled_at=utc_now())
            session.add(post)
            await session.commit()
            await session.refresh(post)
    finally:
        await engine.dispose()

    assert post.created_at.tzinfo is None
    assert post.scheduled_at.tzinfo is None
