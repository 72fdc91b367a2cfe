"""Unit tests for the repository layer against an in-memory SQLite database."""

from decimal import Decimal

import pytest
from sqlmodel import select

from chezflora.core.database.entities.catalog import Category, Favorite, Product
from chezflora.core.database.repositories.base import AsyncBaseRepository, QueryBuilder
from chezflora.core.database.repositories.catalog import (
    CategoryRepository,
    FavoriteRepository,
    ProductRepository,
    TagRepository,
)


class TestAsyncBaseRepository:
    async def test_create_get_update_delete(self, session):
        repo = AsyncBaseRepository(session, Category)

        created = await repo.create(Category(slug="roses", name="Roses"))
        assert created.id is not None

        fetched = await repo.get_by_id(created.id)
        assert fetched is created

        before = created.updated_at
        created.name = "Red roses"
        updated = await repo.update(created)
        assert updated.name == "Red roses"
        assert updated.updated_at >= before

        assert await repo.delete(created.id) is True
        assert await repo.get_by_id(created.id) is None
        assert await repo.delete(created.id) is False

    async def test_list_and_count_with_filters(self, session):
        repo = AsyncBaseRepository(session, Category)
        root = await repo.create(Category(slug="fresh-flowers", name="Fresh flowers"))
        await repo.create(Category(slug="roses", name="Roses", parent_id=root.id))
        await repo.create(Category(slug="tulips", name="Tulips", parent_id=root.id, position=2))

        assert await repo.count() == 3
        assert await repo.count({"parent_id": root.id}) == 2
        assert len(await repo.list(limit=2)) == 2
        assert len(await repo.list(filters={"parent_id": root.id}, offset=1)) == 1

    async def test_get_many_and_in_filters(self, session):
        repo = AsyncBaseRepository(session, Category)
        roses = await repo.create(Category(slug="roses", name="Roses", position=2))
        tulips = await repo.create(Category(slug="tulips", name="Tulips", position=1))
        await repo.create(Category(slug="orchids", name="Orchids", position=3))

        found = await repo.get_many([roses.id, tulips.id, roses.id, 9999])
        assert set(found) == {roses.id, tulips.id}
        assert await repo.get_many([]) == {}

        subset = await repo.list(filters={"slug": ["roses", "tulips"]}, order_by=Category.position)
        assert [c.slug for c in subset] == ["tulips", "roses"]


class TestQueryBuilder:
    def test_none_and_unknown_filters_are_ignored(self):
        stmt = QueryBuilder.apply_filters(select(Product), Product, {"popular": None, "no_such_column": 1})
        assert "WHERE" not in str(stmt)

    def test_filters_and_pagination(self):
        stmt = QueryBuilder.apply_filters(select(Product), Product, {"featured": True})
        stmt = QueryBuilder.apply_pagination(stmt, 5, 10)
        sql = str(stmt)
        assert "products.featured" in sql
        assert "LIMIT" in sql
        assert "OFFSET" in sql

    @pytest.mark.parametrize(
        "text,expected",
        [("roses", "%roses%"), ("100%", "%100\\%%"), ("r_se", "%r\\_se%"), ("a\\b", "%a\\\\b%")],
    )
    def test_contains_pattern_escapes_wildcards(self, text, expected):
        assert QueryBuilder.contains_pattern(text) == expected


class TestProductRepository:
    async def test_decrement_stock_is_conditional(self, session_maker, make_product):
        product = await make_product("Red rose bouquet", stock=3)

        async with session_maker() as session:
            repo = ProductRepository(session)
            assert await repo.decrement_stock(product.id, 2) is True
            assert await repo.decrement_stock(product.id, 2) is False
            await session.commit()

        async with session_maker() as session:
            assert (await session.get(Product, product.id)).stock == 1

    async def test_search_filters_and_sorts(self, session, make_category, make_product):
        roses = await make_category("Roses")
        await make_product("Cheap rose", price="5.00", category_id=roses.id)
        await make_product("Luxury rose", price="80.00", category_id=roses.id, popular=True)
        await make_product("Monstera", price="35.00")
        await make_product("Hidden", price="1.00", is_active=False)

        repo = ProductRepository(session)
        names = [p.name for p in await repo.search(sort="price_asc")]
        assert names == ["Cheap rose", "Monstera", "Luxury rose"]

        in_roses = await repo.search(category_ids=[roses.id], sort="name")
        assert [p.name for p in in_roses] == ["Cheap rose", "Luxury rose"]

        assert [p.name for p in await repo.search(popular=True)] == ["Luxury rose"]
        assert [p.name for p in await repo.search(q="MONST")] == ["Monstera"]
        priced = await repo.search(min_price=Decimal("10"), max_price=Decimal("50"))
        assert [p.name for p in priced] == ["Monstera"]
        assert len(await repo.search(include_inactive=True)) == 4

    async def test_search_matches_category_slug(self, session, make_category, make_product):
        tulips = await make_category("Tulips")
        await make_product("Spring mix", category_id=tulips.id)
        await make_product("Orchid")

        found = await ProductRepository(session).search(q="tulips")
        assert [p.name for p in found] == ["Spring mix"]

    async def test_reassign_category(self, session_maker, make_category, make_product):
        old = await make_category("Old")
        new = await make_category("New")
        product = await make_product("Lily", category_id=old.id)

        async with session_maker() as session:
            repo = ProductRepository(session)
            assert await repo.count_in_category(old.id) == 1
            await repo.reassign_category(old.id, new.id)
            await session.commit()

        async with session_maker() as session:
            assert (await session.get(Product, product.id)).category_id == new.id


class TestCategoryRepository:
    async def test_children_and_positions(self, session, make_category):
        root = await make_category("Bouquets")
        await make_category("Wedding", parent_id=root.id, position=2)
        await make_category("Birthday", parent_id=root.id, position=1)

        repo = CategoryRepository(session)
        assert [c.name for c in await repo.children(root.id)] == ["Birthday", "Wedding"]
        assert [c.name for c in await repo.children(None)] == ["Bouquets"]
        assert await repo.max_position(root.id) == 2
        assert await repo.max_position(999) == 0
        assert (await repo.get_by_slug("bouquets")).id == root.id


class TestTagRepository:
    async def test_links(self, session, make_product, make_tag):
        product = await make_product("Sunflowers")
        hidden = await make_product("Old stock", is_active=False)
        tag = await make_tag("Bestseller")

        repo = TagRepository(session)
        await repo.add_link(product.id, tag.id)
        await repo.add_link(hidden.id, tag.id)

        assert [t.slug for t in await repo.for_product(product.id)] == ["bestseller"]
        assert await repo.get_link(product.id, tag.id) is not None
        assert [p.name for p in await repo.products(tag.id)] == ["Sunflowers"]
        assert len(await repo.products(tag.id, include_inactive=True)) == 2

        await repo.remove_links_for_tag(tag.id)
        assert await repo.for_product(product.id) == []

    async def test_search(self, session, make_tag):
        await make_tag("Promotion")
        await make_tag("Eco friendly")
        assert [t.name for t in await TagRepository(session).search("eco")] == ["Eco friendly"]


class TestFavoriteRepository:
    async def test_list_with_products(self, session, client_user, make_product):
        product = await make_product("Peonies")
        repo = FavoriteRepository(session)
        await repo.create(Favorite(user_id=client_user.id, product_id=product.id))

        rows = await repo.list_with_products(client_user.id)
        assert len(rows) == 1
        assert rows[0][1].name == "Peonies"
        assert await repo.get_for(client_user.id, product.id) is not None

        await repo.remove_for_user(client_user.id)
        assert await repo.get_for(client_user.id, product.id) is None
