"""
Tests for the SQLAlchemy stores against a temporary SQLite database.

The same purchase flow that runs on the in-memory stores is checked here
for atomic commit and rollback on a real transaction, including two
purchases racing on separate sessions.
"""

import asyncio
import io

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from pdfmarket.core.db import init_db
from pdfmarket.core.exceptions import AccountAlreadyExists, InsufficientPoints
from pdfmarket.db.repositories.file_storage import DatabaseFileStorage
from pdfmarket.db.unit_of_work import SqlAlchemyUnitOfWork
from pdfmarket.domains.admin.services import AdminService
from pdfmarket.domains.catalog.entities import BrowseFilter, PdfDocument
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.purchases.entities import PurchaseResult
from pdfmarket.domains.purchases.services import PurchaseService


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'market.db'}")
    await init_db(bind=engine)
    yield async_sessionmaker(bind=engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def sql_uow(session_factory):
    async with session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def make_account(username, points_balance=0):
    return Account(
        id=f"acc-{username}",
        username=username,
        email=f"{username}@example.com",
        password_hash="not-a-real-hash",
        points_balance=points_balance
    )


async def fresh_balance(session_factory, account_id):
    async with session_factory() as session:
        account = await SqlAlchemyUnitOfWork(session).accounts.get_by_id(account_id)
        return account.points_balance


@pytest.fixture
async def market(sql_uow):
    """Buyer with 50 points, seller with 5 and one document priced 10."""
    buyer = make_account("buyer", 50)
    seller = make_account("seller", 5)
    document = PdfDocument.create_document(
        title="Sql Guide",
        description="Joins and indexes",
        uploader_id=seller.id,
        price_in_points=10,
        tags=["sql", "database"],
        storage_ref="ref-1"
    )
    async with sql_uow:
        await sql_uow.accounts.insert(buyer)
        await sql_uow.accounts.insert(seller)
        await sql_uow.documents.insert(document)
    return buyer, seller, document


class TestAccountRepository:

    async def test_roundtrip_and_handle_lookup(self, sql_uow):
        account = make_account("reader", 12)
        account.mark_owned("doc-1")
        async with sql_uow:
            await sql_uow.accounts.insert(account)

        by_name = await sql_uow.accounts.get_by_handle("reader")
        by_email = await sql_uow.accounts.get_by_handle("reader@example.com")

        assert by_name.id == by_email.id == account.id
        assert by_name.points_balance == 12
        assert by_name.owned_document_ids == {"doc-1"}
        assert await sql_uow.accounts.get_by_handle("nobody") is None

    async def test_duplicate_username(self, sql_uow):
        async with sql_uow:
            await sql_uow.accounts.insert(make_account("reader"))

        duplicate = make_account("reader")
        duplicate.id = "acc-other"
        duplicate.email = "other@example.com"
        with pytest.raises(AccountAlreadyExists):
            async with sql_uow:
                await sql_uow.accounts.insert(duplicate)

        assert len(await sql_uow.accounts.list_all()) == 1

    async def test_withdraw_only_when_balance_covers(self, sql_uow, session_factory):
        async with sql_uow:
            await sql_uow.accounts.insert(make_account("reader", 12))

        async with sql_uow:
            assert await sql_uow.accounts.withdraw_points("acc-reader", 10)
            assert not await sql_uow.accounts.withdraw_points("acc-reader", 10)
            assert not await sql_uow.accounts.withdraw_points("acc-ghost", 1)

        assert await fresh_balance(session_factory, "acc-reader") == 2

    async def test_deposit_and_owned_documents(self, sql_uow, session_factory):
        async with sql_uow:
            await sql_uow.accounts.insert(make_account("reader", 0))

        async with sql_uow:
            await sql_uow.accounts.deposit_points("acc-reader", 7)
            await sql_uow.accounts.add_owned_document("acc-reader", "doc-2")
            await sql_uow.accounts.add_owned_document("acc-reader", "doc-1")
            await sql_uow.accounts.add_owned_document("acc-reader", "doc-2")

        stored = await sql_uow.accounts.get_by_id("acc-reader")
        assert stored.points_balance == 7
        assert stored.owned_document_ids == {"doc-1", "doc-2"}

        with pytest.raises(KeyError):
            async with sql_uow:
                await sql_uow.accounts.deposit_points("acc-ghost", 1)

    async def test_replace_missing_account(self, sql_uow):
        with pytest.raises(KeyError):
            async with sql_uow:
                await sql_uow.accounts.replace(make_account("ghost"))


class TestDocumentRepository:

    async def test_browse_filters(self, sql_uow, market):
        _, seller, document = market
        hidden = PdfDocument.create_document(
            title="Hidden Sql", description="", uploader_id=seller.id, price_in_points=1
        )
        hidden.deactivate()
        async with sql_uow:
            await sql_uow.documents.insert(hidden)

        assert [d.id for d in await sql_uow.documents.browse(BrowseFilter())] == [document.id]
        assert [d.id for d in await sql_uow.documents.browse(BrowseFilter(query="INDEXES"))] == [document.id]
        assert await sql_uow.documents.browse(BrowseFilter(tag="python")) == []
        assert await sql_uow.documents.browse(BrowseFilter(min_price=11)) == []
        assert len(await sql_uow.documents.list_all()) == 2
        assert len(await sql_uow.documents.list_all_by_uploader(seller.id)) == 2

    async def test_replace_and_delete(self, sql_uow, market):
        _, _, document = market
        document.update_metadata(
            title="Renamed", description="", price_in_points=80, tags=["new"], is_active=True
        )
        async with sql_uow:
            await sql_uow.documents.replace(document)

        stored = await sql_uow.documents.get_by_id(document.id)
        assert stored.title == "Renamed"
        assert stored.tags == ["new"]

        async with sql_uow:
            assert await sql_uow.documents.delete(document.id)
            assert not await sql_uow.documents.delete(document.id)


class TestSqlPurchaseFlow:

    async def test_purchase_commits_all_writes(self, sql_uow, session_factory, market):
        buyer, seller, document = market

        result = await PurchaseService(sql_uow).purchase(buyer.id, document.id)

        assert result.buyer_points_balance == 40
        assert await fresh_balance(session_factory, buyer.id) == 40
        assert await fresh_balance(session_factory, seller.id) == 15

        async with session_factory() as session:
            reader = SqlAlchemyUnitOfWork(session)
            purchases = await reader.purchases.list_by_buyer(buyer.id)
            stored_buyer = await reader.accounts.get_by_id(buyer.id)

        assert [p.price_in_points for p in purchases] == [10]
        assert document.id in stored_buyer.owned_document_ids

    async def test_failed_purchase_rolls_back(self, sql_uow, session_factory, market):
        buyer, seller, document = market
        async with sql_uow:
            poor = await sql_uow.accounts.get_by_id(buyer.id, for_update=True)
            poor.points_balance = 3
            await sql_uow.accounts.replace(poor)

        with pytest.raises(InsufficientPoints):
            await PurchaseService(sql_uow).purchase(buyer.id, document.id)

        assert await fresh_balance(session_factory, buyer.id) == 3
        assert await fresh_balance(session_factory, seller.id) == 5
        assert await sql_uow.purchases.list_all() == []

    async def test_parallel_purchases_cannot_overdraw(self, sql_uow, session_factory):
        buyer = make_account("buyer", 10)
        seller = make_account("seller", 0)
        documents = [
            PdfDocument.create_document(
                title=title, description="", uploader_id=seller.id, price_in_points=10
            )
            for title in ("First", "Second")
        ]
        async with sql_uow:
            await sql_uow.accounts.insert(buyer)
            await sql_uow.accounts.insert(seller)
            for document in documents:
                await sql_uow.documents.insert(document)

        async def buy(document_id):
            async with session_factory() as session:
                return await PurchaseService(SqlAlchemyUnitOfWork(session)).purchase(buyer.id, document_id)

        results = await asyncio.gather(*(buy(d.id) for d in documents), return_exceptions=True)

        assert sum(isinstance(r, PurchaseResult) for r in results) == 1
        assert sum(isinstance(r, InsufficientPoints) for r in results) == 1
        assert await fresh_balance(session_factory, buyer.id) == 0
        assert await fresh_balance(session_factory, seller.id) == 10

        async with session_factory() as session:
            purchases = await SqlAlchemyUnitOfWork(session).purchases.list_all()
        assert len(purchases) == 1

    async def test_stored_timestamps_are_utc(self, sql_uow, session_factory, market):
        buyer, _, document = market
        result = await PurchaseService(sql_uow).purchase(buyer.id, document.id)

        async with session_factory() as session:
            stored = await SqlAlchemyUnitOfWork(session).purchases.list_by_buyer(buyer.id)

        assert result.purchased_at.tzinfo is not None
        assert stored[0].purchased_at.replace(tzinfo=None) == result.purchased_at.replace(tzinfo=None)

    async def test_stats_after_purchase(self, sql_uow, session_factory, market):
        buyer, _, document = market
        await PurchaseService(sql_uow).purchase(buyer.id, document.id)

        stats = await AdminService(sql_uow, DatabaseFileStorage(session_factory)).get_stats()

        assert stats.total_users == 2
        assert stats.total_pdfs == 1
        assert stats.total_purchases == 1
        assert stats.total_points_in_system == 55


class TestDatabaseFileStorage:

    async def test_put_get_delete(self, session_factory):
        storage = DatabaseFileStorage(session_factory)

        storage_ref = await storage.put(io.BytesIO(b"%PDF-1.4 body"), "body.pdf", "application/pdf")
        target = io.BytesIO()
        await storage.get(storage_ref, target)

        assert target.getvalue() == b"%PDF-1.4 body"

        await storage.delete(storage_ref)
        with pytest.raises(FileNotFoundError):
            await storage.get(storage_ref, io.BytesIO())
        with pytest.raises(FileNotFoundError):
            await storage.delete(storage_ref)
