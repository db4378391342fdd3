"""
Tests for catalog browsing, upload and uploader-side edits.
"""

import io

import pytest
from pydantic import ValidationError

from pdfmarket.core.exceptions import AccountNotFound
from pdfmarket.domains.catalog.schemas import PdfFilterRequest, UpdatePdfRequest, UploadPdfRequest
from pdfmarket.domains.catalog.services import CatalogService


@pytest.fixture
def catalog(uow, storage):
    return CatalogService(uow, storage, upload_reward_points=1)


def upload_request(**overrides):
    data = {"title": "Python Tips", "description": "Handy tips", "price_in_points": 30, "tags": ["python"]}
    data.update(overrides)
    return UploadPdfRequest(**data)


@pytest.fixture
async def shelf(make_account, make_document):
    alice = await make_account("alice")
    await make_document(alice, title="Python Basics", price_in_points=10, tags=["python", "intro"])
    await make_document(alice, title="Advanced SQL", price_in_points=60, tags=["sql"],
                        description="Window functions in depth")
    await make_document(alice, title="Hidden Python", price_in_points=5, is_active=False)
    return alice


class TestBrowse:

    async def test_only_active(self, catalog, shelf):
        titles = {item.title for item in await catalog.browse(PdfFilterRequest())}

        assert titles == {"Python Basics", "Advanced SQL"}

    async def test_query_matches_title_and_description(self, catalog, shelf):
        by_title = await catalog.browse(PdfFilterRequest(query="python"))
        by_description = await catalog.browse(PdfFilterRequest(query="WINDOW"))

        assert [item.title for item in by_title] == ["Python Basics"]
        assert [item.title for item in by_description] == ["Advanced SQL"]

    async def test_tag_and_price_range(self, catalog, shelf):
        tagged = await catalog.browse(PdfFilterRequest(tag="sql"))
        cheap = await catalog.browse(PdfFilterRequest(max_price_in_points=20))
        pricey = await catalog.browse(PdfFilterRequest(min_price_in_points=20))

        assert [item.title for item in tagged] == ["Advanced SQL"]
        assert [item.title for item in cheap] == ["Python Basics"]
        assert [item.title for item in pricey] == ["Advanced SQL"]

    async def test_uploader_name(self, catalog, shelf):
        items = await catalog.browse(PdfFilterRequest())

        assert {item.uploader_user_name for item in items} == {"alice"}


class TestUpload:

    async def test_stores_file_and_rewards_uploader(self, uow, storage, catalog, make_account, balance):
        uploader = await make_account("uploader", points_balance=5)

        response = await catalog.upload(uploader.id, upload_request(), io.BytesIO(b"%PDF-1.4"), "tips.pdf")

        assert response.uploader_points_balance == 6
        assert await balance(uploader.id) == 6
        assert response.pdf.uploader_user_name == "uploader"
        assert response.pdf.points_reward == 1

        stored = await uow.documents.get_by_id(response.pdf.id)
        assert stored.uploader_id == uploader.id
        assert stored.price_in_points == 30
        assert storage.files[stored.storage_ref][2] == b"%PDF-1.4"

    async def test_unknown_uploader_discards_file(self, uow, storage, catalog):
        with pytest.raises(AccountNotFound):
            await catalog.upload("ghost", upload_request(), io.BytesIO(b"%PDF"), "x.pdf")

        assert storage.files == {}
        assert await uow.documents.list_all() == []

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            upload_request(price_in_points=-1)

    def test_tags_are_cleaned(self):
        request = upload_request(tags=[" python ", "", "python", "web"])

        assert request.tags == ["python", "web"]


class TestUploaderEdits:

    async def test_update_by_uploader(self, uow, catalog, make_account, make_document):
        uploader = await make_account("uploader")
        document = await make_document(uploader, price_in_points=50)

        details = await catalog.update(uploader.id, document.id, UpdatePdfRequest(
            title="Renamed", description="New text", price_in_points=80, tags=["new"], is_active=True
        ))

        assert details.title == "Renamed"
        assert details.price_in_points == 80
        stored = await uow.documents.get_by_id(document.id)
        assert stored.tags == ["new"]
        assert stored.uploader_id == uploader.id

    async def test_update_by_stranger_is_ignored(self, uow, catalog, make_account, make_document):
        uploader = await make_account("uploader")
        stranger = await make_account("stranger")
        document = await make_document(uploader, title="Original")

        result = await catalog.update(stranger.id, document.id, UpdatePdfRequest(
            title="Hijacked", price_in_points=0
        ))

        assert result is None
        assert (await uow.documents.get_by_id(document.id)).title == "Original"

    async def test_deactivate_hides_from_catalog(self, catalog, make_account, make_document):
        uploader = await make_account("uploader")
        stranger = await make_account("stranger")
        document = await make_document(uploader)

        assert not await catalog.deactivate(stranger.id, document.id)
        assert await catalog.deactivate(uploader.id, document.id)

        assert await catalog.browse(PdfFilterRequest()) == []
        assert await catalog.get_details(document.id) is None
        assert (await catalog.get_details(document.id, viewer_id=uploader.id)).is_active is False

    async def test_my_uploads_include_inactive(self, catalog, make_account, make_document):
        uploader = await make_account("uploader")
        other = await make_account("other")
        await make_document(uploader, title="Active")
        await make_document(uploader, title="Inactive", is_active=False)
        await make_document(other, title="Foreign")

        titles = {item.title for item in await catalog.list_my_uploads(uploader.id)}

        assert titles == {"Active", "Inactive"}
