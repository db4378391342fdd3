import io

import pytest

from pdfmarket.domains.catalog.entities import PdfDocument, PDF_CONTENT_TYPE
from pdfmarket.domains.identity.entities import Account, ROLE_USER
from pdfmarket.infrastructure.memory import InMemoryFileStorage, InMemoryUnitOfWork

PDF_BYTES = b"%PDF-1.4\n% test document\n%%EOF\n"


@pytest.fixture
async def uow():
    """In-memory unit of work, created inside the test event loop."""
    return InMemoryUnitOfWork()


@pytest.fixture
def storage():
    return InMemoryFileStorage()


@pytest.fixture
def make_account(uow):
    """Insert an account directly into the in-memory store.

    Uses a placeholder hash so that tests not dealing with passwords skip bcrypt.
    """
    counter = {"n": 0}

    async def factory(username=None, points_balance=0, role=ROLE_USER, password_hash="not-a-real-hash"):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        account = Account(
            id=f"acc-{username}",
            username=username,
            email=f"{username}@example.com",
            password_hash=password_hash,
            role=role,
            points_balance=points_balance
        )
        await uow.accounts.insert(account)
        return account

    return factory


@pytest.fixture
def make_document(uow, storage):
    """Insert a document, storing a file for it unless ``with_file`` is False."""

    async def factory(uploader, title="Sample", price_in_points=10, tags=("sample",),
                      is_active=True, with_file=True, description="A sample PDF"):
        storage_ref = None
        if with_file:
            storage_ref = await storage.put(io.BytesIO(PDF_BYTES), f"{title}.pdf", PDF_CONTENT_TYPE)
        document = PdfDocument.create_document(
            title=title,
            description=description,
            uploader_id=uploader.id,
            price_in_points=price_in_points,
            tags=list(tags),
            storage_ref=storage_ref
        )
        document.is_active = is_active
        await uow.documents.insert(document)
        return document

    return factory


@pytest.fixture
def balance(uow):
    """Current persisted balance of an account."""
    async def read(account_id):
        account = await uow.accounts.get_by_id(account_id)
        return account.points_balance

    return read


@pytest.fixture
def pdf_bytes():
    return PDF_BYTES
