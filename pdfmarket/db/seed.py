import io
import logging

from pdfmarket.domains.catalog.entities import PdfDocument, PDF_CONTENT_TYPE
from pdfmarket.domains.identity.entities import Account, ROLE_ADMIN, ROLE_USER
from pdfmarket.domains.purchases.services import PurchaseService
from pdfmarket.domains.repositories import FileStorage, UnitOfWork

logger = logging.getLogger(__name__)

DEMO_USERS = [
    # username, email, password, role, balance
    ("admin", "admin@example.com", "Admin123!", ROLE_ADMIN, 9999),
    ("alice", "alice@example.com", "Alice123!", ROLE_USER, 300),
    ("bob", "bob@example.com", "Bob123!", ROLE_USER, 300),
]

DEMO_DOCUMENTS = [
    # title, description, uploader, price, tags
    ("Clean Architecture Notes", "Seeded PDF: short notes about layers and boundaries.",
     "admin", 50, ["architecture", "clean", "notes"]),
    ("SQLAlchemy Cheat Sheet", "Seeded PDF: common queries and patterns.",
     "alice", 75, ["sqlalchemy", "database"]),
    ("JWT Quick Guide", "Seeded PDF: JWT basics + roles.",
     "bob", 60, ["jwt", "security", "auth"]),
]

# Перекрестные покупки: покупатель -> название документа
DEMO_PURCHASES = [
    ("alice", "Clean Architecture Notes"),
    ("bob", "SQLAlchemy Cheat Sheet"),
    ("admin", "JWT Quick Guide"),
]


def fake_pdf_bytes(title: str) -> bytes:
    """Минимальный файл PDF для демо-данных"""
    text = f"%PDF-1.4\n% Fake PDF for seed: {title}\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"
    return text.encode("utf-8")


async def seed_demo_data(uow: UnitOfWork, storage: FileStorage) -> bool:
    """Заполнение пустых хранилищ демо-данными"""
    if (
        await uow.accounts.list_all()
        or await uow.documents.list_all()
        or await uow.purchases.list_all()
    ):
        return False

    accounts = {}
    documents = {}

    async with uow:
        for username, email, password, role, balance in DEMO_USERS:
            account = Account.create_account(
                username=username,
                email=email,
                password=password,
                points_balance=balance,
                role=role
            )
            await uow.accounts.insert(account)
            accounts[username] = account

        for title, description, uploader, price, tags in DEMO_DOCUMENTS:
            storage_ref = await storage.put(io.BytesIO(fake_pdf_bytes(title)), f"{title}.pdf", PDF_CONTENT_TYPE)
            document = PdfDocument.create_document(
                title=title,
                description=description,
                uploader_id=accounts[uploader].id,
                price_in_points=price,
                tags=tags,
                storage_ref=storage_ref
            )
            await uow.documents.insert(document)
            documents[title] = document

    purchase_service = PurchaseService(uow)
    for buyer, title in DEMO_PURCHASES:
        await purchase_service.purchase(accounts[buyer].id, documents[title].id)

    logger.info(
        f"Seeded {len(accounts)} users, {len(documents)} PDFs and {len(DEMO_PURCHASES)} purchases"
    )
    return True
