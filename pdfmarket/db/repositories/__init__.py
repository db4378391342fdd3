from pdfmarket.db.repositories.account_repository import AccountRepository
from pdfmarket.db.repositories.document_repository import DocumentRepository
from pdfmarket.db.repositories.purchase_repository import PurchaseRepository
from pdfmarket.db.repositories.file_storage import DatabaseFileStorage

__all__ = [
    "AccountRepository",
    "DocumentRepository",
    "PurchaseRepository",
    "DatabaseFileStorage"
]
