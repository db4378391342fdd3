from pdfmarket.db.models.account import AccountModel
from pdfmarket.db.models.document import PdfDocumentModel
from pdfmarket.db.models.purchase import PurchaseModel
from pdfmarket.db.models.stored_file import StoredFileModel

__all__ = [
    "AccountModel",
    "PdfDocumentModel",
    "PurchaseModel",
    "StoredFileModel"
]
