from pdfmarket.domains.catalog.entities import PdfDocument
from pdfmarket.domains.purchases.services import PurchaseService
from pdfmarket.domains.repositories import CatalogStore


class EntitlementChecker:
    """Проверка права на скачивание: загрузивший пользователь или покупатель.

    Кэш ``owned_document_ids`` у учетной записи здесь не используется,
    право определяется только по записям о покупках.
    """

    def __init__(self, documents: CatalogStore, purchase_service: PurchaseService):
        self.documents = documents
        self.purchase_service = purchase_service

    async def can_download(self, user_id: str, document_id: str) -> bool:
        """Проверка права пользователя на скачивание документа"""
        document = await self.documents.get_by_id(document_id)
        if document is None:
            return False
        return await self.is_entitled(user_id, document)

    async def is_entitled(self, user_id: str, document: PdfDocument) -> bool:
        if document.is_uploaded_by(user_id):
            return True
        return await self.purchase_service.has_purchased(user_id, document.id)
