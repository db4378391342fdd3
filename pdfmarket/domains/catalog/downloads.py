import io
import logging
from typing import Optional

from pdfmarket.domains.catalog.access import EntitlementChecker
from pdfmarket.domains.catalog.entities import FileResult, PDF_CONTENT_TYPE
from pdfmarket.domains.repositories import CatalogStore, FileStorage

logger = logging.getLogger(__name__)


class DownloadResolver:
    """Выдача файла PDF пользователю, имеющему на него право"""

    def __init__(self, documents: CatalogStore, storage: FileStorage, entitlement: EntitlementChecker):
        self.documents = documents
        self.storage = storage
        self.entitlement = entitlement

    async def resolve_download(self, user_id: str, document_id: str) -> Optional[FileResult]:
        """Получение файла для скачивания.

        Возвращает None и для отсутствующего документа, и при отсутствии
        права, чтобы не раскрывать существование документа.

        Неактивный документ недоступен никому, в том числе прежним
        покупателям. Это принятая политика, а не ошибка.
        """
        document = await self.documents.get_by_id(document_id)
        if document is None or not document.is_downloadable:
            return None

        if not await self.entitlement.is_entitled(user_id, document):
            logger.info(f"Download denied: user {user_id} is not entitled to document {document_id}")
            return None

        buffer = io.BytesIO()
        await self.storage.get(document.storage_ref, buffer)

        return FileResult(
            file_name=document.download_file_name(),
            content_type=PDF_CONTENT_TYPE,
            content=buffer.getvalue()
        )
