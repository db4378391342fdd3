import logging
from typing import BinaryIO, Dict, List, Optional

from pdfmarket.core.exceptions import AccountNotFound
from pdfmarket.domains.catalog.entities import PdfDocument, BrowseFilter, PDF_CONTENT_TYPE
from pdfmarket.domains.catalog.schemas import (
    PdfDetails, PdfFilterRequest, PdfSummary, UpdatePdfRequest,
    UploadPdfRequest, UploadPdfResponse
)
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.repositories import FileStorage, UnitOfWork

logger = logging.getLogger(__name__)

UNKNOWN_UPLOADER = "Unknown"


class CatalogService:
    """Сервис каталога PDF"""

    def __init__(self, uow: UnitOfWork, storage: FileStorage, upload_reward_points: int = 1):
        self.uow = uow
        self.storage = storage
        self.upload_reward_points = upload_reward_points

    async def browse(self, filter_request: PdfFilterRequest) -> List[PdfSummary]:
        """Публичный каталог, только активные документы"""
        documents = await self.uow.documents.browse(BrowseFilter(
            query=filter_request.query.strip() if filter_request.query else None,
            tag=filter_request.tag,
            min_price=filter_request.min_price_in_points,
            max_price=filter_request.max_price_in_points
        ))
        names = await self._usernames()

        return [
            PdfSummary(
                id=document.id,
                title=document.title,
                uploader_user_name=names.get(document.uploader_id, UNKNOWN_UPLOADER),
                price_in_points=document.price_in_points,
                tags=document.tags
            )
            for document in documents
        ]

    async def get_details(self, document_id: str, viewer_id: Optional[str] = None) -> Optional[PdfDetails]:
        """Детали документа; неактивный виден только загрузившему"""
        document = await self.uow.documents.get_by_id(document_id)
        if document is None:
            return None
        if not document.is_active and not document.is_uploaded_by(viewer_id):
            return None
        return await self._to_details(document)

    async def upload(
        self,
        user_id: str,
        data: UploadPdfRequest,
        stream: BinaryIO,
        file_name: str
    ) -> UploadPdfResponse:
        """Загрузка PDF: сначала файл, затем метаданные и награда за загрузку"""
        storage_ref = await self.storage.put(stream, file_name, PDF_CONTENT_TYPE)

        try:
            async with self.uow:
                uploader = await self.uow.accounts.get_by_id(user_id, for_update=True)
                if uploader is None:
                    raise AccountNotFound(user_id)

                document = PdfDocument.create_document(
                    title=data.title,
                    description=data.description,
                    uploader_id=uploader.id,
                    price_in_points=data.price_in_points,
                    tags=data.tags,
                    storage_ref=storage_ref
                )
                await self.uow.documents.insert(document)

                await self.uow.accounts.deposit_points(uploader.id, self.upload_reward_points)
                uploader = await self.uow.accounts.get_by_id(uploader.id)
        except Exception:
            # Метаданные не сохранены, файл больше никому не нужен
            await self._discard_file(storage_ref)
            raise

        logger.info(f"Document {document.id} uploaded by {uploader.id}, reward {self.upload_reward_points}")

        return UploadPdfResponse(
            pdf=self._details(document, uploader.username),
            uploader_points_balance=uploader.points_balance
        )

    async def update(self, user_id: str, document_id: str, data: UpdatePdfRequest) -> Optional[PdfDetails]:
        """Обновление метаданных; только загрузивший пользователь"""
        async with self.uow:
            document = await self.uow.documents.get_by_id(document_id)
            if document is None or not document.is_uploaded_by(user_id):
                return None

            # Смена цены не затрагивает уже совершенные покупки
            document.update_metadata(
                title=data.title,
                description=data.description,
                price_in_points=data.price_in_points,
                tags=data.tags,
                is_active=data.is_active
            )
            await self.uow.documents.replace(document)

        return await self._to_details(document)

    async def deactivate(self, user_id: str, document_id: str) -> bool:
        """Скрытие документа из каталога"""
        async with self.uow:
            document = await self.uow.documents.get_by_id(document_id)
            if document is None or not document.is_uploaded_by(user_id):
                return False

            document.deactivate()
            await self.uow.documents.replace(document)

        return True

    async def list_my_uploads(self, user_id: str) -> List[PdfDetails]:
        """Все загрузки пользователя, включая неактивные"""
        documents = await self.uow.documents.list_all_by_uploader(user_id)
        uploader = await self.uow.accounts.get_by_id(user_id)
        username = uploader.username if uploader else UNKNOWN_UPLOADER
        return [self._details(document, username) for document in documents]

    async def _usernames(self) -> Dict[str, str]:
        accounts: List[Account] = await self.uow.accounts.list_all()
        return {account.id: account.username for account in accounts}

    async def _to_details(self, document: PdfDocument) -> PdfDetails:
        uploader = await self.uow.accounts.get_by_id(document.uploader_id)
        return self._details(document, uploader.username if uploader else UNKNOWN_UPLOADER)

    def _details(self, document: PdfDocument, uploader_name: str) -> PdfDetails:
        return PdfDetails(
            id=document.id,
            title=document.title,
            description=document.description,
            uploader_user_name=uploader_name,
            price_in_points=document.price_in_points,
            tags=document.tags,
            points_reward=self.upload_reward_points,
            created_at=document.created_at,
            is_active=document.is_active
        )

    async def _discard_file(self, storage_ref: str) -> None:
        try:
            await self.storage.delete(storage_ref)
        except Exception:
            logger.exception(f"Failed to discard orphaned file {storage_ref}")
