from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_

from pdfmarket.db.models.document import PdfDocumentModel
from pdfmarket.domains.catalog.entities import PdfDocument, BrowseFilter
from pdfmarket.domains.repositories import CatalogStore


class DocumentRepository(CatalogStore):
    """Репозиторий для работы с метаданными PDF"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, document: PdfDocument) -> PdfDocument:
        """Создание нового документа"""
        self.session.add(PdfDocumentModel(
            id=document.id,
            title=document.title,
            description=document.description,
            uploader_id=document.uploader_id,
            price_in_points=document.price_in_points,
            tags=list(document.tags),
            created_at=document.created_at,
            is_active=document.is_active,
            storage_ref=document.storage_ref
        ))
        await self.session.flush()
        return document

    async def get_by_id(self, document_id: str) -> Optional[PdfDocument]:
        """Получение документа по id"""
        result = await self.session.execute(
            select(PdfDocumentModel).where(PdfDocumentModel.id == document_id)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def browse(self, browse_filter: BrowseFilter) -> List[PdfDocument]:
        """Поиск по публичному каталогу"""
        stmt = select(PdfDocumentModel).where(PdfDocumentModel.is_active.is_(True))

        if browse_filter.query:
            pattern = f"%{browse_filter.query}%"
            stmt = stmt.where(
                or_(
                    PdfDocumentModel.title.ilike(pattern),
                    PdfDocumentModel.description.ilike(pattern)
                )
            )

        if browse_filter.min_price is not None:
            stmt = stmt.where(PdfDocumentModel.price_in_points >= browse_filter.min_price)

        if browse_filter.max_price is not None:
            stmt = stmt.where(PdfDocumentModel.price_in_points <= browse_filter.max_price)

        result = await self.session.execute(stmt.order_by(PdfDocumentModel.created_at.desc()))
        documents = [self._to_domain(db_document) for db_document in result.scalars().all()]

        # Теги хранятся в JSON, фильтруем на стороне приложения
        if browse_filter.tag:
            documents = [d for d in documents if browse_filter.tag in d.tags]

        return documents

    async def list_all_by_uploader(self, uploader_id: str) -> List[PdfDocument]:
        """Документы пользователя, включая неактивные"""
        result = await self.session.execute(
            select(PdfDocumentModel)
            .where(PdfDocumentModel.uploader_id == uploader_id)
            .order_by(PdfDocumentModel.created_at.desc())
        )
        return [self._to_domain(db_document) for db_document in result.scalars().all()]

    async def list_all(self) -> List[PdfDocument]:
        """Все документы (активные и неактивные)"""
        result = await self.session.execute(
            select(PdfDocumentModel).order_by(PdfDocumentModel.created_at.desc())
        )
        return [self._to_domain(db_document) for db_document in result.scalars().all()]

    async def replace(self, document: PdfDocument) -> PdfDocument:
        """Обновление документа; загрузивший пользователь не меняется"""
        stmt = (
            update(PdfDocumentModel)
            .where(PdfDocumentModel.id == document.id)
            .values(
                title=document.title,
                description=document.description,
                price_in_points=document.price_in_points,
                tags=list(document.tags),
                is_active=document.is_active,
                storage_ref=document.storage_ref
            )
        )

        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise KeyError(document.id)
        return document

    async def delete(self, document_id: str) -> bool:
        """Удаление документа"""
        result = await self.session.execute(
            delete(PdfDocumentModel).where(PdfDocumentModel.id == document_id)
        )
        return result.rowcount > 0

    def _to_domain(self, db_document: PdfDocumentModel) -> PdfDocument:
        """Преобразование модели БД в доменную сущность"""
        return PdfDocument(
            id=db_document.id,
            title=db_document.title,
            description=db_document.description or "",
            uploader_id=db_document.uploader_id,
            price_in_points=db_document.price_in_points,
            tags=db_document.tags or [],
            created_at=db_document.created_at,
            is_active=db_document.is_active,
            storage_ref=db_document.storage_ref
        )
