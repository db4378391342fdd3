import logging
from collections import Counter
from typing import List

from pdfmarket.domains.admin.schemas import (
    AdminPdfListItem, PlatformStats, UpdateUserRequest, UserSummary
)
from pdfmarket.domains.repositories import FileStorage, UnitOfWork

logger = logging.getLogger(__name__)

UNKNOWN_UPLOADER = "Unknown"


class AdminService:
    """Административные сводки и модерация.

    Сводки считаются соединением полных выборок трех хранилищ в момент
    вызова, без кэшей. Подсчеты сгруппированы за один проход, но объем
    работы все равно растет с общим числом пользователей, документов
    и покупок; при росте данных их нужно заменить счетчиками, которые
    обновляются в транзакции покупки.
    """

    def __init__(self, uow: UnitOfWork, storage: FileStorage):
        self.uow = uow
        self.storage = storage

    async def list_users(self) -> List[UserSummary]:
        """Обзор пользователей с числом загрузок и покупок"""
        accounts = await self.uow.accounts.list_all()
        documents = await self.uow.documents.list_all()
        purchases = await self.uow.purchases.list_all()

        # Неактивные документы тоже считаются загрузками
        uploads = Counter(document.uploader_id for document in documents)
        buys = Counter(purchase.buyer_id for purchase in purchases)

        return [
            UserSummary(
                id=account.id,
                username=account.username,
                email=account.email,
                is_blocked=False,
                points_balance=account.points_balance,
                total_uploads=uploads[account.id],
                total_purchases=buys[account.id]
            )
            for account in accounts
        ]

    async def get_stats(self) -> PlatformStats:
        """Статистика платформы и общая сумма баллов"""
        accounts = await self.uow.accounts.list_all()
        documents = await self.uow.documents.list_all()
        purchases = await self.uow.purchases.list_all()

        return PlatformStats(
            total_users=len(accounts),
            total_pdfs=len(documents),
            total_purchases=len(purchases),
            total_points_in_system=sum(account.points_balance for account in accounts)
        )

    async def list_documents(self) -> List[AdminPdfListItem]:
        """Все документы для модерации, активные и неактивные"""
        documents = await self.uow.documents.list_all()
        accounts = await self.uow.accounts.list_all()
        names = {account.id: account.username for account in accounts}

        return [
            AdminPdfListItem(
                id=document.id,
                title=document.title,
                uploader_user_id=document.uploader_id,
                uploader_user_name=names.get(document.uploader_id, UNKNOWN_UPLOADER),
                price_in_points=document.price_in_points,
                tags=document.tags,
                created_at=document.created_at,
                is_active=document.is_active
            )
            for document in documents
        ]

    async def delete_document(self, document_id: str) -> bool:
        """Удаление документа: файл (без гарантии), затем метаданные.

        Записи о покупках не затрагиваются.
        """
        document = await self.uow.documents.get_by_id(document_id)
        if document is None:
            return False

        if document.has_file:
            try:
                await self.storage.delete(document.storage_ref)
            except Exception:
                logger.exception(
                    f"Failed to delete stored file {document.storage_ref} for document {document_id}"
                )

        async with self.uow:
            deleted = await self.uow.documents.delete(document_id)

        logger.info(f"Document {document_id} deleted by admin")
        return deleted

    async def update_user(self, user_id: str, data: UpdateUserRequest) -> bool:
        """Изменение email и баланса пользователя"""
        async with self.uow:
            account = await self.uow.accounts.get_by_id(user_id, for_update=True)
            if account is None:
                return False

            account.update_profile(email=data.email, points_balance=data.points_balance)
            await self.uow.accounts.replace(account)

        logger.info(f"Account {user_id} updated by admin")
        return True

    async def reset_user_password(self, user_id: str, new_password: str) -> bool:
        """Сброс пароля пользователя"""
        if not new_password or not new_password.strip():
            return False

        async with self.uow:
            account = await self.uow.accounts.get_by_id(user_id, for_update=True)
            if account is None:
                return False

            account.set_password(new_password)
            await self.uow.accounts.replace(account)

        return True
