import logging
from typing import Dict, List, Optional, Set

from pdfmarket.core.exceptions import (
    BuyerNotFound, DocumentNotFound, InsufficientPoints, SellerMissing
)
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.purchases.entities import Purchase, PurchaseResult
from pdfmarket.domains.purchases.schemas import PurchasedPdf
from pdfmarket.domains.repositories import UnitOfWork

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown"


class PurchaseService:
    """Сервис покупок: перевод баллов и журнал покупок"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def purchase(self, buyer_id: str, document_id: str) -> PurchaseResult:
        """Покупка документа.

        Все три записи (списание, начисление продавцу, запись о покупке)
        выполняются в одной транзакции. Любая ошибка откатывает их целиком.

        Строки покупателя и продавца блокируются в порядке id, списание
        выполняется условным UPDATE. Встречные покупки не блокируют друг
        друга, а две параллельные покупки не списывают больше баланса.
        """
        async with self.uow:
            buyer = await self.uow.accounts.get_by_id(buyer_id)
            if buyer is None:
                raise BuyerNotFound(buyer_id)

            document = await self.uow.documents.get_by_id(document_id)
            if document is None or not document.is_active:
                raise DocumentNotFound(document_id)

            locked = await self._lock_accounts({buyer.id, document.uploader_id})
            buyer = locked[buyer.id]
            if buyer is None:
                raise BuyerNotFound(buyer_id)

            is_self_purchase = document.uploader_id == buyer.id
            seller = locked[document.uploader_id]
            if seller is None:
                logger.error(
                    f"Integrity fault: document {document.id} references missing uploader {document.uploader_id}"
                )
                raise SellerMissing(document.id, document.uploader_id)

            price = document.price_in_points
            if not buyer.can_afford(price) or not await self.uow.accounts.withdraw_points(buyer.id, price):
                logger.warning(
                    f"Purchase rejected: buyer {buyer.id} has {buyer.points_balance} points, "
                    f"document {document.id} costs {price}"
                )
                raise InsufficientPoints(buyer.id, document.id, buyer.points_balance, price)

            await self.uow.accounts.add_owned_document(buyer.id, document.id)

            # Покупка своего документа только списывает баллы
            if not is_self_purchase:
                await self.uow.accounts.deposit_points(seller.id, price)

            purchase = await self.uow.purchases.insert(
                Purchase.record(document_id=document.id, buyer_id=buyer.id, price_in_points=price)
            )
            buyer = await self.uow.accounts.get_by_id(buyer.id)

        logger.info(
            f"Purchase {purchase.id}: buyer {buyer.id} bought document {document.id} "
            f"for {price} points, balance now {buyer.points_balance}"
        )

        return PurchaseResult(
            purchase_id=purchase.id,
            document_id=purchase.document_id,
            buyer_id=purchase.buyer_id,
            purchased_at=purchase.purchased_at,
            price_in_points=purchase.price_in_points,
            buyer_points_balance=buyer.points_balance
        )

    async def _lock_accounts(self, account_ids: Set[str]) -> Dict[str, Optional[Account]]:
        locked = {}
        for account_id in sorted(account_ids):
            locked[account_id] = await self.uow.accounts.get_by_id(account_id, for_update=True)
        return locked

    async def get_my_purchases(self, buyer_id: str) -> List[PurchasedPdf]:
        """Список покупок пользователя с названиями документов"""
        purchases = await self.uow.purchases.list_by_buyer(buyer_id)

        result = []
        for purchase in purchases:
            document = await self.uow.documents.get_by_id(purchase.document_id)
            result.append(PurchasedPdf(
                pdf_id=purchase.document_id,
                title=document.title if document else UNKNOWN_TITLE,
                price_in_points=purchase.price_in_points,
                purchased_at=purchase.purchased_at
            ))

        return result

    async def has_purchased(self, buyer_id: str, document_id: str) -> bool:
        """Есть ли запись о покупке документа пользователем"""
        purchases = await self.uow.purchases.list_by_buyer(buyer_id)
        return any(p.document_id == document_id for p in purchases)
