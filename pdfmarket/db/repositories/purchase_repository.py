from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from pdfmarket.db.models.purchase import PurchaseModel
from pdfmarket.domains.purchases.entities import Purchase
from pdfmarket.domains.repositories import PurchaseStore


class PurchaseRepository(PurchaseStore):
    """Репозиторий покупок; записи только добавляются"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, purchase: Purchase) -> Purchase:
        """Добавление записи о покупке"""
        self.session.add(PurchaseModel(
            id=purchase.id,
            document_id=purchase.document_id,
            buyer_id=purchase.buyer_id,
            price_in_points=purchase.price_in_points,
            purchased_at=purchase.purchased_at
        ))
        await self.session.flush()
        return purchase

    async def list_by_buyer(self, buyer_id: str) -> List[Purchase]:
        """Покупки пользователя"""
        result = await self.session.execute(
            select(PurchaseModel)
            .where(PurchaseModel.buyer_id == buyer_id)
            .order_by(PurchaseModel.purchased_at.desc())
        )
        return [self._to_domain(db_purchase) for db_purchase in result.scalars().all()]

    async def list_all(self) -> List[Purchase]:
        """Все покупки"""
        result = await self.session.execute(
            select(PurchaseModel).order_by(PurchaseModel.purchased_at.desc())
        )
        return [self._to_domain(db_purchase) for db_purchase in result.scalars().all()]

    def _to_domain(self, db_purchase: PurchaseModel) -> Purchase:
        """Преобразование модели БД в доменную сущность"""
        return Purchase(
            id=db_purchase.id,
            document_id=db_purchase.document_id,
            buyer_id=db_purchase.buyer_id,
            price_in_points=db_purchase.price_in_points,
            purchased_at=db_purchase.purchased_at
        )
