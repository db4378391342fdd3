from sqlalchemy.ext.asyncio import AsyncSession

from pdfmarket.db.repositories.account_repository import AccountRepository
from pdfmarket.db.repositories.document_repository import DocumentRepository
from pdfmarket.db.repositories.purchase_repository import PurchaseRepository
from pdfmarket.domains.repositories import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Все репозитории работают в одной сессии и одной транзакции"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.accounts = AccountRepository(session)
        self.documents = DocumentRepository(session)
        self.purchases = PurchaseRepository(session)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
