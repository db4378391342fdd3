from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_
from sqlalchemy.exc import IntegrityError

from pdfmarket.core.exceptions import AccountAlreadyExists
from pdfmarket.db.models.account import AccountModel
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.repositories import AccountStore


class AccountRepository(AccountStore):
    """Репозиторий для работы с учетными записями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, account: Account) -> Account:
        """Создание новой учетной записи"""
        db_account = AccountModel(
            id=account.id,
            username=account.username,
            email=account.email,
            password_hash=account.password_hash,
            role=account.role,
            points_balance=account.points_balance,
            owned_document_ids=sorted(account.owned_document_ids),
            created_at=account.created_at
        )

        self.session.add(db_account)
        try:
            await self.session.flush()
        except IntegrityError:
            raise AccountAlreadyExists(account.username)
        return account

    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        """Получение учетной записи по id"""
        # Баланс меняется относительными UPDATE, объекты сессии перечитываются
        stmt = (
            select(AccountModel)
            .where(AccountModel.id == account_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        db_account = result.scalar_one_or_none()
        return self._to_domain(db_account) if db_account else None

    async def get_by_handle(self, username_or_email: str) -> Optional[Account]:
        """Получение учетной записи по username или email"""
        result = await self.session.execute(
            select(AccountModel).where(
                or_(
                    AccountModel.username == username_or_email,
                    AccountModel.email == username_or_email
                )
            )
        )
        db_account = result.scalars().first()
        return self._to_domain(db_account) if db_account else None

    async def list_all(self) -> List[Account]:
        """Получение всех учетных записей"""
        result = await self.session.execute(
            select(AccountModel).order_by(AccountModel.created_at.asc())
        )
        return [self._to_domain(db_account) for db_account in result.scalars().all()]

    async def replace(self, account: Account) -> Account:
        """Обновление учетной записи целиком"""
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account.id)
            .values(
                username=account.username,
                email=account.email,
                password_hash=account.password_hash,
                role=account.role,
                points_balance=account.points_balance,
                owned_document_ids=sorted(account.owned_document_ids)
            )
        )

        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise KeyError(account.id)
        return account

    async def withdraw_points(self, account_id: str, amount: int) -> bool:
        """Условное списание: проверка баланса и запись одним UPDATE"""
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id, AccountModel.points_balance >= amount)
            .values(points_balance=AccountModel.points_balance - amount)
            .execution_options(synchronize_session=False)
        )

        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def deposit_points(self, account_id: str, amount: int) -> None:
        """Начисление баллов"""
        stmt = (
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(points_balance=AccountModel.points_balance + amount)
            .execution_options(synchronize_session=False)
        )

        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            raise KeyError(account_id)

    async def add_owned_document(self, account_id: str, document_id: str) -> None:
        """Добавление документа в кэш купленных"""
        result = await self.session.execute(
            select(AccountModel.owned_document_ids)
            .where(AccountModel.id == account_id)
            .with_for_update()
        )
        owned = result.one_or_none()
        if owned is None:
            raise KeyError(account_id)

        await self.session.execute(
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(owned_document_ids=sorted(set(owned[0] or []) | {document_id}))
            .execution_options(synchronize_session=False)
        )

    def _to_domain(self, db_account: AccountModel) -> Account:
        """Преобразование модели БД в доменную сущность"""
        return Account(
            id=db_account.id,
            username=db_account.username,
            email=db_account.email,
            password_hash=db_account.password_hash,
            role=db_account.role,
            points_balance=db_account.points_balance,
            owned_document_ids=db_account.owned_document_ids or [],
            created_at=db_account.created_at
        )
