from abc import ABC, abstractmethod
from typing import BinaryIO, List, Optional

from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.catalog.entities import PdfDocument, BrowseFilter
from pdfmarket.domains.purchases.entities import Purchase


class AccountStore(ABC):
    """Контракт хранилища учетных записей"""

    @abstractmethod
    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        """Получение учетной записи; for_update блокирует запись до конца транзакции"""

    @abstractmethod
    async def get_by_handle(self, username_or_email: str) -> Optional[Account]:
        """Получение учетной записи по username или email"""

    @abstractmethod
    async def list_all(self) -> List[Account]:
        ...

    @abstractmethod
    async def insert(self, account: Account) -> Account:
        ...

    @abstractmethod
    async def replace(self, account: Account) -> Account:
        ...

    @abstractmethod
    async def withdraw_points(self, account_id: str, amount: int) -> bool:
        """Атомарное списание: False, если баланс меньше amount или записи нет"""

    @abstractmethod
    async def deposit_points(self, account_id: str, amount: int) -> None:
        """Атомарное начисление относительно текущего баланса"""

    @abstractmethod
    async def add_owned_document(self, account_id: str, document_id: str) -> None:
        ...


class CatalogStore(ABC):
    """Контракт хранилища метаданных PDF"""

    @abstractmethod
    async def get_by_id(self, document_id: str) -> Optional[PdfDocument]:
        ...

    @abstractmethod
    async def browse(self, browse_filter: BrowseFilter) -> List[PdfDocument]:
        """Только активные документы, новые первыми"""

    @abstractmethod
    async def list_all_by_uploader(self, uploader_id: str) -> List[PdfDocument]:
        """Активные и неактивные документы пользователя"""

    @abstractmethod
    async def list_all(self) -> List[PdfDocument]:
        ...

    @abstractmethod
    async def insert(self, document: PdfDocument) -> PdfDocument:
        ...

    @abstractmethod
    async def replace(self, document: PdfDocument) -> PdfDocument:
        ...

    @abstractmethod
    async def delete(self, document_id: str) -> bool:
        ...


class PurchaseStore(ABC):
    """Контракт хранилища покупок, только добавление"""

    @abstractmethod
    async def insert(self, purchase: Purchase) -> Purchase:
        ...

    @abstractmethod
    async def list_by_buyer(self, buyer_id: str) -> List[Purchase]:
        ...

    @abstractmethod
    async def list_all(self) -> List[Purchase]:
        ...


class FileStorage(ABC):
    """Контракт хранилища байтов файлов"""

    @abstractmethod
    async def put(self, stream: BinaryIO, file_name: str, content_type: Optional[str] = None) -> str:
        """Сохранение файла, возвращает ссылку на хранилище"""

    @abstractmethod
    async def get(self, storage_ref: str, target: BinaryIO) -> None:
        """Запись содержимого файла в target"""

    @abstractmethod
    async def delete(self, storage_ref: str) -> None:
        ...


class UnitOfWork(ABC):
    """Транзакционная область над тремя хранилищами.

    Изменения внутри ``async with uow:`` фиксируются при нормальном выходе
    и полностью откатываются при исключении.
    """

    accounts: AccountStore
    documents: CatalogStore
    purchases: PurchaseStore

    async def __aenter__(self) -> "UnitOfWork":
        await self.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    async def begin(self) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
