import asyncio
import copy
from typing import Dict, List, Optional

from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.catalog.entities import PdfDocument, BrowseFilter
from pdfmarket.domains.purchases.entities import Purchase
from pdfmarket.domains.repositories import (
    AccountStore, CatalogStore, PurchaseStore, UnitOfWork
)


class InMemoryAccountStore(AccountStore):
    """Хранилище учетных записей в памяти, отдает копии объектов"""

    def __init__(self):
        self.items: Dict[str, Account] = {}

    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        account = self.items.get(account_id)
        return copy.deepcopy(account) if account else None

    async def get_by_handle(self, username_or_email: str) -> Optional[Account]:
        for account in self.items.values():
            if username_or_email in (account.username, account.email):
                return copy.deepcopy(account)
        return None

    async def list_all(self) -> List[Account]:
        return [copy.deepcopy(account) for account in self.items.values()]

    async def insert(self, account: Account) -> Account:
        if account.id in self.items:
            raise ValueError(f"Account {account.id} already exists")
        self.items[account.id] = copy.deepcopy(account)
        return account

    async def replace(self, account: Account) -> Account:
        if account.id not in self.items:
            raise KeyError(account.id)
        self.items[account.id] = copy.deepcopy(account)
        return account

    async def withdraw_points(self, account_id: str, amount: int) -> bool:
        account = self.items.get(account_id)
        if account is None or not account.can_afford(amount):
            return False
        account.debit(amount)
        return True

    async def deposit_points(self, account_id: str, amount: int) -> None:
        self.items[account_id].credit(amount)

    async def add_owned_document(self, account_id: str, document_id: str) -> None:
        self.items[account_id].mark_owned(document_id)


class InMemoryCatalogStore(CatalogStore):
    """Хранилище метаданных PDF в памяти"""

    def __init__(self):
        self.items: Dict[str, PdfDocument] = {}

    def _newest_first(self, documents: List[PdfDocument]) -> List[PdfDocument]:
        return [
            copy.deepcopy(document)
            for document in sorted(documents, key=lambda d: d.created_at, reverse=True)
        ]

    async def get_by_id(self, document_id: str) -> Optional[PdfDocument]:
        document = self.items.get(document_id)
        return copy.deepcopy(document) if document else None

    async def browse(self, browse_filter: BrowseFilter) -> List[PdfDocument]:
        return self._newest_first([d for d in self.items.values() if browse_filter.matches(d)])

    async def list_all_by_uploader(self, uploader_id: str) -> List[PdfDocument]:
        return self._newest_first([d for d in self.items.values() if d.uploader_id == uploader_id])

    async def list_all(self) -> List[PdfDocument]:
        return self._newest_first(list(self.items.values()))

    async def insert(self, document: PdfDocument) -> PdfDocument:
        self.items[document.id] = copy.deepcopy(document)
        return document

    async def replace(self, document: PdfDocument) -> PdfDocument:
        if document.id not in self.items:
            raise KeyError(document.id)
        self.items[document.id] = copy.deepcopy(document)
        return document

    async def delete(self, document_id: str) -> bool:
        return self.items.pop(document_id, None) is not None


class InMemoryPurchaseStore(PurchaseStore):
    """Журнал покупок в памяти"""

    def __init__(self):
        self.items: List[Purchase] = []

    async def insert(self, purchase: Purchase) -> Purchase:
        self.items.append(purchase)
        return purchase

    async def list_by_buyer(self, buyer_id: str) -> List[Purchase]:
        return [p for p in self.items if p.buyer_id == buyer_id]

    async def list_all(self) -> List[Purchase]:
        return list(self.items)


class InMemoryUnitOfWork(UnitOfWork):
    """Транзакции сериализуются блокировкой, откат восстанавливает снимок"""

    def __init__(self):
        self.accounts = InMemoryAccountStore()
        self.documents = InMemoryCatalogStore()
        self.purchases = InMemoryPurchaseStore()
        self._lock = asyncio.Lock()
        self._snapshot = None
        self.commits = 0
        self.rollbacks = 0

    async def begin(self) -> None:
        await self._lock.acquire()
        self._snapshot = (
            copy.deepcopy(self.accounts.items),
            copy.deepcopy(self.documents.items),
            list(self.purchases.items),
        )

    async def commit(self) -> None:
        self._snapshot = None
        self.commits += 1
        self._release()

    async def rollback(self) -> None:
        if self._snapshot is not None:
            self.accounts.items, self.documents.items, self.purchases.items = self._snapshot
            self._snapshot = None
        self.rollbacks += 1
        self._release()

    def _release(self) -> None:
        if self._lock.locked():
            self._lock.release()
