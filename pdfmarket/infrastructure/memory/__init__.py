from pdfmarket.infrastructure.memory.stores import (
    InMemoryAccountStore, InMemoryCatalogStore, InMemoryPurchaseStore, InMemoryUnitOfWork
)
from pdfmarket.infrastructure.memory.file_storage import InMemoryFileStorage

__all__ = [
    "InMemoryAccountStore",
    "InMemoryCatalogStore",
    "InMemoryPurchaseStore",
    "InMemoryUnitOfWork",
    "InMemoryFileStorage"
]
