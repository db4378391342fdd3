from typing import Any, Dict, Optional


class MarketplaceError(Exception):
    """Базовая ошибка ядра маркетплейса"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class NotFoundError(MarketplaceError, LookupError):
    """Ресурс отсутствует"""


class AccountNotFound(NotFoundError):
    def __init__(self, account_id: str):
        super().__init__("User not found", {"account_id": account_id})
        self.account_id = account_id


class BuyerNotFound(NotFoundError):
    def __init__(self, buyer_id: str):
        super().__init__("Buyer not found", {"buyer_id": buyer_id})
        self.buyer_id = buyer_id


class DocumentNotFound(NotFoundError):
    def __init__(self, document_id: str):
        super().__init__("PDF not found", {"document_id": document_id})
        self.document_id = document_id


class BusinessRuleViolation(MarketplaceError, ValueError):
    """Нарушение бизнес-правила, ожидаемый исход для клиента"""


class InsufficientPoints(BusinessRuleViolation):
    def __init__(self, buyer_id: str, document_id: str, balance: int, price: int):
        super().__init__(
            "Not enough points",
            {
                "buyer_id": buyer_id,
                "document_id": document_id,
                "balance": balance,
                "price": price,
            },
        )
        self.buyer_id = buyer_id
        self.document_id = document_id
        self.balance = balance
        self.price = price


class AccountAlreadyExists(BusinessRuleViolation):
    def __init__(self, handle: str):
        super().__init__("User already exists", {"handle": handle})
        self.handle = handle


class IntegrityFault(MarketplaceError, RuntimeError):
    """Хранилища рассинхронизированы, запрос должен упасть"""


class SellerMissing(IntegrityFault):
    def __init__(self, document_id: str, uploader_id: str):
        super().__init__(
            "Uploader not found",
            {"document_id": document_id, "uploader_id": uploader_id},
        )
        self.document_id = document_id
        self.uploader_id = uploader_id
