import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Purchase:
    """Неизменяемая запись о покупке документа по зафиксированной цене"""
    id: str
    document_id: str
    buyer_id: str
    price_in_points: int
    purchased_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def record(cls, document_id: str, buyer_id: str, price_in_points: int) -> "Purchase":
        return cls(
            id=str(uuid.uuid4()),
            document_id=document_id,
            buyer_id=buyer_id,
            price_in_points=price_in_points
        )


@dataclass(frozen=True)
class PurchaseResult:
    purchase_id: str
    document_id: str
    buyer_id: str
    purchased_at: datetime
    price_in_points: int
    buyer_points_balance: int
