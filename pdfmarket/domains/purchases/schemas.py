from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime


class PurchaseRequest(BaseModel):
    """Схема запроса на покупку PDF"""
    pdf_id: str = Field(..., min_length=1)


class PurchaseResponse(BaseModel):
    """Схема ответа после успешной покупки"""
    purchase_id: str
    pdf_id: str
    buyer_user_id: str
    purchased_at: datetime
    price_in_points: int
    buyer_points_balance: int


class PurchasedPdf(BaseModel):
    """Купленный PDF в списке покупок пользователя"""
    pdf_id: str
    title: str
    price_in_points: int
    purchased_at: datetime

    model_config = ConfigDict(from_attributes=True)
