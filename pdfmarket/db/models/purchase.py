from sqlalchemy import Column, String, Integer, DateTime

from pdfmarket.db.base import Base


class PurchaseModel(Base):
    __tablename__ = "purchases"

    id = Column(String(36), primary_key=True)
    # Без внешнего ключа: покупки переживают удаление документа
    document_id = Column(String(36), index=True, nullable=False)
    buyer_id = Column(String(36), index=True, nullable=False)
    price_in_points = Column(Integer, nullable=False)
    purchased_at = Column(DateTime(timezone=True), nullable=False)
