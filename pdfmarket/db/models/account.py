from sqlalchemy import Column, String, Integer, DateTime, JSON, CheckConstraint
from sqlalchemy.sql import func

from pdfmarket.db.base import Base


class AccountModel(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("points_balance >= 0", name="ck_accounts_points_non_negative"),
    )

    id = Column(String(36), primary_key=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="User")
    points_balance = Column(Integer, nullable=False, default=0)
    owned_document_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
