from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, JSON, ForeignKey

from pdfmarket.db.base import Base


class PdfDocumentModel(Base):
    __tablename__ = "pdf_documents"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    # Без ON DELETE: учетные записи не удаляются
    uploader_id = Column(String(36), ForeignKey("accounts.id"), index=True, nullable=False)
    price_in_points = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    storage_ref = Column(String(64), nullable=True)
