from sqlalchemy import Column, String, Integer, LargeBinary, DateTime
from sqlalchemy.sql import func

from pdfmarket.db.base import Base


class StoredFileModel(Base):
    __tablename__ = "stored_files"

    id = Column(String(32), primary_key=True)
    file_name = Column(String(255), nullable=False)
    content_type = Column(String(100), nullable=True)
    length = Column(Integer, nullable=False)
    content = Column(LargeBinary, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())
