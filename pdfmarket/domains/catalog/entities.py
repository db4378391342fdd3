import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Iterable, List

PDF_CONTENT_TYPE = "application/pdf"
DEFAULT_FILE_NAME = "document.pdf"


class PdfDocument:
    """Метаданные загруженного PDF"""

    def __init__(
        self,
        id: str,
        title: str,
        description: str,
        uploader_id: str,
        price_in_points: int = 0,
        tags: Optional[Iterable[str]] = None,
        created_at: Optional[datetime] = None,
        is_active: bool = True,
        storage_ref: Optional[str] = None
    ):
        self.id = id
        self.title = title
        self.description = description
        self.uploader_id = uploader_id
        self.price_in_points = price_in_points
        self.tags: List[str] = list(tags or ())
        self.created_at = created_at or datetime.now(timezone.utc)
        self.is_active = is_active
        self.storage_ref = storage_ref

    @property
    def has_file(self) -> bool:
        return bool(self.storage_ref and self.storage_ref.strip())

    @property
    def is_downloadable(self) -> bool:
        """Документ активен и к нему привязан файл"""
        return self.is_active and self.has_file

    def is_uploaded_by(self, account_id: str) -> bool:
        return self.uploader_id == account_id

    def download_file_name(self) -> str:
        if not self.title or not self.title.strip():
            return DEFAULT_FILE_NAME
        return f"{self.title.strip()}.pdf"

    def update_metadata(
        self,
        title: str,
        description: str,
        price_in_points: int,
        tags: Iterable[str],
        is_active: bool
    ) -> None:
        """Обновление метаданных загрузившим пользователем"""
        if price_in_points < 0:
            raise ValueError("Price cannot be negative")
        self.title = title
        self.description = description
        self.price_in_points = price_in_points
        self.tags = list(tags)
        self.is_active = is_active

    def deactivate(self) -> None:
        self.is_active = False

    @classmethod
    def create_document(
        cls,
        title: str,
        description: str,
        uploader_id: str,
        price_in_points: int,
        tags: Iterable[str] = (),
        storage_ref: Optional[str] = None
    ) -> "PdfDocument":
        """Создание нового документа"""
        if price_in_points < 0:
            raise ValueError("Price cannot be negative")
        return cls(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            uploader_id=uploader_id,
            price_in_points=price_in_points,
            tags=tags,
            storage_ref=storage_ref
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, PdfDocument):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"PdfDocument(id={self.id}, title={self.title}, price={self.price_in_points})"


@dataclass
class BrowseFilter:
    query: Optional[str] = None
    tag: Optional[str] = None
    min_price: Optional[int] = None
    max_price: Optional[int] = None

    def matches(self, document: PdfDocument) -> bool:
        """Проверка документа на соответствие фильтру (только активные)"""
        if not document.is_active:
            return False
        if self.query:
            needle = self.query.lower()
            if needle not in document.title.lower() and needle not in (document.description or "").lower():
                return False
        if self.tag and self.tag not in document.tags:
            return False
        if self.min_price is not None and document.price_in_points < self.min_price:
            return False
        if self.max_price is not None and document.price_in_points > self.max_price:
            return False
        return True


@dataclass
class FileResult:
    file_name: str
    content_type: str
    content: bytes
