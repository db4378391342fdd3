from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime


def _clean_tags(tags: List[str]) -> List[str]:
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class PdfBase(BaseModel):
    """Базовая схема метаданных PDF"""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    price_in_points: int = Field(..., ge=0)
    tags: List[str] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        return _clean_tags(v)


class UploadPdfRequest(PdfBase):
    """Схема метаданных при загрузке PDF"""
    pass


class UpdatePdfRequest(PdfBase):
    """Схема для обновления метаданных PDF"""
    is_active: bool = True


class PdfFilterRequest(BaseModel):
    """Схема фильтра каталога"""
    query: Optional[str] = Field(None, max_length=100)
    tag: Optional[str] = None
    min_price_in_points: Optional[int] = Field(None, ge=0)
    max_price_in_points: Optional[int] = Field(None, ge=0)


class PdfSummary(BaseModel):
    """Краткая информация о PDF для списков"""
    id: str
    title: str
    uploader_user_name: str
    price_in_points: int
    tags: List[str]


class PdfDetails(BaseModel):
    """Подробная информация о PDF"""
    id: str
    title: str
    description: str
    uploader_user_name: str
    price_in_points: int
    tags: List[str]
    points_reward: int
    created_at: datetime
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UploadPdfResponse(BaseModel):
    """Ответ после загрузки PDF с обновленным балансом"""
    pdf: PdfDetails
    uploader_points_balance: int
