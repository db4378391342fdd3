from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime


class UserSummary(BaseModel):
    """Строка обзора пользователей для администратора"""
    id: str
    username: str
    email: str
    is_blocked: bool = False
    points_balance: int
    total_uploads: int
    total_purchases: int


class PlatformStats(BaseModel):
    """Сводная статистика платформы"""
    total_users: int
    total_pdfs: int
    total_purchases: int
    total_points_in_system: int


class AdminPdfListItem(BaseModel):
    """PDF в списке модерации"""
    id: str
    title: str
    uploader_user_id: str
    uploader_user_name: str
    price_in_points: int
    tags: List[str]
    created_at: datetime
    is_active: bool


class UpdateUserRequest(BaseModel):
    """Обновляются только переданные поля"""
    email: Optional[EmailStr] = None
    points_balance: Optional[int] = Field(None, ge=0)


class ResetPasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=8, max_length=128)
