from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional, List
from datetime import datetime


class UserBase(BaseModel):
    """Базовая схема пользователя"""
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.replace('_', '').replace('-', '').isalnum():
            raise ValueError('Username must contain only alphanumeric characters, underscores, and hyphens')
        return v


class RegisterRequest(UserBase):
    """Схема для регистрации пользователя"""
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(BaseModel):
    """Вход по username или email"""
    username_or_email: str = Field(..., min_length=1)
    password: str


class AuthResponse(BaseModel):
    """Ответ после успешной аутентификации"""
    user_id: str
    username: str
    role: str
    points_balance: int
    access_token: str
    token_type: str = "bearer"


class AccountResponse(UserBase):
    """Данные текущего пользователя"""
    id: str
    role: str
    points_balance: int
    owned_pdf_ids: List[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenData(BaseModel):
    """Данные из JWT токена"""
    user_id: Optional[str] = None
    username: Optional[str] = None
    role: Optional[str] = None
