from fastapi import APIRouter, Depends, HTTPException, status

from pdfmarket.core.auth import get_current_user
from pdfmarket.core.config import settings
from pdfmarket.core.db import get_uow
from pdfmarket.core.exceptions import AccountAlreadyExists
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.identity.schemas import (
    AccountResponse, AuthResponse, LoginRequest, RegisterRequest
)
from pdfmarket.domains.identity.services import IdentityService
from pdfmarket.domains.repositories import UnitOfWork

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    uow: UnitOfWork = Depends(get_uow)
):
    """Регистрация нового пользователя"""
    identity_service = IdentityService(uow, starting_points_balance=settings.starting_points_balance)

    try:
        return await identity_service.register_user(user_data)
    except AccountAlreadyExists as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    uow: UnitOfWork = Depends(get_uow)
):
    """Вход пользователя"""
    identity_service = IdentityService(uow)

    response = await identity_service.login_user(login_data)

    if not response:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username/email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return response


@router.get("/me", response_model=AccountResponse)
async def get_current_user_info(current_user: Account = Depends(get_current_user)):
    """Информация о текущем пользователе"""
    return AccountResponse(
        id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        role=current_user.role,
        points_balance=current_user.points_balance,
        owned_pdf_ids=sorted(current_user.owned_document_ids),
        created_at=current_user.created_at
    )
