from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from pdfmarket.core.db import get_uow
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.identity.services import IdentityService
from pdfmarket.domains.repositories import UnitOfWork

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    uow: UnitOfWork = Depends(get_uow)
) -> Account:
    """Зависимость для получения текущего пользователя"""
    identity_service = IdentityService(uow)
    user = await identity_service.get_current_user_from_token(credentials.credentials)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    uow: UnitOfWork = Depends(get_uow)
) -> Optional[Account]:
    """Текущий пользователь, если передан токен"""
    if credentials is None:
        return None
    return await IdentityService(uow).get_current_user_from_token(credentials.credentials)


async def require_admin(current_user: Account = Depends(get_current_user)) -> Account:
    """Зависимость для эндпоинтов администратора"""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required"
        )
    return current_user
