from typing import Optional

from pdfmarket.core.exceptions import AccountAlreadyExists
from pdfmarket.core.security import create_access_token, verify_token
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.identity.schemas import AuthResponse, LoginRequest, RegisterRequest, TokenData
from pdfmarket.domains.repositories import UnitOfWork


class IdentityService:
    """Сервис регистрации, входа и выпуска токенов"""

    def __init__(self, uow: UnitOfWork, starting_points_balance: int = 0):
        self.uow = uow
        self.starting_points_balance = starting_points_balance

    async def register_user(self, data: RegisterRequest) -> AuthResponse:
        """Регистрация нового пользователя"""
        async with self.uow:
            # username и email должны быть уникальны
            for handle in (data.username, data.email):
                if await self.uow.accounts.get_by_handle(handle):
                    raise AccountAlreadyExists(handle)

            account = Account.create_account(
                username=data.username,
                email=data.email,
                password=data.password,
                points_balance=self.starting_points_balance
            )
            await self.uow.accounts.insert(account)

        return self._auth_response(account)

    async def authenticate_user(self, data: LoginRequest) -> Optional[Account]:
        """Аутентификация пользователя"""
        account = await self.uow.accounts.get_by_handle(data.username_or_email)
        if account is None or not account.authenticate(data.password):
            return None
        return account

    async def login_user(self, data: LoginRequest) -> Optional[AuthResponse]:
        """Вход пользователя и создание JWT токена"""
        account = await self.authenticate_user(data)
        if account is None:
            return None
        return self._auth_response(account)

    async def get_current_user_from_token(self, token: str) -> Optional[Account]:
        """Получение текущего пользователя из JWT токена"""
        token_data = self.decode_token(token)
        if token_data is None or not token_data.user_id:
            return None
        return await self.uow.accounts.get_by_id(token_data.user_id)

    @staticmethod
    def decode_token(token: str) -> Optional[TokenData]:
        payload = verify_token(token)
        if payload is None:
            return None
        return TokenData(
            user_id=payload.get("sub"),
            username=payload.get("username"),
            role=payload.get("role")
        )

    @staticmethod
    def issue_token(account: Account) -> str:
        return create_access_token(data={
            "sub": account.id,
            "username": account.username,
            "role": account.role
        })

    def _auth_response(self, account: Account) -> AuthResponse:
        return AuthResponse(
            user_id=account.id,
            username=account.username,
            role=account.role,
            points_balance=account.points_balance,
            access_token=self.issue_token(account)
        )
