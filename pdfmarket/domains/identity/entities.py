import uuid
from datetime import datetime, timezone
from typing import Optional, Iterable, Set

from pdfmarket.core.security import get_password_hash, verify_password

ROLE_USER = "User"
ROLE_ADMIN = "Admin"


class Account:
    """Учетная запись пользователя или администратора с балансом баллов"""

    def __init__(
        self,
        id: str,
        username: str,
        email: str,
        password_hash: str,
        role: str = ROLE_USER,
        points_balance: int = 0,
        owned_document_ids: Optional[Iterable[str]] = None,
        created_at: Optional[datetime] = None
    ):
        self.id = id
        self.username = username
        self.email = email
        self.password_hash = password_hash
        self.role = role
        self.points_balance = points_balance
        # Кэш купленных документов, источник истины - записи о покупках
        self.owned_document_ids: Set[str] = set(owned_document_ids or ())
        self.created_at = created_at or datetime.now(timezone.utc)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def authenticate(self, password: str) -> bool:
        """Проверка пароля пользователя"""
        return verify_password(password, self.password_hash)

    def set_password(self, password: str) -> None:
        self.password_hash = get_password_hash(password)

    def can_afford(self, amount: int) -> bool:
        return self.points_balance >= amount

    def debit(self, amount: int) -> None:
        """Списание баллов"""
        if amount < 0:
            raise ValueError("Amount must be non-negative")
        if not self.can_afford(amount):
            raise ValueError("Balance cannot go negative")
        self.points_balance -= amount

    def credit(self, amount: int) -> None:
        """Начисление баллов"""
        if amount < 0:
            raise ValueError("Amount must be non-negative")
        self.points_balance += amount

    def mark_owned(self, document_id: str) -> None:
        self.owned_document_ids.add(document_id)

    def update_profile(self, email: Optional[str] = None, points_balance: Optional[int] = None) -> None:
        """Обновление профиля администратором"""
        if email:
            self.email = email
        if points_balance is not None:
            if points_balance < 0:
                raise ValueError("Points balance cannot be negative")
            self.points_balance = points_balance

    @classmethod
    def create_account(
        cls,
        username: str,
        email: str,
        password: str,
        points_balance: int = 0,
        role: str = ROLE_USER
    ) -> "Account":
        """Создание новой учетной записи с хешированием пароля"""
        return cls(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            points_balance=points_balance
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Account):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Account(id={self.id}, username={self.username}, balance={self.points_balance})"
