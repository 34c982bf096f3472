"""Domain services for account management."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.crypto import hash_password, verify_password
from fiilar.core.timeutils import utcnow

from .exceptions import AccountAlreadyExistsError, InvalidRoleError
from .models import ROLES, Account, AccountCreateInput
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Encapsulates core account use cases."""

    def __init__(self, repository: AccountRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        from fiilar.infrastructure.database.repositories.account_repository import SqlAccountRepository

        return cls(SqlAccountRepository(session))

    async def get_by_id(self, account_id: str) -> Account | None:
        return await self._repository.get_by_id(account_id)

    async def get_by_username(self, username: str) -> Account | None:
        return await self._repository.get_by_username(username)

    async def authenticate(self, username: str, password: str) -> Account | None:
        account = await self._repository.get_by_username(username)
        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            logger.warning("Failed login for %s", username)
            return None
        return account

    async def create_account(self, payload: AccountCreateInput) -> Account:
        if payload.role not in ROLES:
            raise InvalidRoleError(payload.role)
        existing = await self._repository.get_by_username(payload.username)
        if existing is not None:
            raise AccountAlreadyExistsError(f"Username already taken: {payload.username}")

        account = await self._repository.create_account(
            username=payload.username,
            password_hash=hash_password(payload.password),
            role=payload.role,
            email=payload.email,
            is_active=payload.is_active,
        )
        logger.info("Account %s created with role %s", account.id, account.role)
        return account

    async def set_last_login(self, account_id: str) -> None:
        await self._repository.set_last_login(account_id, utcnow())
