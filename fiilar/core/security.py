"""JWT issuing and the current-account dependencies."""
from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from fiilar.core.config import get_settings
from fiilar.core.timeutils import utcnow
from fiilar.interfaces.http.deps.database import get_db_session
from fiilar.modules.accounts import Account as AccountDomain
from fiilar.modules.accounts.service import AccountService
from fiilar.schemas import TokenData

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be decoded into account claims."""


def create_access_token(account_id: str, username: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": account_id,
        "username": username,
        "role": role,
        "exp": utcnow() + expire_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def parse_access_token(token: str) -> TokenData:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc

    account_id = payload.get("sub")
    username = payload.get("username")
    role = payload.get("role")
    if not all([account_id, username, role]):
        raise InvalidTokenError("token is missing account claims")
    return TokenData(account_id=account_id, username=username, role=role)


def decode_access_token(token: str) -> TokenData:
    try:
        return parse_access_token(token)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials") from exc


async def _load_account(token: str, db: AsyncSession) -> AccountDomain:
    token_data = decode_access_token(token)
    service = AccountService.with_session(db)
    account = await service.get_by_id(token_data.account_id)
    if account is None or not account.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account not found or disabled")
    return account


async def get_current_account(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db_session),
) -> AccountDomain:
    return await _load_account(credentials.credentials, db)


async def get_optional_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[AccountDomain]:
    if credentials is None:
        return None
    return await _load_account(credentials.credentials, db)


async def get_current_admin(account: AccountDomain = Depends(get_current_account)) -> AccountDomain:
    if not account.is_admin():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator role required")
    return account
