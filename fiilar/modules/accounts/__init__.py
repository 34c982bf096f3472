"""Account domain exports."""

from .exceptions import AccountAlreadyExistsError, AccountError, AccountNotFoundError, InvalidRoleError
from .models import ROLES, Account, AccountCreateInput
from .repository import AccountRepository
from .service import AccountService

__all__ = [
    "ROLES",
    "Account",
    "AccountCreateInput",
    "AccountRepository",
    "AccountService",
    "AccountError",
    "AccountAlreadyExistsError",
    "AccountNotFoundError",
    "InvalidRoleError",
]
