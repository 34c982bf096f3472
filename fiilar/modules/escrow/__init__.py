"""Escrow domain exports."""

from .exceptions import EscrowError, EscrowStateError, RefundExceedsHeldFundsError
from .models import DisputeDecision, EscrowTransaction, EscrowTransactionType, PlatformFinancials
from .repository import EscrowRepository
from .service import EscrowService

__all__ = [
    "DisputeDecision",
    "EscrowError",
    "EscrowRepository",
    "EscrowService",
    "EscrowStateError",
    "EscrowTransaction",
    "EscrowTransactionType",
    "PlatformFinancials",
    "RefundExceedsHeldFundsError",
]
