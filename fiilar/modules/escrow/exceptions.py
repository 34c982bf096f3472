"""Escrow domain specific exceptions."""


class EscrowError(Exception):
    """Base class for escrow errors."""


class EscrowStateError(EscrowError):
    """Raised when a booking's payment status does not allow the operation."""


class RefundExceedsHeldFundsError(EscrowError):
    """Raised when a refund asks for more than the escrow still holds for a booking."""
