"""Booking domain specific exceptions."""


class BookingError(Exception):
    """Base class for booking errors."""


class BookingNotFoundError(BookingError):
    """Raised when a booking id does not exist."""


class InvalidStatusTransitionError(BookingError):
    """Raised when a booking is moved to a status its current status does not lead to."""


class InvalidBookingAmountError(BookingError):
    """Raised when the fees of a booking exceed its total price."""
