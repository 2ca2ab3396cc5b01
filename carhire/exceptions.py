"""
Custom exception classes for the car hire booking service.

Every error carries a stable ``kind`` string and an HTTP status so that the
controllers can render a precise JSON answer instead of a generic 500.
"""


class BookingError(Exception):
    """Base class for all errors raised by the booking core."""

    kind = "booking_error"
    status_code = 400
    default_message = "Error: booking operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class NotFoundError(BookingError):
    """Raised when a reservation or payment intent cannot be found."""

    kind = "not_found"
    status_code = 404
    default_message = "Error: not found"


class VehicleNotFoundError(NotFoundError):
    """Raised when a vehicle ID cannot be found in the catalog."""

    kind = "vehicle_not_found"
    default_message = "Error: vehicle not found"


class ForbiddenError(BookingError):
    """Raised when the caller does not own the reservation or is not an operator."""

    kind = "forbidden"
    status_code = 403
    default_message = "Error: not allowed"


class UnauthorizedError(BookingError):
    kind = "unauthorized"
    status_code = 401
    default_message = "Error: login required"


class InvalidDateRangeError(BookingError):
    """Raised when end date is not after start date or a date cannot be parsed."""

    kind = "invalid_range"
    default_message = "Error: invalid date range"


class InvalidTransitionError(BookingError):
    """Raised when a reservation is not in a status that allows the operation."""

    kind = "invalid_transition"
    status_code = 409
    default_message = "Error: invalid status transition"


class VehicleUnavailableError(BookingError):
    """Raised when a vehicle is already reserved for the requested dates."""

    kind = "vehicle_unavailable"
    status_code = 409
    default_message = "Error: vehicle is not available"


class TokenMismatchError(BookingError):
    """Raised when a presented handover token does not match the stored one."""

    kind = "token_mismatch"
    status_code = 422
    default_message = "Error: handover token does not match"


class CatalogUnavailableError(BookingError):
    """Raised when the catalog lookup does not answer within its timeout."""

    kind = "catalog_unavailable"
    status_code = 503
    default_message = "Error: vehicle catalog is unavailable"


class ValidationError(BookingError):
    kind = "validation_error"
    default_message = "Error: invalid request"


class ConfigurationError(RuntimeError):
    """Raised at start-up when required settings are missing."""
