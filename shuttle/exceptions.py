"""Custom exceptions for the shuttle seat booker."""


class ShuttleError(Exception):
    """Base class for every error raised by the booker."""


class FormatError(ShuttleError):
    """Raised when a time of day or departure id cannot be parsed."""


class PreconditionError(ShuttleError):
    """Raised when a booking cannot be scheduled yet.

    ``missing`` lists the unset fields (``time``, ``departure id``, ``token``);
    it is empty when the fields are all set but the time has already passed.
    """

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class AuthError(ShuttleError):
    """Raised when the platform answers 401 (token invalid or expired)."""


class NetworkError(ShuttleError):
    """Raised when the platform cannot be reached or answers with an error."""


class BookingError(ShuttleError):
    """Raised when the platform rejects a booking."""


class AcquisitionError(ShuttleError):
    """Raised when the automated login fails to produce a token."""
