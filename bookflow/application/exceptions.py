class BookingError(RuntimeError):
    """Base class for errors surfaced to the booking flow."""
    pass


class ValidationError(BookingError):
    """Raised when session data is incomplete or a snapshot is malformed."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


class ConflictError(BookingError):
    """Raised when the chosen slot was taken between fetch and submit."""
    pass


class NetworkError(BookingError):
    """Raised on transient backend failures (timeouts, network errors, 5xx)."""
    pass


class NotFoundError(BookingError):
    """Raised when a branch, staff member or booking link does not exist."""
    pass


class ParseError(ValueError):
    """Raised for malformed HH:MM strings in schedule configuration."""
    pass
