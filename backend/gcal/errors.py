# backend/gcal/errors.py
"""Error types surfaced to API callers."""


class CalendarAPIError(Exception):
    """Base error; ``status_code`` is the HTTP status reported to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(CalendarAPIError):
    status_code = 401


class ValidationError(CalendarAPIError):
    status_code = 400


class ConflictError(CalendarAPIError):
    """Raised when a user tries to connect an account that is already connected."""

    status_code = 400


class NotFoundError(CalendarAPIError):
    status_code = 404


class UpstreamError(CalendarAPIError):
    """Wraps failures from the calendar engine or the state store."""

    status_code = 500
