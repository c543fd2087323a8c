"""
Domain exceptions mapped to HTTP responses in ``callrelay.main``.
"""


class RelayError(Exception):
    """Base exception for relay operations."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RelayError):
    """Caller omitted a required field."""

    status_code = 400


class InternalError(RelayError):
    """An SDK call or internal step failed."""

    status_code = 500
