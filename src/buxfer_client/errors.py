from __future__ import annotations


class BuxferError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(BuxferError, ValueError):
    """
    Input rejected before any request was made:
    empty credentials, contradictory transaction type / accounts / shared-with,
    zero amount.
    """


class AuthError(BuxferError):
    """The service refused the login attempt."""

    def __init__(self, message: str, status: str | None = None):
        super().__init__(message)
        self.status = status


class ApiError(BuxferError, RuntimeError):
    """Transport failure, HTTP error or a body that is not a Buxfer envelope."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
