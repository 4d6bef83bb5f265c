"""Custom exceptions for pyzenwifi library."""

from __future__ import annotations

from typing import Any


class ZenError(Exception):
    """Base exception for all Zen thermostat errors."""


class MissingTokensError(ZenError):
    """Exception raised when a request needs tokens but none are set."""


class AuthenticationError(ZenError):
    """Exception raised for token endpoint and authorization failures.

    Attributes:
        status_code: HTTP status returned by the API, if any.
        body: Decoded error payload returned by the API, if any.
        error: OAuth2 ``error`` code from the payload (e.g. ``invalid_grant``).
        error_description: Human-readable description from the payload.
    """

    def __init__(
        self,
        message: str = "",
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        """Initialize AuthenticationError.

        Args:
            message: Error message.
            status_code: Optional HTTP status code of the failed response.
            body: Optional decoded response body.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    @property
    def error(self) -> str | None:
        """Return the OAuth2 error code from the response body."""
        if isinstance(self.body, dict):
            return self.body.get("error")
        return None

    @property
    def error_description(self) -> str | None:
        """Return the OAuth2 error description from the response body."""
        if isinstance(self.body, dict):
            return self.body.get("error_description")
        return None


class InvalidParameterError(ZenError):
    """Exception raised for invalid parameter values.

    Attributes:
        parameter_name: Optional name of the invalid parameter.
        value: Optional value that was invalid.
    """

    def __init__(
        self,
        message: str = "",
        parameter_name: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize InvalidParameterError.

        Args:
            message: Error message.
            parameter_name: Optional name of the invalid parameter.
            value: Optional value that was invalid.
        """
        super().__init__(message)
        self.parameter_name = parameter_name
        self.value = value
