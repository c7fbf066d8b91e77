"""Error classes for hsc-fetch.

Structured error hierarchy with stable error codes and correlation IDs.
Every failure of a logical call is delivered to ``on_error`` as one of
these classes; ``str(error)`` is the user-visible description.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for hsc-fetch."""

    # Authentication errors (1xxx)
    TOKEN_REFRESH_FAILED = "AUTH_1003"
    UNAUTHORIZED = "AUTH_1005"

    # Validation errors (2xxx)
    INVALID_CONFIG = "VAL_2002"

    # Network errors (3xxx)
    NETWORK_ERROR = "NET_3001"
    TIMEOUT_ERROR = "NET_3002"

    # Client errors (4xxx)
    CLIENT_ERROR = "CLI_4001"

    # Server errors (5xxx)
    SERVER_ERROR = "SRV_5001"

    # Unexpected errors (9xxx)
    UNEXPECTED_ERROR = "GEN_9001"


class FetchError(Exception):
    """Base error for hsc-fetch with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if isinstance(code, str) else code.value
        self.status_code = status_code
        self.correlation_id = correlation_id
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "correlation_id": self.correlation_id,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class RequestTimeoutError(FetchError):
    """Attempt did not receive a response within its timeout."""

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        correlation_id: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TIMEOUT_ERROR,
            status_code=408,
            correlation_id=correlation_id,
            details={"timeout_seconds": timeout_seconds} if timeout_seconds else None,
        )
        self.timeout_seconds = timeout_seconds


class NetworkError(FetchError):
    """Network request failed before a response arrived."""

    def __init__(
        self,
        message: str = "Network request failed",
        *,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.NETWORK_ERROR,
            correlation_id=correlation_id,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class AuthenticationError(FetchError):
    """Server rejected the credentials and no refresh could fix it."""

    def __init__(
        self,
        message: str = "Authentication failed",
        *,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.UNAUTHORIZED,
            status_code=401,
            correlation_id=correlation_id,
            details=details,
        )


class TokenRefreshError(FetchError):
    """The configured refresh callback failed."""

    def __init__(
        self,
        message: str = "Failed to refresh token",
        *,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TOKEN_REFRESH_FAILED,
            status_code=401,
            correlation_id=correlation_id,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class ClientError(FetchError):
    """Non-retryable 4xx response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 400,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.CLIENT_ERROR,
            status_code=status_code,
            correlation_id=correlation_id,
            details=details,
        )


class ServerError(FetchError):
    """Retryable response status that outlived the retry budget."""

    def __init__(
        self,
        message: str = "Server error",
        *,
        status_code: int = 500,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.SERVER_ERROR,
            status_code=status_code,
            correlation_id=correlation_id,
            details=details,
        )


class InvalidConfigError(FetchError):
    """Invalid client configuration or request options."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )
