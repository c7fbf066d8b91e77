"""Centralized error factory for hsc-fetch.

Provides consistent error creation from attempt outcomes and exceptions.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

import httpx

from ..errors import (
    AuthenticationError,
    ClientError,
    ErrorCode,
    FetchError,
    InvalidConfigError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
)
from .request_executor import OutcomeKind

if TYPE_CHECKING:
    import pydantic

    from .request_executor import AttemptOutcome


def status_description(status_code: int, reason_phrase: str | None = None) -> str:
    """Human-readable description of a failed status."""
    reason = reason_phrase or httpx.codes.get_reason_phrase(status_code)
    if reason:
        return f"Request failed with status {status_code} ({reason})"
    return f"Request failed with status {status_code}"


class ErrorFactory:
    """Centralized error creation with consistent structure.

    All errors created through this factory include:
    - Standardized error codes
    - A correlation ID for tracing
    - Consistent detail structure for logging
    """

    @staticmethod
    def generate_correlation_id() -> str:
        """Generate a unique correlation ID."""
        return str(uuid.uuid4())

    @staticmethod
    def from_outcome(
        outcome: AttemptOutcome,
        *,
        attempts: int = 1,
        retryable: bool = False,
        correlation_id: str | None = None,
    ) -> FetchError:
        """Create the terminal error for a failed attempt outcome.

        Args:
            outcome: Outcome of the last attempt.
            attempts: Number of attempts made for the logical call.
            retryable: Whether the retry policy treats the status as transient;
                such failures are ``ServerError`` even for 4xx statuses.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            Appropriate FetchError subclass.
        """
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        if outcome.kind is OutcomeKind.TIMEOUT:
            return RequestTimeoutError(
                correlation_id=correlation_id,
                timeout_seconds=outcome.timeout,
            )

        if outcome.kind is OutcomeKind.NETWORK_ERROR:
            cause = outcome.error
            description = (str(cause) or type(cause).__name__) if cause else "connection failed"
            error = NetworkError(
                f"Network error: {description}",
                correlation_id=correlation_id,
                cause=cause,
            )
            error.details["attempts"] = attempts
            return error

        if outcome.kind is OutcomeKind.SUCCESS or outcome.status_code is None:
            msg = f"Outcome {outcome.kind} does not describe a failure"
            raise ValueError(msg)

        reason = outcome.response.reason_phrase if outcome.response is not None else None
        message = status_description(outcome.status_code, reason)
        details: dict[str, Any] = {"body": outcome.data, "attempts": attempts}

        if outcome.kind is OutcomeKind.UNAUTHORIZED:
            return AuthenticationError(
                message,
                correlation_id=correlation_id,
                details=details,
            )

        if retryable or outcome.status_code >= 500:
            return ServerError(
                message,
                status_code=outcome.status_code,
                correlation_id=correlation_id,
                details=details,
            )

        return ClientError(
            message,
            status_code=outcome.status_code,
            correlation_id=correlation_id,
            details=details,
        )

    @staticmethod
    def from_exception(
        exc: Exception,
        *,
        correlation_id: str | None = None,
    ) -> FetchError:
        """Create error from an exception raised during a logical call.

        Args:
            exc: Original exception.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            Appropriate FetchError subclass.
        """
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        if isinstance(exc, FetchError):
            # Already a library error, just ensure correlation ID
            if exc.correlation_id is None:
                exc.correlation_id = correlation_id
            return exc

        if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
            return RequestTimeoutError(correlation_id=correlation_id)

        if isinstance(exc, (httpx.HTTPError, httpx.InvalidURL)):
            return NetworkError(
                f"Network error: {exc}",
                correlation_id=correlation_id,
                cause=exc,
            )

        error = FetchError(
            f"Unexpected error: {exc!r}",
            ErrorCode.UNEXPECTED_ERROR,
            correlation_id=correlation_id,
        )
        error.__cause__ = exc
        return error

    @staticmethod
    def config_error(exc: pydantic.ValidationError) -> InvalidConfigError:
        """Create configuration error from a pydantic validation failure.

        Args:
            exc: Validation error raised while building config or options.

        Returns:
            InvalidConfigError naming the first offending field.
        """
        errors = exc.errors()
        field = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
        error = InvalidConfigError(str(exc), field=field or None)
        error.__cause__ = exc
        return error
