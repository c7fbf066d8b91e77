"""Retry and refresh decisions for a logical call.

The policy is pure: it looks at one attempt outcome plus the call's
remaining budget and returns the next state. The pipeline owns the loop.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from .request_executor import OutcomeKind

if TYPE_CHECKING:
    from ..config import RetryConfig
    from .request_executor import AttemptOutcome


class CallState(StrEnum):
    """States of a logical call."""

    ATTEMPTING = "attempting"
    REFRESHING = "refreshing"
    BACKING_OFF = "backing_off"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def should_retry_status(status_code: int, extra: frozenset[int] = frozenset()) -> bool:
    """Check if status code should trigger retry.

    Args:
        status_code: HTTP status code.
        extra: Additional retryable statuses.

    Returns:
        True if should retry.
    """
    return status_code >= 500 or status_code in extra


class RetryPolicy:
    """Decides what a logical call does after each attempt."""

    def __init__(self, retry_config: RetryConfig) -> None:
        self._retry_config = retry_config

    def is_retryable(self, outcome: AttemptOutcome) -> bool:
        """Whether the outcome is a transient failure worth retrying.

        Timeouts are not retryable; they surface without touching the budget.
        """
        if outcome.kind is OutcomeKind.NETWORK_ERROR:
            return True
        if outcome.kind is OutcomeKind.HTTP_ERROR and outcome.status_code is not None:
            return should_retry_status(outcome.status_code, self._retry_config.retry_statuses)
        return False

    def next_state(
        self,
        outcome: AttemptOutcome,
        *,
        retries_left: int,
        refreshed: bool,
    ) -> CallState:
        """Compute the state following an attempt.

        Args:
            outcome: Outcome of the attempt that just finished.
            retries_left: Remaining retry budget of the call.
            refreshed: Whether the call already went through a refresh.

        Returns:
            Next call state.
        """
        if outcome.kind is OutcomeKind.SUCCESS:
            return CallState.SUCCEEDED

        if outcome.kind is OutcomeKind.UNAUTHORIZED:
            if outcome.token_enabled and not refreshed:
                return CallState.REFRESHING
            return CallState.FAILED

        if self.is_retryable(outcome) and retries_left > 0:
            return CallState.BACKING_OFF

        return CallState.FAILED

    def backoff_delay(self, retry_index: int, retry_delay: float | None = None) -> float:
        """Delay before the given retry (0-indexed).

        Args:
            retry_index: Number of retries already performed.
            retry_delay: Per-call base delay overriding the configured one.

        Returns:
            Delay in seconds.
        """
        return self._retry_config.get_delay(retry_index, retry_delay)
