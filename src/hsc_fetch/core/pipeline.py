"""Logical-call state machine for hsc-fetch.

Drives attempts through the executor, consults the retry policy after
each one, refreshes the token or backs off as decided, and delivers the
result through exactly one of ``on_success`` / ``on_error``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from ..errors import AuthenticationError, FetchError, TokenRefreshError
from ..models import FetchResult
from ..telemetry import get_logger, trace_operation
from .callbacks import deliver
from .errors import ErrorFactory
from .retry_policy import CallState

if TYPE_CHECKING:
    from ..config import ApiConfig
    from ..models import FetchOptions
    from .request_executor import AttemptOutcome, RequestExecutor
    from .retry_policy import RetryPolicy
    from .token_manager import RefreshCoordinator


@dataclass
class CallProgress:
    """Mutable per-call counters, readable even when the loop raises."""

    attempts: int = 0
    refreshed: bool = False


class RequestPipeline:
    """Runs logical calls.

    Each call is a bounded loop: a retry consumes budget and a refresh can
    happen once, so a call makes at most ``retry_count + 2`` attempts.
    """

    def __init__(
        self,
        config: ApiConfig,
        executor: RequestExecutor,
        coordinator: RefreshCoordinator,
        policy: RetryPolicy,
    ) -> None:
        self._config = config
        self._executor = executor
        self._coordinator = coordinator
        self._policy = policy
        self._logger = get_logger()

    async def run(self, options: FetchOptions) -> FetchResult:
        """Execute one logical call.

        Request failures never raise; they are delivered to ``on_error``
        and reflected in the returned ``FetchResult``.
        """
        progress = CallProgress()
        with trace_operation(
            "hsc_fetch.request",
            attributes={"http.method": options.method, "http.path": options.url},
        ) as span:
            try:
                outcome, error = await self._execute(options, progress)
            except Exception as e:
                error = ErrorFactory.from_exception(e)
                self._logger.error(
                    "Request raised",
                    method=options.method,
                    url=options.url,
                    attempts=progress.attempts,
                    error=repr(e),
                )
                outcome = None

            if error is None and outcome is not None:
                span.set_attribute("http.status_code", outcome.status_code or 0)
                await deliver(options.on_success, "on_success", outcome.data)
                return FetchResult(
                    ok=True,
                    data=outcome.data,
                    status_code=outcome.status_code,
                    attempts=progress.attempts,
                )

            return await self.fail(
                error,
                on_error=options.on_error,
                method=options.method,
                url=options.url,
                attempts=progress.attempts,
            )

    async def fail(
        self,
        error: FetchError,
        *,
        on_error: Callable[[FetchError], Any] | None,
        method: str,
        url: str,
        attempts: int = 0,
    ) -> FetchResult:
        """Deliver a terminal error to ``on_error`` and build the failed result."""
        self._logger.warning(
            "Request failed",
            method=method,
            url=url,
            attempts=attempts,
            code=error.code,
            error=error.message,
        )
        await deliver(on_error, "on_error", error)
        return FetchResult(
            ok=False,
            error=error,
            status_code=error.status_code,
            attempts=attempts,
        )

    async def _execute(
        self,
        options: FetchOptions,
        progress: CallProgress,
    ) -> tuple[AttemptOutcome, FetchError | None]:
        """Run the attempt loop until a terminal state.

        ``progress`` is updated in place after every attempt.

        Returns:
            Tuple of (last outcome, terminal error or None).
        """
        retry_count = (
            options.retry_count
            if options.retry_count is not None
            else self._config.retry.retry_count
        )
        retries_left = retry_count

        while True:
            outcome = await self._executor.attempt(options, progress.attempts)
            progress.attempts += 1
            state = self._policy.next_state(
                outcome,
                retries_left=retries_left,
                refreshed=progress.refreshed,
            )

            if state is CallState.SUCCEEDED:
                return outcome, None

            if state is CallState.REFRESHING:
                progress.refreshed = True
                try:
                    await self._coordinator.refresh(outcome.token_generation)
                except TokenRefreshError as e:
                    error = AuthenticationError(
                        str(e),
                        correlation_id=ErrorFactory.generate_correlation_id(),
                        details={"attempts": progress.attempts},
                    )
                    error.__cause__ = e
                    return outcome, error
                continue

            if state is CallState.BACKING_OFF:
                retry_index = retry_count - retries_left
                delay = self._policy.backoff_delay(retry_index, options.retry_delay)
                self._logger.warning(
                    "Request failed, retrying",
                    url=options.url,
                    attempt=progress.attempts,
                    delay=delay,
                    reason=str(outcome.status_code or outcome.kind),
                )
                await asyncio.sleep(delay)
                retries_left -= 1
                continue

            return outcome, ErrorFactory.from_outcome(
                outcome,
                attempts=progress.attempts,
                retryable=self._policy.is_retryable(outcome),
            )
