"""Token state and single-flight refresh coordination.

Each ``ApiClient`` owns one ``TokenStore`` and one ``RefreshCoordinator``;
nothing here is shared between client instances.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from ..errors import TokenRefreshError
from ..telemetry import get_logger, trace_operation
from .callbacks import call_maybe_async

if TYPE_CHECKING:
    from ..config import ApiConfig


class TokenStore:
    """Reads the current token through the configured accessor.

    ``generation`` counts completed refreshes. An attempt remembers the
    generation its token was read under, so a 401 caused by a token that
    has since been refreshed does not trigger another refresh.
    """

    def __init__(self, config: ApiConfig) -> None:
        self._config = config
        self._token: str | None = None
        self._generation = 0

    @property
    def token(self) -> str | None:
        """Last token observed from the accessor."""
        return self._token

    @property
    def generation(self) -> int:
        """Number of successful refreshes so far."""
        return self._generation

    async def get_current_token(self) -> str | None:
        """Return the accessor's current token, awaiting it if needed."""
        token = await call_maybe_async(self._config.get_token)
        self._token = str(token) if token else None
        return self._token

    def mark_refreshed(self) -> None:
        """Record a completed refresh. Only the coordinator calls this."""
        self._generation += 1


class RefreshCoordinator:
    """Runs the refresh callback at most once at a time.

    Callers arriving while a refresh is in flight await the same task
    instead of starting another one.
    """

    def __init__(self, config: ApiConfig, store: TokenStore) -> None:
        self._config = config
        self._store = store
        self._pending: asyncio.Task[None] | None = None
        self._logger = get_logger()

    @property
    def is_refreshing(self) -> bool:
        """Whether a refresh is currently in flight."""
        return self._pending is not None and not self._pending.done()

    async def refresh(self, seen_generation: int | None = None) -> None:
        """Refresh the token, joining an in-flight refresh if there is one.

        Args:
            seen_generation: Generation the failed attempt's token belonged
                to. When a refresh has completed since then, return at once.

        Raises:
            TokenRefreshError: If the refresh callback failed.
        """
        if not self.is_refreshing:
            if seen_generation is not None and seen_generation != self._store.generation:
                return
            self._pending = asyncio.ensure_future(self._run_refresh())
            self._pending.add_done_callback(self._clear_pending)
        # Shielded so a cancelled waiter never cancels the shared refresh.
        await asyncio.shield(self._pending)

    def _clear_pending(self, task: asyncio.Task[None]) -> None:
        if self._pending is task:
            self._pending = None

    async def _run_refresh(self) -> None:
        with trace_operation("token_refresh", attributes={"generation": self._store.generation}):
            self._logger.info("Refreshing token", generation=self._store.generation)
            try:
                await call_maybe_async(self._config.on_refresh_token)
            except Exception as e:
                self._logger.error("Token refresh failed", error=str(e))
                await self._notify_failure()
                raise TokenRefreshError(f"Failed to refresh token: {e}", cause=e) from e
            self._store.mark_refreshed()

    async def _notify_failure(self) -> None:
        try:
            await call_maybe_async(self._config.on_refresh_token_failed)
        except Exception as e:
            self._logger.error("on_refresh_token_failed raised", error=repr(e))
