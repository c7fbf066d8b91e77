"""hsc-fetch API client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

import pydantic

from .config import ApiConfig
from .core.errors import ErrorFactory
from .core.pipeline import RequestPipeline
from .core.request_executor import RequestExecutor
from .core.retry_policy import RetryPolicy
from .core.token_manager import RefreshCoordinator, TokenStore
from .http import create_async_http_client
from .models import FetchOptions

if TYPE_CHECKING:
    import httpx

    from .models import FetchResult


class ApiClient:
    """Async HTTP client with token attachment, refresh-on-401, retry and timeout.

    Example:
        async with ApiClient(base_url="https://api.example.com", get_token=load_token) as api:
            await api.get("/items", query={"select": "*"}, on_success=print)
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        **config_fields: Any,
    ) -> None:
        """Initialize client.

        Args:
            config: Resolved configuration. Built from ``config_fields`` when
                omitted; ``config_fields`` override it when both are given.
            http_client: Optional ``httpx.AsyncClient`` to send requests with.
                It is not closed by ``aclose()``.
            **config_fields: ``ApiConfig`` fields.

        Raises:
            InvalidConfigError: If the configuration does not validate.
        """
        try:
            if config is None:
                config = ApiConfig(**config_fields)
            elif config_fields:
                config = config.with_overrides(**config_fields)
        except pydantic.ValidationError as e:
            raise ErrorFactory.config_error(e) from e

        self.config = config
        self._owns_http = http_client is None
        self._http = http_client or create_async_http_client(config)
        self._token_store = TokenStore(config)
        self._refresh_coordinator = RefreshCoordinator(config, self._token_store)
        self._pipeline = RequestPipeline(
            config,
            RequestExecutor(self._http, config, self._token_store),
            self._refresh_coordinator,
            RetryPolicy(config.retry),
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    def get_config(self) -> ApiConfig:
        """Return the resolved configuration."""
        return self.config

    @property
    def token_store(self) -> TokenStore:
        """Token state owned by this client."""
        return self._token_store

    async def refresh_token(self) -> None:
        """Run the refresh callback now, joining any refresh in flight.

        Raises:
            TokenRefreshError: If the refresh callback failed.
        """
        await self._refresh_coordinator.refresh()

    async def request(self, method: str, url: str, **options: Any) -> FetchResult:
        """Execute one logical call.

        Args:
            method: HTTP method.
            url: Path relative to ``base_url`` (or an absolute URL).
            **options: ``FetchOptions`` fields: ``query``, ``headers``,
                ``body``, ``timeout``, ``retry_count``, ``retry_delay``,
                ``on_success``, ``on_error``, ``before_request``,
                ``after_response``, ``use_token``.

        Returns:
            Result of the call. Failures, invalid options included, are
            reported here and to ``on_error``; they are never raised.
        """
        try:
            fetch_options = FetchOptions(method=method, url=url, **options)
        except pydantic.ValidationError as e:
            on_error = options.get("on_error")
            return await self._pipeline.fail(
                ErrorFactory.config_error(e),
                on_error=on_error if callable(on_error) else None,
                method=str(method).upper(),
                url=url,
            )
        return await self._pipeline.run(fetch_options)

    async def get(self, url: str, **options: Any) -> FetchResult:
        """Send a GET request."""
        return await self.request("GET", url, **options)

    async def post(self, url: str, **options: Any) -> FetchResult:
        """Send a POST request with a JSON body."""
        return await self.request("POST", url, **options)

    async def put(self, url: str, **options: Any) -> FetchResult:
        """Send a PUT request with a JSON body."""
        return await self.request("PUT", url, **options)

    async def patch(self, url: str, **options: Any) -> FetchResult:
        """Send a PATCH request with a JSON body."""
        return await self.request("PATCH", url, **options)

    async def delete(self, url: str, **options: Any) -> FetchResult:
        """Send a DELETE request."""
        return await self.request("DELETE", url, **options)
