"""
Shared test fixtures for hsc-fetch tests.

Provides a mock transport server, configuration fixtures and a client
factory wired to ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from hsc_fetch import ApiClient
from hsc_fetch.config import ApiConfig, RetryConfig, TelemetryConfig

BASE_URL = "https://api.example.com"

Handler = Callable[[httpx.Request], Any]


class MockServer:
    """Records requests and answers them through a handler."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    @property
    def call_count(self) -> int:
        return len(self.requests)


class TokenState:
    """Mutable token shared by accessor and refresh callback."""

    def __init__(self, token: str | None = "test-token") -> None:
        self.token = token
        self.refresh_calls = 0
        self.failed_calls = 0

    def get_token(self) -> str | None:
        return self.token

    async def refresh(self) -> None:
        self.refresh_calls += 1
        self.token = "new-test-token"

    def on_failed(self) -> None:
        self.failed_calls += 1


@pytest.fixture
def token_state() -> TokenState:
    """Provide token state starting at ``test-token``."""
    return TokenState()


@pytest.fixture
def base_config(token_state: TokenState) -> ApiConfig:
    """Provide a basic client configuration for testing."""
    return ApiConfig(
        base_url=BASE_URL,
        get_token=token_state.get_token,
        on_refresh_token=token_state.refresh,
        on_refresh_token_failed=token_state.on_failed,
    )


@pytest.fixture
def retry_config() -> RetryConfig:
    """Provide retry configuration for testing."""
    return RetryConfig(
        retry_count=3,
        retry_delay=0.0,
        backoff_multiplier=2.0,
        max_delay=1.0,
        jitter=0.0,
    )


@pytest.fixture
def telemetry_config() -> TelemetryConfig:
    """Provide telemetry configuration for testing."""
    return TelemetryConfig(enabled=False, service_name="test-hsc-fetch")


@pytest.fixture
def make_client(base_config: ApiConfig) -> Callable[..., tuple[ApiClient, MockServer]]:
    """Provide a factory building a client in front of a mock server."""

    def factory(handler: Handler, **overrides: Any) -> tuple[ApiClient, MockServer]:
        server = MockServer(handler)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(server))
        config = base_config.with_overrides(**overrides) if overrides else base_config
        return ApiClient(config, http_client=http_client), server

    return factory
