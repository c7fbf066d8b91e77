"""hsc-fetch: async HTTP client with token refresh, retry and timeout."""

__version__ = "1.2.5"

from .client import ApiClient  # noqa: E402
from .config import ApiConfig, RetryConfig, TelemetryConfig  # noqa: E402
from .errors import (  # noqa: E402
    AuthenticationError,
    ClientError,
    ErrorCode,
    FetchError,
    InvalidConfigError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
    TokenRefreshError,
)
from .models import FetchOptions, FetchResult  # noqa: E402
from .telemetry import configure_telemetry  # noqa: E402

__all__ = [
    "ApiClient",
    "ApiConfig",
    "RetryConfig",
    "TelemetryConfig",
    "FetchOptions",
    "FetchResult",
    "FetchError",
    "ErrorCode",
    "AuthenticationError",
    "ClientError",
    "InvalidConfigError",
    "NetworkError",
    "RequestTimeoutError",
    "ServerError",
    "TokenRefreshError",
    "configure_telemetry",
]
