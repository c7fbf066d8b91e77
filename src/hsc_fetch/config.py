"""Configuration for hsc-fetch.

Uses Pydantic v2 for validation with sensible defaults. All durations are
expressed in seconds.
"""

from __future__ import annotations

import random
from typing import Annotated, Any, Callable, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRY_DELAY = 1.0


def _no_token() -> None:
    return None


async def _noop_refresh() -> None:
    return None


def _noop() -> None:
    return None


class RetryConfig(BaseModel):
    """Retry configuration.

    ``retry_count`` is the number of *additional* attempts after the first
    one. The delay between attempts is fixed unless ``backoff_multiplier``
    is raised above 1.
    """

    model_config = ConfigDict(frozen=True)

    retry_count: Annotated[int, Field(ge=0, le=10)] = 0
    retry_delay: Annotated[float, Field(ge=0, le=60)] = DEFAULT_RETRY_DELAY
    backoff_multiplier: Annotated[float, Field(ge=1.0, le=3.0)] = 1.0
    max_delay: Annotated[float, Field(gt=0, le=300)] = 30.0
    jitter: Annotated[float, Field(ge=0, le=1.0)] = 0.0
    # Retried in addition to every 5xx status.
    retry_statuses: frozenset[int] = frozenset()

    @field_validator("retry_statuses")
    @classmethod
    def validate_retry_statuses(cls, v: frozenset[int]) -> frozenset[int]:
        """Only 4xx statuses make sense as extra retryable statuses."""
        invalid = sorted(s for s in v if not 400 <= s < 500 or s == 401)
        if invalid:
            msg = f"retry_statuses must be 4xx statuses other than 401, got {invalid}"
            raise ValueError(msg)
        return v

    def get_delay(self, retry_index: int, base_delay: float | None = None) -> float:
        """Calculate the delay before the given retry (0-indexed)."""
        base = self.retry_delay if base_delay is None else base_delay
        if self.backoff_multiplier > 1.0:
            delay = min(base * (self.backoff_multiplier**retry_index), max(base, self.max_delay))
        else:
            delay = base
        jitter_range = delay * self.jitter
        return max(0.0, delay + random.uniform(-jitter_range, jitter_range))  # noqa: S311


class TelemetryConfig(BaseModel):
    """Logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "hsc-fetch"
    log_level: str = "INFO"


class ApiConfig(BaseModel):
    """Resolved configuration of one ``ApiClient``."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    base_url: str = ""
    get_token: Callable[[], Any] = _no_token
    on_refresh_token: Callable[[], Any] = _noop_refresh
    on_refresh_token_failed: Callable[[], Any] = _noop
    authorization_type: str | None = "Bearer"

    headers: dict[str, str] = Field(default_factory=dict)
    timeout: Annotated[float, Field(gt=0, le=300)] = DEFAULT_TIMEOUT

    retry: RetryConfig = Field(default_factory=RetryConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        """Drop the trailing slash so paths join with exactly one."""
        return v.strip().rstrip("/")

    @property
    def authorization_scheme(self) -> str:
        """Scheme label, empty when the bare token is sent."""
        return (self.authorization_type or "").strip()

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = dict(self)
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "HSC_FETCH_", **overrides: Any) -> Self:
        """Create config from environment variables.

        Callables cannot come from the environment; pass them as keyword
        overrides.
        """
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        data: dict[str, Any] = {
            "base_url": get_env("BASE_URL", ""),
            "timeout": float(get_env("TIMEOUT", str(DEFAULT_TIMEOUT))),
            "retry": RetryConfig(
                retry_count=int(get_env("RETRY_COUNT", "0")),
                retry_delay=float(get_env("RETRY_DELAY", str(DEFAULT_RETRY_DELAY))),
            ),
        }
        auth_type = get_env("AUTHORIZATION_TYPE")
        if auth_type is not None:
            data["authorization_type"] = auth_type or None

        data.update(overrides)
        return cls(**data)
