"""Unit tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from hsc_fetch.config import DEFAULT_TIMEOUT, ApiConfig, RetryConfig, TelemetryConfig
from hsc_fetch.models import FetchOptions


class TestApiConfig:
    """Tests for ApiConfig."""

    def test_defaults(self) -> None:
        config = ApiConfig()

        assert config.base_url == ""
        assert config.get_token() is None
        assert config.on_refresh_token_failed() is None
        assert config.authorization_type == "Bearer"
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.retry.retry_count == 0

    def test_base_url_trailing_slash_removed(self) -> None:
        assert ApiConfig(base_url="https://api.example.com/").base_url == "https://api.example.com"

    def test_authorization_scheme(self) -> None:
        assert ApiConfig(authorization_type=" Basic ").authorization_scheme == "Basic"
        assert ApiConfig(authorization_type=None).authorization_scheme == ""

    def test_is_frozen(self) -> None:
        config = ApiConfig()

        with pytest.raises(ValidationError):
            config.base_url = "https://other"  # type: ignore[misc]

    def test_rejects_non_callable_token_getter(self) -> None:
        with pytest.raises(ValidationError):
            ApiConfig(get_token="token")

    def test_with_overrides(self, base_config: ApiConfig) -> None:
        updated = base_config.with_overrides(timeout=2.5)

        assert updated.timeout == 2.5
        assert updated.base_url == base_config.base_url
        assert updated.get_token is base_config.get_token
        assert base_config.timeout == DEFAULT_TIMEOUT

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HSC_FETCH_BASE_URL", "https://env.example.com/")
        monkeypatch.setenv("HSC_FETCH_TIMEOUT", "5")
        monkeypatch.setenv("HSC_FETCH_RETRY_COUNT", "2")
        monkeypatch.setenv("HSC_FETCH_RETRY_DELAY", "0.25")
        monkeypatch.setenv("HSC_FETCH_AUTHORIZATION_TYPE", "")

        config = ApiConfig.from_env(get_token=lambda: "tok")

        assert config.base_url == "https://env.example.com"
        assert config.timeout == 5.0
        assert config.retry.retry_count == 2
        assert config.retry.retry_delay == 0.25
        assert config.authorization_type is None
        assert config.get_token() == "tok"

    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("BASE_URL", "TIMEOUT", "RETRY_COUNT", "RETRY_DELAY", "AUTHORIZATION_TYPE"):
            monkeypatch.delenv(f"HSC_FETCH_{key}", raising=False)

        config = ApiConfig.from_env()

        assert config.base_url == ""
        assert config.authorization_type == "Bearer"


class TestRetryConfig:
    """Tests for RetryConfig."""

    def test_invalid_retry_count(self) -> None:
        with pytest.raises(ValueError):
            RetryConfig(retry_count=-1)

        with pytest.raises(ValueError):
            RetryConfig(retry_count=11)

    def test_invalid_retry_statuses(self) -> None:
        with pytest.raises(ValueError):
            RetryConfig(retry_statuses=frozenset({401}))

        with pytest.raises(ValueError):
            RetryConfig(retry_statuses=frozenset({503}))

    def test_exponential_delay_is_capped(self) -> None:
        config = RetryConfig(retry_delay=0.5, backoff_multiplier=2.0, max_delay=3.0)

        assert [config.get_delay(i) for i in range(5)] == [0.5, 1.0, 2.0, 3.0, 3.0]


class TestTelemetryConfig:
    """Tests for TelemetryConfig."""

    def test_defaults(self) -> None:
        config = TelemetryConfig()

        assert config.enabled is True
        assert config.service_name == "hsc-fetch"
        assert config.log_level == "INFO"


class TestFetchOptions:
    """Tests for FetchOptions."""

    def test_method_is_normalized(self) -> None:
        assert FetchOptions(method="post", url="/x").method == "POST"

    def test_unknown_method_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FetchOptions(method="BREW", url="/x")

    def test_overrides_default_to_none(self) -> None:
        options = FetchOptions(url="/x")

        assert options.timeout is None
        assert options.retry_count is None
        assert options.retry_delay is None
        assert options.use_token is True

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FetchOptions(url="/x", timeout=0)

    def test_per_call_budgets_have_no_upper_bound(self) -> None:
        options = FetchOptions(url="/x", timeout=900, retry_count=50, retry_delay=120)

        assert options.retry_count == 50
        assert options.timeout == 900

    def test_header_values_are_stringified(self) -> None:
        options = FetchOptions(url="/x", headers={"X-Page": 3, "X-Flag": False, "X-None": None})

        assert options.headers == {"X-Page": "3", "X-Flag": "false"}

    def test_none_headers_become_empty(self) -> None:
        assert FetchOptions(url="/x", headers=None).headers == {}
