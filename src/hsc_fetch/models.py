"""Pydantic models for hsc-fetch.

Frozen request descriptors: built once per logical call and never
mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import FetchError

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


class FetchOptions(BaseModel):
    """Options of one logical call.

    ``timeout``, ``retry_count`` and ``retry_delay`` fall back to the
    client configuration when left as ``None``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: str = "GET"
    url: str
    query: dict[str, Any] | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None

    timeout: Annotated[float, Field(gt=0)] | None = None
    retry_count: Annotated[int, Field(ge=0)] | None = None
    retry_delay: Annotated[float, Field(ge=0)] | None = None

    on_success: Callable[[Any], Any] | None = None
    on_error: Callable[[FetchError], Any] | None = None
    before_request: Callable[[str, Any], Any] | None = None
    after_response: Callable[[Any], Any] | None = None

    use_token: bool = True

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Normalize and validate the HTTP method."""
        method = v.upper()
        if method not in HTTP_METHODS:
            msg = f"Unsupported HTTP method: {v}"
            raise ValueError(msg)
        return method

    @field_validator("headers", mode="before")
    @classmethod
    def stringify_headers(cls, v: Any) -> Any:
        """Render header values as strings; ``None`` values are dropped."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): _header_value(value) for k, value in v.items() if value is not None}
        return v


def _header_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


@dataclass
class FetchResult:
    """Final result of a logical call, mirroring the callback that fired."""

    ok: bool
    data: Any = None
    error: FetchError | None = None
    status_code: int | None = None
    attempts: int = 0
