"""Single-attempt HTTP execution for hsc-fetch.

Builds one request (URL, headers, body), dispatches it under a timeout
and classifies whatever comes back into an ``AttemptOutcome``. Retry and
refresh decisions are made elsewhere.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, urlencode, urlsplit

import httpx
import pydantic_core

from ..telemetry import get_logger, trace_operation
from .callbacks import call_maybe_async

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..config import ApiConfig
    from ..models import FetchOptions
    from .token_manager import TokenStore

JSON_CONTENT_TYPE = "application/json"
NO_CONTENT_STATUSES = frozenset({204, 205, 304})


class OutcomeKind(StrEnum):
    """Classification of one attempt."""

    SUCCESS = "success"
    UNAUTHORIZED = "unauthorized"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"


@dataclass
class AttemptOutcome:
    """Result of one dispatch, consumed immediately by the retry policy."""

    kind: OutcomeKind
    data: Any = None
    status_code: int | None = None
    response: httpx.Response | None = None
    error: Exception | None = None
    # None when token attachment was disabled for the call.
    token_generation: int | None = None
    timeout: float | None = None

    @property
    def token_enabled(self) -> bool:
        """Whether the call asked for token attachment."""
        return self.token_generation is not None


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query(query: Mapping[str, Any] | None) -> str:
    """Percent-encode query parameters.

    ``None`` values are skipped, lists and tuples repeat the key. Only
    unreserved characters stay literal, so ``*`` becomes ``%2A`` and a
    space becomes ``%20``.
    """
    if not query:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in query.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        pairs.extend((str(key), _stringify(item)) for item in values if item is not None)
    return urlencode(pairs, quote_via=quote, safe="")


def build_url(base_url: str, url: str, query: Mapping[str, Any] | None = None) -> str:
    """Join base URL, path and encoded query into the target URL."""
    if base_url and not urlsplit(url).scheme:
        target = f"{base_url}/{url.lstrip('/')}" if url else base_url
    else:
        target = url

    encoded = encode_query(query)
    if encoded:
        separator = "&" if "?" in target else "?"
        target = f"{target}{separator}{encoded}"
    return target


def encode_body(body: Any) -> tuple[bytes, str | None]:
    """Serialize a request body, returning content and its content type."""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body), None
    return pydantic_core.to_json(body), JSON_CONTENT_TYPE


def parse_body(response: httpx.Response) -> Any:
    """Decode a response body: JSON when declared, text otherwise."""
    if response.status_code in NO_CONTENT_STATUSES or not response.content:
        return None
    content_type = response.headers.get("content-type", "").lower()
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


def classify_status(status_code: int) -> OutcomeKind:
    """Map a response status to an outcome kind."""
    if 200 <= status_code < 300:
        return OutcomeKind.SUCCESS
    if status_code == 401:
        return OutcomeKind.UNAUTHORIZED
    return OutcomeKind.HTTP_ERROR


class RequestExecutor:
    """Dispatches single attempts through an ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: ApiConfig,
        store: TokenStore,
    ) -> None:
        """Initialize executor.

        Args:
            client: Async HTTP client used for every attempt.
            config: Client configuration.
            store: Token store read before each attempt.
        """
        self._client = client
        self._config = config
        self._store = store
        self._logger = get_logger()

    def authorization_value(self, token: str) -> str:
        """Format the Authorization header value for ``token``."""
        scheme = self._config.authorization_scheme
        return f"{scheme} {token}" if scheme else token

    async def build_request(
        self,
        options: FetchOptions,
    ) -> tuple[httpx.Request, int | None, float]:
        """Build the request for one attempt.

        Returns:
            Tuple of (request, token generation or None, timeout seconds).
        """
        url = build_url(self._config.base_url, options.url, options.query)
        timeout = options.timeout or self._config.timeout

        headers = httpx.Headers(self._config.headers)
        generation: int | None = None
        if options.use_token:
            generation = self._store.generation
            token = await self._store.get_current_token()
            if self._store.generation != generation:
                # A refresh finished while the accessor ran; re-read so the
                # token and the generation it is tagged with agree.
                generation = self._store.generation
                token = await self._store.get_current_token()
            if token:
                headers["Authorization"] = self.authorization_value(token)

        content: bytes | None = None
        content_type: str | None = None
        if options.body is not None:
            content, content_type = encode_body(options.body)

        headers.update(options.headers)
        if content_type and "content-type" not in headers:
            headers["Content-Type"] = content_type

        request = self._client.build_request(
            options.method,
            url,
            headers=headers,
            content=content,
            timeout=timeout,
        )
        return request, generation, timeout

    async def attempt(self, options: FetchOptions, attempt: int = 0) -> AttemptOutcome:
        """Execute one attempt.

        Args:
            options: Options of the logical call.
            attempt: Attempt number within the logical call (0-indexed).

        Returns:
            Classified outcome. Transport failures and timeouts are returned,
            not raised; exceptions from hooks propagate.
        """
        request, generation, timeout = await self.build_request(options)
        url = str(request.url)

        if options.before_request is not None:
            await call_maybe_async(options.before_request, url, request)

        with trace_operation(
            "http_request",
            attributes={"http.method": request.method, "http.url": url, "attempt": attempt},
        ) as span:
            try:
                async with asyncio.timeout(timeout):
                    response = await self._client.send(request)
            except (TimeoutError, httpx.TimeoutException) as e:
                self._logger.debug("Request timed out", url=url, timeout=timeout)
                return AttemptOutcome(
                    OutcomeKind.TIMEOUT,
                    error=e,
                    token_generation=generation,
                    timeout=timeout,
                )
            except httpx.TransportError as e:
                self._logger.debug("Transport error", url=url, error=str(e))
                return AttemptOutcome(
                    OutcomeKind.NETWORK_ERROR,
                    error=e,
                    token_generation=generation,
                )
            span.set_attribute("http.status_code", response.status_code)

        if options.after_response is not None:
            await call_maybe_async(options.after_response, response)

        return AttemptOutcome(
            classify_status(response.status_code),
            data=parse_body(response),
            status_code=response.status_code,
            response=response,
            token_generation=generation,
        )
