"""HTTP client factory for hsc-fetch."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from . import __version__

if TYPE_CHECKING:
    from .config import ApiConfig


def create_async_http_client(config: ApiConfig) -> httpx.AsyncClient:
    """Create configured async HTTP client.

    No ``base_url`` is set on the client: target URLs are composed per
    request, and the per-attempt timeout is passed with each request.

    Args:
        config: Client configuration.

    Returns:
        Configured httpx.AsyncClient.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout),
        headers={
            "User-Agent": f"hsc-fetch/{__version__} Python",
            "Accept": "application/json",
        },
        follow_redirects=True,
    )
