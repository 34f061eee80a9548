"""Shared ``httpx`` client for rate sources and explorers."""

from __future__ import annotations

from typing import Any

import httpx

from cryptopay.core.config import HttpSettings


def build_async_client(settings: HttpSettings, **kwargs: Any) -> httpx.AsyncClient:
    """Get a configured async httpx client; every call carries the bounded timeout."""
    return httpx.AsyncClient(
        timeout=settings.timeout_seconds,
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        follow_redirects=True,
        **kwargs,
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    error: type[Exception],
) -> Any:
    """GET ``url`` and decode JSON, raising ``error`` for transport, status or body failures."""
    try:
        response = await client.get(url, params=params)
    except httpx.HTTPError as exc:
        raise error(f"request to {url} failed: {exc!r}") from exc
    if response.status_code != 200:
        raise error(f"{url} answered HTTP {response.status_code}")
    try:
        return response.json()
    except ValueError as exc:
        raise error(f"{url} returned a non-JSON body") from exc
