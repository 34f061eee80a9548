"""Outbound HTTP helpers."""

from .client import build_async_client, fetch_json

__all__ = ["build_async_client", "fetch_json"]
