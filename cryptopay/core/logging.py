"""Process-wide logging setup."""

from __future__ import annotations

import logging

from cryptopay.core.config import LoggingSettings


def configure_logging(settings: LoggingSettings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.level.upper(), logging.INFO),
        format=settings.format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("cryptopay").setLevel(settings.level.upper())
    # Request lines from the shared client would drown the payment logs.
    logging.getLogger("httpx").setLevel(logging.WARNING)
