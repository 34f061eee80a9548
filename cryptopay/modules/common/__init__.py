"""Shared value types and errors."""

from .exceptions import ExternalSourceError
from .models import MINOR_UNITS_PER_COIN, CurrencyKind, to_minor_units, utcnow

__all__ = [
    "CurrencyKind",
    "ExternalSourceError",
    "MINOR_UNITS_PER_COIN",
    "to_minor_units",
    "utcnow",
]
