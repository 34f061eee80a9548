"""Blockchain explorer access behind a uniform ``is_paid`` contract."""

from .explorers import BlockchairExplorer, EsploraExplorer, Explorer, ExplorerError
from .models import AddressBalanceSnapshot, covers_cumulative, matches_output
from .scanner import LedgerScanner

__all__ = [
    "AddressBalanceSnapshot",
    "BlockchairExplorer",
    "EsploraExplorer",
    "Explorer",
    "ExplorerError",
    "LedgerScanner",
    "covers_cumulative",
    "matches_output",
]
