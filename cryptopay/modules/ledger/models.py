"""Ledger observations and the amount matching rules."""

from __future__ import annotations

from dataclasses import dataclass

from cryptopay.modules.common import CurrencyKind


@dataclass(slots=True, frozen=True)
class AddressBalanceSnapshot:
    address: str
    currency: CurrencyKind
    received_minor: int
    explorer: str


def matches_output(value_minor: int, expected_minor: int, tolerance_minor: int) -> bool:
    """A single output pays the order when it falls short by less than the tolerance, or overpays."""
    return value_minor > expected_minor - tolerance_minor or value_minor >= expected_minor


def covers_cumulative(received_minor: int, expected_minor: int, tolerance_minor: int) -> bool:
    """A cumulative total pays the order when the shortfall is below tolerance."""
    return expected_minor - received_minor < tolerance_minor or received_minor >= expected_minor
