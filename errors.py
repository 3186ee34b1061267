"""
Exceptions for TripSplit
"""
from __future__ import annotations


class TripSplitError(Exception):
    """Base class for TripSplit errors"""


class InvalidExpense(TripSplitError, ValueError):
    """Malformed expense input rejected by the ledger"""


class ConversionUnavailable(TripSplitError):
    """No usable rate for an expense's currency"""

    def __init__(self, currency: str, base_currency: str, detail: str = ""):
        self.currency = currency
        self.base_currency = base_currency
        msg = f"No conversion rate for {currency} to {base_currency}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class InvalidReference(TripSplitError):
    """Stored expense pointing at participants that no longer exist"""


class RatesFetchFailed(TripSplitError):
    """The rate table as a whole could not be obtained"""
