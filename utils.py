"""
Utility functions for TripSplit
"""
from __future__ import annotations
import math
import os
from typing import Optional

SUPPORTED_CURRENCIES = ["USD", "EUR", "JPY", "GBP", "CAD"]
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
    "GBP": "£",
    "CAD": "$",
}


def safe_float(x, default: Optional[float] = 0.0) -> Optional[float]:
    """Convert value to a finite float, returning default on error"""
    try:
        v = float(x)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) else default


def normalize_currency(code: str) -> str:
    """Canonical form of a currency code"""
    return str(code).strip().upper()


def format_money(amount: float, currency: str) -> str:
    """Format amount with the currency symbol, e.g. $12.50"""
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol is None:
        return f"{amount:.2f} {currency}"
    return f"{symbol}{amount:.2f}"


def app_dir() -> str:
    """
    Get application data directory: $TRIPSPLIT_HOME or ~/.tripsplit
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("TRIPSPLIT_HOME") or os.path.join(os.path.expanduser("~"), ".tripsplit")
    os.makedirs(path, exist_ok=True)
    return path
