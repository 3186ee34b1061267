"""
Currency normalization and conversion rates for TripSplit
"""
from __future__ import annotations
import asyncio
import json
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from errors import ConversionUnavailable, RatesFetchFailed
from models import ConversionFailure, ConversionResult, Converted, Expense, Ledger, RateStatus, RateTable
from utils import SUPPORTED_CURRENCIES, normalize_currency, safe_float

log = logging.getLogger(__name__)


def convert(
    amount: float,
    from_currency: str,
    base_currency: str,
    rate_table: Optional[RateTable],
) -> ConversionResult:
    """
    Convert amount into the base currency.
    Same currency always succeeds without looking at the table.
    """
    if from_currency == base_currency:
        return Converted(amount)
    if rate_table is None:
        return ConversionFailure(from_currency, base_currency, "rates not loaded")
    if not rate_table.usable:
        return ConversionFailure(from_currency, base_currency, rate_table.error or "rates unavailable")
    if rate_table.base_currency != base_currency:
        return ConversionFailure(from_currency, base_currency, f"rates are for {rate_table.base_currency}")
    rate = rate_table.rates.get(from_currency)
    if rate is None:
        return ConversionFailure(from_currency, base_currency, "no rate")
    return Converted(amount * rate)


def failure_error(failure: ConversionFailure) -> ConversionUnavailable:
    return ConversionUnavailable(failure.currency, failure.base_currency, failure.reason)


def required_currencies(
    expenses: Iterable[Expense],
    base_currency: str,
    supported: Optional[Sequence[str]] = None,
) -> List[str]:
    """
    Currencies that need a rate: everything used minus the base currency,
    optionally limited to `supported`. Sorted for stable requests.
    """
    codes = {e.currency for e in expenses if e.currency != base_currency}
    if supported is not None:
        codes &= set(supported)
    return sorted(codes)


def identity_table(base_currency: str) -> RateTable:
    """Table for a ledger that only uses the base currency"""
    return RateTable(base_currency, {base_currency: 1.0})


def build_rate_table(base_currency: str, raw: Dict[str, object], targets: Iterable[str]) -> RateTable:
    """Build a ready table from source output, keeping only sane requested rates"""
    rates = {base_currency: 1.0}
    for code in targets:
        value = safe_float(raw.get(code), None)
        if value is None or value <= 0:
            log.warning("Missing conversion rate for %s to %s", code, base_currency)
            continue
        rates[code] = value
    return RateTable(base_currency, rates)


# ---------- Rate sources ----------

class RateSource(Protocol):
    """Anything that can quote rates: base-currency units per 1 target unit"""

    def get_rates(self, base_currency: str, targets: List[str]) -> Dict[str, float]:
        ...


class StaticRateSource:
    """
    Rates from an in-memory table quoted against one reference currency,
    e.g. {"USD": 1.0, "EUR": 1.08} means 1 EUR = 1.08 USD.
    Cross rates are derived for any base in the table.
    """

    def __init__(self, rates: Dict[str, float], reference: str = "USD"):
        self.reference = normalize_currency(reference)
        self.rates = {normalize_currency(k): float(v) for k, v in rates.items()}
        self.rates.setdefault(self.reference, 1.0)

    def get_rates(self, base_currency: str, targets: List[str]) -> Dict[str, float]:
        base_value = self.rates.get(base_currency)
        if not base_value:
            raise RatesFetchFailed(f"no quote for base currency {base_currency}")
        return {t: self.rates[t] / base_value for t in targets if t in self.rates}


class JsonFileRateSource:
    """
    Rates read from a JSON file on every request:
    {"reference": "USD", "rates": {"EUR": 1.08, ...}}
    """

    def __init__(self, path: str):
        self.path = path

    def get_rates(self, base_currency: str, targets: List[str]) -> Dict[str, float]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            source = StaticRateSource(data.get("rates", {}), data.get("reference", "USD"))
        except (OSError, ValueError, TypeError, AttributeError) as ex:
            raise RatesFetchFailed(f"could not read rates from {self.path}: {ex}") from ex
        return source.get_rates(base_currency, targets)


# ---------- Rate store ----------

class RateStore:
    """
    Holds the current rate table. A refresh never mutates the table in place:
    the previous table stays visible while a fetch is in flight and is replaced
    as a whole when it finishes.
    """

    def __init__(self, table: Optional[RateTable] = None):
        self._table = table
        self._loading = False
        self._request = 0

    @property
    def table(self) -> Optional[RateTable]:
        return self._table

    @property
    def loading(self) -> bool:
        return self._loading

    def _begin(self) -> int:
        self._request += 1
        self._loading = True
        return self._request

    def _finish(self, request: int, table: RateTable) -> Optional[RateTable]:
        if request != self._request:
            log.debug("discarding rates for superseded request %d", request)
            return self._table
        self._table = table
        self._loading = False
        return table

    @staticmethod
    def _error_table(base_currency: str, ex: Exception) -> RateTable:
        log.error("Error fetching conversion rates for %s: %s", base_currency, ex)
        return RateTable(base_currency, {}, RateStatus.ERROR, str(ex) or "Could not fetch currency rates.")

    def refresh(self, source: RateSource, base_currency: str, targets: Sequence[str]) -> Optional[RateTable]:
        """Fetch rates for targets and swap in the new table"""
        request = self._begin()
        targets = [t for t in targets if t != base_currency]
        if not targets:
            return self._finish(request, identity_table(base_currency))
        try:
            raw = source.get_rates(base_currency, list(targets))
            table = build_rate_table(base_currency, raw or {}, targets)
        except Exception as ex:  # any source failure puts the table in error state
            table = self._error_table(base_currency, ex)
        return self._finish(request, table)

    async def refresh_async(
        self, source: RateSource, base_currency: str, targets: Sequence[str]
    ) -> Optional[RateTable]:
        """Like refresh, but the source runs in a worker thread; cancellable"""
        request = self._begin()
        targets = [t for t in targets if t != base_currency]
        if not targets:
            return self._finish(request, identity_table(base_currency))
        try:
            raw = await asyncio.to_thread(source.get_rates, base_currency, list(targets))
            table = build_rate_table(base_currency, raw or {}, targets)
        except asyncio.CancelledError:
            if request == self._request:
                self._loading = False
            raise
        except Exception as ex:  # any source failure puts the table in error state
            table = self._error_table(base_currency, ex)
        return self._finish(request, table)

    def refresh_for(self, ledger: Ledger, source: RateSource) -> Optional[RateTable]:
        """Refresh for the supported currencies the ledger currently uses"""
        targets = required_currencies(ledger.expenses, ledger.base_currency, SUPPORTED_CURRENCIES)
        return self.refresh(source, ledger.base_currency, targets)
