"""
Data models for TripSplit
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

EPSILON = 0.01  # amounts below this (in the base currency) count as settled
DEFAULT_BASE_CURRENCY = "USD"


@dataclass
class Participant:
    """Trip participant"""
    id: int
    name: str


@dataclass
class Expense:
    """Single shared expense"""
    id: int
    description: str
    amount: float  # in `currency`, always > 0
    currency: str
    paid_by_id: int
    shared_by_ids: List[int]  # split equally; payer may or may not be listed


@dataclass
class Ledger:
    """Participants and expenses of one trip"""
    participants: List[Participant] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    base_currency: str = DEFAULT_BASE_CURRENCY
    version: int = 1
    last_id: int = 0  # highest id handed out this session


class RateStatus(Enum):
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class RateTable:
    """
    Conversion rates against one base currency.
    rates[code] = base-currency units per 1 unit of `code`.
    Frozen: a refresh replaces the whole table.
    """
    base_currency: str
    rates: Dict[str, float] = field(default_factory=dict)
    status: RateStatus = RateStatus.READY
    error: Optional[str] = None

    @property
    def usable(self) -> bool:
        return self.status is not RateStatus.ERROR


@dataclass(frozen=True)
class Converted:
    """Successful conversion into the base currency"""
    amount: float
    ok = True


@dataclass(frozen=True)
class ConversionFailure:
    """Conversion that could not be performed"""
    currency: str
    base_currency: str
    reason: str
    ok = False


ConversionResult = Union[Converted, ConversionFailure]


@dataclass(frozen=True)
class Balance:
    """Net position of a participant; >0 is owed money, <0 owes money"""
    participant: Participant
    amount: float


@dataclass(frozen=True)
class SkippedExpense:
    """Expense left out of the balance totals and why"""
    expense: Expense
    reason: Exception


@dataclass
class BalanceReport:
    """Result of a balance computation"""
    available: bool
    balances: List[Balance] = field(default_factory=list)
    skipped: List[SkippedExpense] = field(default_factory=list)
    reason: Optional[Exception] = None  # set when not available


@dataclass(frozen=True)
class SettlementTransaction:
    """Payment that settles (part of) a debt"""
    from_name: str
    to_name: str
    amount: float
