"""
Balance computations for TripSplit
"""
from __future__ import annotations
import logging
import math
from typing import Container, Dict, List, Optional, Tuple

from currency import convert, failure_error, required_currencies
from errors import InvalidExpense, InvalidReference, RatesFetchFailed, TripSplitError
from models import EPSILON, Balance, BalanceReport, Expense, Ledger, RateTable, SkippedExpense
from utils import format_money

log = logging.getLogger(__name__)


def is_settled(amount: float, eps: float = EPSILON) -> bool:
    """True when an amount is zero within tolerance"""
    return abs(amount) < eps


def check_expense(e: Expense, known: Container[int]) -> Optional[TripSplitError]:
    """Reason a stored expense can't take part in balances, or None"""
    if not math.isfinite(e.amount) or e.amount <= 0:
        return InvalidExpense(f"expense {e.id} has invalid amount {e.amount}")
    if e.paid_by_id not in known:
        return InvalidReference(f"expense {e.id} paid by unknown participant {e.paid_by_id}")
    if not e.shared_by_ids:
        return InvalidReference(f"expense {e.id} has no sharers")
    missing = [pid for pid in e.shared_by_ids if pid not in known]
    if missing:
        return InvalidReference(f"expense {e.id} shared by unknown participants {missing}")
    return None


def fold_expenses(
    ledger: Ledger, rate_table: Optional[RateTable]
) -> Tuple[Dict[int, float], Dict[int, float], List[SkippedExpense]]:
    """
    Fold expenses in ledger order.
    Returns (paid, share, skipped): base-currency totals paid and consumed per
    participant id, and the expenses that were left out.
    """
    base = ledger.base_currency
    paid = {p.id: 0.0 for p in ledger.participants}
    share = {p.id: 0.0 for p in ledger.participants}
    skipped: List[SkippedExpense] = []

    for e in ledger.expenses:
        bad = check_expense(e, paid.keys())
        if bad is not None:
            log.warning("Skipping expense %r: %s", e.description, bad)
            skipped.append(SkippedExpense(e, bad))
            continue
        result = convert(e.amount, e.currency, base, rate_table)
        if not result.ok:
            err = failure_error(result)
            log.warning("Skipping expense %r: %s", e.description, err)
            skipped.append(SkippedExpense(e, err))
            continue

        amount = result.amount
        paid[e.paid_by_id] += amount
        each = amount / len(e.shared_by_ids)
        for pid in e.shared_by_ids:
            share[pid] += each

    return paid, share, skipped


def _rates_problem(ledger: Ledger, rate_table: Optional[RateTable]) -> Optional[RatesFetchFailed]:
    if not required_currencies(ledger.expenses, ledger.base_currency):
        return None
    if rate_table is None:
        return RatesFetchFailed("conversion rates have not been loaded")
    if not rate_table.usable:
        return RatesFetchFailed(rate_table.error or "Could not fetch currency rates.")
    return None


def compute_balances(ledger: Ledger, rate_table: Optional[RateTable]) -> BalanceReport:
    """
    Net balance per participant in the base currency, creditors first.
    Unavailable as a whole when the rate table is unusable and some expense
    needs converting; otherwise unconvertible expenses are skipped.
    """
    problem = _rates_problem(ledger, rate_table)
    if problem is not None:
        return BalanceReport(available=False, reason=problem)

    paid, share, skipped = fold_expenses(ledger, rate_table)
    balances = [Balance(p, paid[p.id] - share[p.id]) for p in ledger.participants]
    # sorted() is stable, so ties keep ledger order
    balances = sorted(balances, key=lambda b: b.amount, reverse=True)
    return BalanceReport(available=True, balances=balances, skipped=skipped)


def compute_summary(ledger: Ledger, rate_table: Optional[RateTable]) -> Dict[int, dict]:
    """
    Compute summary statistics for each participant.
    Returns dict mapping participant id -> {name, paid, share, net}
    Empty when balances are unavailable.
    """
    if _rates_problem(ledger, rate_table) is not None:
        return {}
    paid, share, _ = fold_expenses(ledger, rate_table)
    return {
        p.id: {
            "name": p.name,
            "paid": paid[p.id],
            "share": share[p.id],
            "net": paid[p.id] - share[p.id],  # positive -> gets back; negative -> owes
        } for p in ledger.participants
    }


def describe_balance(amount: float, currency: str) -> str:
    """Human wording for a balance"""
    if is_settled(amount):
        return "Is settled"
    if amount > 0:
        return f"Gets back {format_money(amount, currency)}"
    return f"Owes {format_money(-amount, currency)}"
