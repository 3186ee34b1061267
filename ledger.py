"""
Ledger mutations for TripSplit.
All edits to participants and expenses go through these functions so that
expenses never reference people that are gone.
"""
from __future__ import annotations
import logging
import math
import time
from typing import Iterable, List, Optional

from errors import InvalidExpense
from models import Expense, Ledger, Participant
from utils import normalize_currency

log = logging.getLogger(__name__)


def _fresh_id(ledger: Ledger) -> int:
    """Millisecond timestamp, bumped so ids never repeat within a session"""
    new_id = max(int(time.time() * 1000), ledger.last_id + 1)
    ledger.last_id = new_id
    return new_id


def find_participant(ledger: Ledger, participant_id: int) -> Optional[Participant]:
    """Look up a participant by id"""
    return next((p for p in ledger.participants if p.id == participant_id), None)


def add_participant(ledger: Ledger, name: str) -> Participant:
    """Add a participant; any string is accepted, name policy is the caller's"""
    if name is None:
        raise TypeError("participant name must be a string")
    p = Participant(id=_fresh_id(ledger), name=str(name))
    ledger.participants.append(p)
    log.debug("added participant %s (%d)", p.name, p.id)
    return p


def remove_participant(ledger: Ledger, participant_id: int) -> None:
    """
    Remove a participant and cascade into expenses:
    drop them from every sharer list, then delete expenses they paid for
    and expenses nobody shares any more.
    """
    if find_participant(ledger, participant_id) is None:
        return
    ledger.participants = [p for p in ledger.participants if p.id != participant_id]

    kept: List[Expense] = []
    for e in ledger.expenses:
        e.shared_by_ids = [pid for pid in e.shared_by_ids if pid != participant_id]
        if e.paid_by_id == participant_id or not e.shared_by_ids:
            log.info("removed expense %r with participant %d", e.description, participant_id)
            continue
        kept.append(e)
    ledger.expenses = kept


def add_expense(
    ledger: Ledger,
    description: str,
    amount: float,
    currency: str,
    payer_id: int,
    sharer_ids: Iterable[int],
) -> Expense:
    """Validate and append a new expense; raises InvalidExpense"""
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise InvalidExpense(f"amount must be a number, got {amount!r}")
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidExpense(f"amount must be positive, got {amount}")

    sharers: List[int] = []
    for pid in sharer_ids:
        if pid not in sharers:
            sharers.append(pid)
    if not sharers:
        raise InvalidExpense("an expense needs at least one sharer")

    known = {p.id for p in ledger.participants}
    if payer_id not in known:
        raise InvalidExpense(f"unknown payer {payer_id}")
    unknown = [pid for pid in sharers if pid not in known]
    if unknown:
        raise InvalidExpense(f"unknown sharers {unknown}")

    e = Expense(
        id=_fresh_id(ledger),
        description=str(description),
        amount=amount,
        currency=normalize_currency(currency),
        paid_by_id=payer_id,
        shared_by_ids=sharers,
    )
    ledger.expenses.append(e)
    return e


def remove_expense(ledger: Ledger, expense_id: int) -> None:
    """Delete an expense; unknown ids are ignored"""
    ledger.expenses = [e for e in ledger.expenses if e.id != expense_id]


def set_base_currency(ledger: Ledger, code: str) -> None:
    """Change the reporting currency; balances follow on the next computation"""
    ledger.base_currency = normalize_currency(code)
