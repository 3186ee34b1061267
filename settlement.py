"""
Settlement planning for TripSplit.
Both policies are pure functions of a balance list ordered creditors first.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Iterable, List, Set, Tuple

from models import EPSILON, Balance, SettlementTransaction

TransactionKey = Tuple[str, str, str, int]


class SettlementPolicy(Enum):
    SIMPLIFIED = "simplified"
    DETAILED = "detailed"


def split_balances(balances: List[Balance], eps: float = EPSILON) -> Tuple[List[list], List[list]]:
    """
    Creditors and debtors as [name, amount] pairs, keeping the input order.
    Debtor amounts are what they owe (positive).
    """
    creditors = [[b.participant.name, b.amount] for b in balances if b.amount > eps]
    debtors = [[b.participant.name, -b.amount] for b in balances if b.amount < -eps]
    return creditors, debtors


def simplified_settlement(balances: List[Balance], eps: float = EPSILON) -> List[SettlementTransaction]:
    """
    Greedy settlement: largest debtor pays largest creditor until one side is
    cleared. At most len(creditors) + len(debtors) - 1 transactions.
    """
    creditors, debtors = split_balances(balances, eps)

    transactions = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]
        x = min(debtor[1], creditor[1])
        if x > eps:
            transactions.append(SettlementTransaction(debtor[0], creditor[0], x))
            debtor[1] -= x
            creditor[1] -= x
        # <= so that two remainders of exactly eps still advance
        if debtor[1] <= eps:
            i += 1
        if creditor[1] <= eps:
            j += 1

    return transactions


def detailed_settlement(balances: List[Balance], eps: float = EPSILON) -> List[SettlementTransaction]:
    """
    Proportional settlement: every debtor pays every creditor in proportion to
    the creditor's share of total credit.
    """
    creditors, debtors = split_balances(balances, eps)
    if not creditors or not debtors:
        return []
    total_credit = sum(amt for _, amt in creditors)
    if total_credit < eps:
        return []

    transactions = []
    for dname, owed in debtors:
        for cname, credit in creditors:
            payment = owed * (credit / total_credit)
            if payment > eps:
                transactions.append(SettlementTransaction(dname, cname, payment))
    return transactions


def plan_settlement(
    balances: List[Balance], policy: SettlementPolicy = SettlementPolicy.SIMPLIFIED
) -> List[SettlementTransaction]:
    """Settlement under the chosen policy"""
    policy = SettlementPolicy(policy)
    if policy is SettlementPolicy.DETAILED:
        return detailed_settlement(balances)
    return simplified_settlement(balances)


# ---------- Settled acknowledgments ----------

def transaction_keys(transactions: Iterable[SettlementTransaction]) -> List[TransactionKey]:
    """
    Stable keys (from, to, amount to the cent, occurrence) for a plan.
    Identical payments are told apart by occurrence, not list position, so
    unrelated edits don't move acknowledgments onto other payments.
    """
    seen: Dict[Tuple[str, str, str], int] = {}
    keys = []
    for t in transactions:
        base = (t.from_name, t.to_name, f"{t.amount:.2f}")
        n = seen.get(base, 0)
        seen[base] = n + 1
        keys.append(base + (n,))
    return keys


class SettledTracker:
    """Set of payments the group has marked as done"""

    def __init__(self, keys: Iterable[TransactionKey] = ()):
        self._keys: Set[TransactionKey] = set(keys)

    def __contains__(self, key: TransactionKey) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def is_settled(self, key: TransactionKey) -> bool:
        return key in self._keys

    def toggle(self, key: TransactionKey) -> bool:
        """Flip a payment's settled flag; returns the new state"""
        if key in self._keys:
            self._keys.remove(key)
            return False
        self._keys.add(key)
        return True

    def retain(self, keys: Iterable[TransactionKey]) -> None:
        """Forget acknowledgments for payments no longer in the plan"""
        self._keys &= set(keys)
