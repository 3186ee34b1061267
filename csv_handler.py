"""
CSV export and import functionality for TripSplit
"""
from __future__ import annotations
import csv
from typing import List

from models import Expense
from utils import normalize_currency

CSV_COLUMNS = ['id', 'description', 'amount', 'currency', 'paid_by_id', 'shared_by_ids']


def export_expenses_to_csv(expenses: List[Expense], filepath: str) -> None:
    """
    Export expenses list to CSV file
    CSV columns: id, description, amount, currency, paid_by_id, shared_by_ids
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for e in expenses:
            writer.writerow([
                e.id,
                e.description,
                e.amount,
                e.currency,
                e.paid_by_id,
                ';'.join(str(pid) for pid in e.shared_by_ids),
            ])


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses list from CSV file
    Returns list of Expense objects; references are not checked here.
    """
    expenses = []

    with open(filepath, 'r', encoding='utf-8', newline='') as f:
        reader = csv.DictReader(f)
        for row in reader:
            sharers = [int(s) for s in (row.get('shared_by_ids') or '').split(';') if s.strip()]
            expenses.append(Expense(
                id=int(row['id']),
                description=row.get('description', ''),
                amount=float(row['amount']),
                currency=normalize_currency(row['currency']),
                paid_by_id=int(row['paid_by_id']),
                shared_by_ids=sharers,
            ))

    return expenses
