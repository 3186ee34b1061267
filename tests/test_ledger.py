import pytest

from errors import InvalidExpense
from ledger import (
    add_expense,
    add_participant,
    find_participant,
    remove_expense,
    remove_participant,
    set_base_currency,
)
from models import Ledger


def test_add_participant_assigns_unique_ids():
    ledger = Ledger()
    people = [add_participant(ledger, name) for name in ["A", "B", "", "A"]]

    assert len({p.id for p in people}) == 4
    assert [p.name for p in ledger.participants] == ["A", "B", "", "A"]
    assert find_participant(ledger, people[1].id) is people[1]


def test_add_participant_rejects_none():
    with pytest.raises(TypeError):
        add_participant(Ledger(), None)


@pytest.mark.parametrize("amount", [0, -5, float("nan"), float("inf"), "abc"])
def test_add_expense_rejects_bad_amount(trio, amount):
    ledger, a, b, c = trio
    with pytest.raises(InvalidExpense):
        add_expense(ledger, "x", amount, "USD", a.id, [b.id])


def test_add_expense_rejects_empty_sharers(trio):
    ledger, a, b, c = trio
    with pytest.raises(InvalidExpense):
        add_expense(ledger, "x", 10, "USD", a.id, [])


def test_add_expense_rejects_unknown_references(trio):
    ledger, a, b, c = trio
    with pytest.raises(InvalidExpense):
        add_expense(ledger, "x", 10, "USD", 1, [a.id])
    with pytest.raises(InvalidExpense):
        add_expense(ledger, "x", 10, "USD", a.id, [a.id, 1])
    assert len(ledger.expenses) == 1


def test_add_expense_normalizes_input(trio):
    ledger, a, b, c = trio
    e = add_expense(ledger, "Taxi", "12.5", "eur", b.id, [c.id, c.id, a.id])

    assert e.amount == 12.5
    assert e.currency == "EUR"
    assert e.shared_by_ids == [c.id, a.id]
    assert e.id not in {p.id for p in ledger.participants}


def test_payer_need_not_share(trio):
    ledger, a, b, c = trio
    e = add_expense(ledger, "Gift", 20, "USD", a.id, [b.id])
    assert e.shared_by_ids == [b.id]


def test_remove_expense(trio):
    ledger, a, b, c = trio
    e = ledger.expenses[0]
    remove_expense(ledger, 12345)
    assert ledger.expenses == [e]
    remove_expense(ledger, e.id)
    assert ledger.expenses == []


def test_remove_participant_strips_sharer(trio):
    ledger, a, b, c = trio
    remove_participant(ledger, b.id)

    assert [p.name for p in ledger.participants] == ["A", "C"]
    assert ledger.expenses[0].shared_by_ids == [a.id, c.id]


def test_remove_participant_deletes_paid_expenses(trio):
    ledger, a, b, c = trio
    remove_participant(ledger, a.id)
    assert ledger.expenses == []


def test_remove_sole_sharer_deletes_expense(trio):
    ledger, a, b, c = trio
    add_expense(ledger, "B's ticket", 40, "USD", a.id, [b.id])
    remove_participant(ledger, b.id)

    assert [e.description for e in ledger.expenses] == ["Dinner"]
    assert all(e.shared_by_ids for e in ledger.expenses)


def test_remove_unknown_participant_is_noop(trio):
    ledger, a, b, c = trio
    remove_participant(ledger, 42)
    assert len(ledger.participants) == 3
    assert len(ledger.expenses) == 1


def test_set_base_currency():
    ledger = Ledger()
    set_base_currency(ledger, " eur ")
    assert ledger.base_currency == "EUR"
