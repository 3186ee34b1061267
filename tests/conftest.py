import pytest

from ledger import add_expense, add_participant
from models import Ledger


@pytest.fixture(autouse=True)
def data_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    monkeypatch.setenv("TRIPSPLIT_HOME", str(home))
    return home


@pytest.fixture
def trio():
    """A, B, C; A paid 90 USD for all three."""
    ledger = Ledger(base_currency="USD")
    a = add_participant(ledger, "A")
    b = add_participant(ledger, "B")
    c = add_participant(ledger, "C")
    add_expense(ledger, "Dinner", 90, "USD", a.id, [a.id, b.id, c.id])
    return ledger, a, b, c
