import json

from config import save_ledger
from ledger import add_expense
from tripsplit import main


def test_report_in_base_currency(tmp_path, trio, capsys):
    ledger, a, b, c = trio
    path = str(tmp_path / "ledger.json")
    save_ledger(path, ledger)

    assert main([path]) == 0
    out = capsys.readouterr().out
    assert "A: Gets back $60.00" in out
    assert "B -> A: $30.00" in out
    assert "C -> A: $30.00" in out


def test_report_with_rates_and_exports(tmp_path, trio, capsys):
    ledger, a, b, c = trio
    add_expense(ledger, "Hotel", 100, "EUR", b.id, [a.id, b.id, c.id])
    path = str(tmp_path / "ledger.json")
    save_ledger(path, ledger)
    rates = tmp_path / "rates.json"
    rates.write_text(json.dumps({"reference": "USD", "rates": {"EUR": 1.2}}), encoding="utf-8")
    xlsx = tmp_path / "report.xlsx"
    csv_path = tmp_path / "expenses.csv"

    main([path, "--rates", str(rates), "--policy", "detailed", "--excel", str(xlsx), "--csv", str(csv_path)])
    out = capsys.readouterr().out

    assert "How to settle up (detailed)" in out
    assert "B: Gets back $50.00" in out
    assert xlsx.exists()
    assert csv_path.exists()


def test_report_when_rates_fail(tmp_path, trio, capsys):
    ledger, a, b, c = trio
    add_expense(ledger, "Hotel", 100, "EUR", b.id, [a.id, b.id, c.id])
    path = str(tmp_path / "ledger.json")
    save_ledger(path, ledger)
    rates = tmp_path / "rates.json"
    rates.write_text("garbage", encoding="utf-8")

    main([path, "--rates", str(rates)])
    assert "Balances unavailable" in capsys.readouterr().out


def test_settled_ledger(tmp_path, capsys):
    main([str(tmp_path / "missing.json")])
    assert "Everyone is settled up!" in capsys.readouterr().out
