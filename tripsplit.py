"""
TripSplit
- Track who paid what on a trip, in any currency, and who shared each expense.
- Print everyone's balance in one reporting currency and the payments that settle up.

Run:
  python tripsplit.py [ledger.json] [--rates rates.json] [--base EUR] [--policy detailed]
                      [--excel report.xlsx] [--csv expenses.csv]

Dependencies:
  pip install openpyxl
"""
from __future__ import annotations
import argparse
import logging
import os
import sys

from computations import compute_balances, describe_balance
from config import load_ledger, load_settings
from csv_handler import export_expenses_to_csv
from currency import JsonFileRateSource, RateStore, identity_table
from excel_export import export_excel
from ledger import set_base_currency
from settlement import SettlementPolicy, plan_settlement
from utils import format_money

log = logging.getLogger("tripsplit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Balances and settle-up plan for a shared trip ledger")
    parser.add_argument("ledger", nargs="?", help="ledger JSON (default: ledger.json in the data dir)")
    parser.add_argument("--rates", help="rates JSON: {\"reference\": \"USD\", \"rates\": {...}}")
    parser.add_argument("--base", help="reporting currency (default from settings)")
    parser.add_argument("--policy", choices=[p.value for p in SettlementPolicy], help="settlement policy")
    parser.add_argument("--excel", help="write an xlsx report here")
    parser.add_argument("--csv", help="write expenses as CSV here")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings()
    ledger = load_ledger(args.ledger or settings.ledger_path, settings)
    if args.base:
        set_base_currency(ledger, args.base)
    policy = SettlementPolicy(args.policy) if args.policy else settings.settlement_policy
    base = ledger.base_currency

    store = RateStore()
    rates_path = args.rates or settings.rates_path
    if os.path.exists(rates_path):
        store.refresh_for(ledger, JsonFileRateSource(rates_path))
    else:
        store = RateStore(identity_table(base))

    report = compute_balances(ledger, store.table)
    if not report.available:
        print(f"Balances unavailable: {report.reason}")
    else:
        print(f"Total balances (in {base})")
        for b in report.balances:
            print(f"  {b.participant.name}: {describe_balance(b.amount, base)}")
        for s in report.skipped:
            print(f"  skipped {s.expense.description!r}: {s.reason}")

        transactions = plan_settlement(report.balances, policy)
        print(f"How to settle up ({policy.value})")
        if not transactions:
            print("  Everyone is settled up!")
        for t in transactions:
            print(f"  {t.from_name} -> {t.to_name}: {format_money(t.amount, base)}")

    if args.excel:
        export_excel(ledger, store.table, args.excel, policy)
        log.info("Exported %s", args.excel)
    if args.csv:
        export_expenses_to_csv(ledger.expenses, args.csv)
        log.info("Exported %d expenses to %s", len(ledger.expenses), args.csv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
