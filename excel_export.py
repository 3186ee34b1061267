"""
Excel export functionality for TripSplit
"""
from __future__ import annotations
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from computations import compute_balances, compute_summary, describe_balance
from currency import convert
from ledger import find_participant
from models import Ledger, RateTable
from settlement import SettlementPolicy, detailed_settlement, simplified_settlement


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_columns(ws, cols, first_row=2):
    for r in range(first_row, ws.max_row + 1):
        for c in cols:
            ws.cell(r, c).number_format = "0.00"


def _transfers_sheet(wb, title, transactions, base):
    ws = wb.create_sheet(title)
    ws.append(["From (Debtor)", "To (Creditor)", f"Amount ({base})"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for t in transactions:
        ws.append([t.from_name, t.to_name, t.amount])
    _money_columns(ws, [3])
    _autosize_columns(ws)


def export_excel(
    ledger: Ledger,
    rate_table: Optional[RateTable],
    filepath: str,
    policy: Optional[SettlementPolicy] = None,
) -> None:
    """
    Export ledger to Excel file with sheets:
    - Expenses (original and converted amounts)
    - Balances
    - Simplified and/or Detailed settlement
    If balances are unavailable the Balances sheet says why and no
    settlement sheets are written.
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)
    base = ledger.base_currency

    ws = wb.create_sheet("Expenses")
    ws.append(["Description", "Paid by", "Amount", "Currency", f"Amount ({base})", "Shared by"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for e in ledger.expenses:
        payer = find_participant(ledger, e.paid_by_id)
        sharers = [find_participant(ledger, pid) for pid in e.shared_by_ids]
        result = convert(e.amount, e.currency, base, rate_table)
        ws.append([
            e.description,
            payer.name if payer else "Unknown",
            e.amount,
            e.currency,
            result.amount if result.ok else "unconverted",
            ", ".join(p.name if p else "Unknown" for p in sharers),
        ])
    _money_columns(ws, [3, 5])
    _autosize_columns(ws)

    ws = wb.create_sheet("Balances")
    report = compute_balances(ledger, rate_table)
    if not report.available:
        ws.append(["Balances unavailable", str(report.reason)])
        ws.cell(1, 1).font = Font(bold=True)
        _autosize_columns(ws)
        wb.save(filepath)
        return

    summary = compute_summary(ledger, rate_table)
    ws.append(["Participant", f"Paid ({base})", f"Share ({base})", f"Net ({base})", "Status"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for b in report.balances:
        s = summary[b.participant.id]
        ws.append([b.participant.name, s["paid"], s["share"], b.amount, describe_balance(b.amount, base)])
    for skipped in report.skipped:
        ws.append([f"Skipped: {skipped.expense.description}", "", "", "", str(skipped.reason)])
    _money_columns(ws, [2, 3, 4])
    _autosize_columns(ws)

    if policy in (None, SettlementPolicy.SIMPLIFIED):
        _transfers_sheet(wb, "Simplified", simplified_settlement(report.balances), base)
    if policy in (None, SettlementPolicy.DETAILED):
        _transfers_sheet(wb, "Detailed", detailed_settlement(report.balances), base)

    wb.save(filepath)
