"""Ledger reconciliation engine - paid, balance and late figures per row"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List

from makkaan_portal.domain.late_payment import late_days, locked_surcharge
from makkaan_portal.domain.models import ContractTerms, InstallmentRow, LedgerTotals, LedgerView, RowLedger
from makkaan_portal.utils.date_utils import reference_today, to_iso_date
from makkaan_portal.utils.money import ZERO, to_amount


def child_paid(row: InstallmentRow) -> Decimal:
    """Sum of all split payments recorded against a row"""
    return sum((to_amount(c.amount_paid) for c in row.children), ZERO)


def effective_paid(row: InstallmentRow) -> Decimal:
    """Direct payment plus every child payment"""
    return to_amount(row.amount_paid) + child_paid(row)


def is_fully_paid(row: InstallmentRow) -> bool:
    installment = to_amount(row.installment_amount)
    return installment > ZERO and effective_paid(row) >= installment


def effective_payment_date(row: InstallmentRow) -> str:
    """Latest ISO payment date among the parent and its children, "" if none"""
    dates = [to_iso_date(row.payment_date)]
    dates.extend(to_iso_date(c.payment_date) for c in row.children)
    recorded = [d for d in dates if d]
    return max(recorded) if recorded else ""  # ISO dates order lexicographically


def row_balance(row: InstallmentRow) -> Decimal:
    """
    Outstanding amount on a row.

    Untouched rows report 0, not the full installment: the ledger shows a
    balance figure only once some payment has been applied.
    """
    paid = effective_paid(row)
    if paid <= ZERO:
        return ZERO
    return max(ZERO, to_amount(row.installment_amount) - paid)


def reconcile_row(row: InstallmentRow, today: date) -> RowLedger:
    children_total = child_paid(row)
    paid = to_amount(row.amount_paid) + children_total
    paid_on = effective_payment_date(row)

    return RowLedger(
        row=row,
        child_paid=children_total,
        effective_paid=paid,
        balance=row_balance(row),
        effective_payment_date=paid_on,
        late_days=late_days(row.due_date, paid_on, today),
        surcharge=locked_surcharge(row.late_payment_surcharge),
        fully_paid=is_fully_paid(row),
    )


def reconcile(terms: ContractTerms, rows: Iterable[InstallmentRow], today: date | None = None) -> LedgerView:
    """
    Build the due/paid/balance/surcharge view for one contract.

    Totals:
    - total paid: sum of effective paid over all rows
    - receivable: max(0, total payable - total paid)
    - surcharge: sum of locked row surcharges
    - total due: equals receivable; surcharge is reported separately and
      deliberately left out of the due figure

    Pass `today` to pin the reference date; otherwise the current date at
    the reference offset is used for unpaid rows.
    """
    if today is None:
        today = reference_today()

    reconciled: List[RowLedger] = [reconcile_row(row, today) for row in rows]

    total_paid = sum((r.effective_paid for r in reconciled), ZERO)
    total_receivable = max(ZERO, terms.total_payable - total_paid)
    total_surcharge = sum((r.surcharge for r in reconciled), ZERO)

    return LedgerView(
        terms=terms,
        rows=reconciled,
        totals=LedgerTotals(
            total_paid=total_paid,
            total_receivable=total_receivable,
            total_surcharge=total_surcharge,
            total_due=total_receivable,
        ),
    )
