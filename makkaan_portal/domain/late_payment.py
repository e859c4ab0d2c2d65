"""Late-payment policy: day counting against a fixed reference date"""

from datetime import date
from decimal import Decimal
from typing import Any

from makkaan_portal.utils.date_utils import days_between, parse_iso_date
from makkaan_portal.utils.money import to_amount


def late_days(due_date: Any, payment_date: Any, today: date) -> int:
    """
    Whole days a payment arrived (or is still outstanding) after its due date.

    The end of the interval is the payment date when one is recorded, else
    `today`. Early payments count as 0; a missing due date counts as 0.
    """
    due = parse_iso_date(due_date)
    if due is None:
        return 0

    end = parse_iso_date(payment_date) if payment_date else today
    if end is None:
        return 0

    return max(0, days_between(due, end))


def locked_surcharge(value: Any) -> Decimal:
    """Surcharge exactly as stored; the amount is fixed by the billing process"""
    return to_amount(value)
