"""Installment progress for the administrator client list"""

from decimal import Decimal
from typing import Any, Iterable

from makkaan_portal.domain.ledger import effective_paid, is_fully_paid
from makkaan_portal.domain.models import InstallmentRow, ProgressSummary
from makkaan_portal.utils.money import ZERO, round_half_up, to_amount, to_count


def _clamp_percent(value: Decimal) -> int:
    return int(min(Decimal(100), max(ZERO, round_half_up(value))))


def summarize_progress(
    rows: Iterable[InstallmentRow],
    total_installments: Any = None,
    total_amount: Any = None,
) -> ProgressSummary:
    """
    Count fully paid installments and express progress as a percentage.

    With a known expected installment count the percentage is by count;
    otherwise it falls back to paid amount over contract total. Both are
    clamped to [0, 100].
    """
    rows = list(rows)
    paid_count = sum(1 for row in rows if is_fully_paid(row))
    paid_amount = sum((effective_paid(row) for row in rows), ZERO)

    expected = to_count(total_installments)
    total = to_amount(total_amount)

    if expected > 0:
        percent = _clamp_percent(Decimal(paid_count) / expected * 100)
    elif total > ZERO:
        percent = _clamp_percent(max(ZERO, paid_amount) / total * 100)
    else:
        percent = 0

    return ProgressSummary(
        paid_installments=paid_count,
        total_installments=expected,
        paid_amount=paid_amount,
        percent=percent,
    )


def empty_progress(total_installments: Any = None) -> ProgressSummary:
    """Zero progress placeholder used when a contract cannot be summarized"""
    return ProgressSummary(
        paid_installments=0,
        total_installments=to_count(total_installments),
        paid_amount=ZERO,
        percent=0,
    )
