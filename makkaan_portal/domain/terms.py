"""Contract terms resolution - payable schedule derived from a contract"""

from decimal import Decimal
from typing import Any

from makkaan_portal.domain.models import Contract, ContractTerms
from makkaan_portal.utils.date_utils import to_iso_date
from makkaan_portal.utils.money import ZERO, round_half_up, to_amount, to_count

HUNDRED = Decimal(100)


def build_contract(
    total_amount: Any,
    down_payment: Any = None,
    downpayment_pct: Any = None,
    possession_pct: Any = None,
    months: Any = None,
    start_date: Any = None,
    booking_date: Any = None,
) -> Contract:
    """
    Normalize raw contract fields into a Contract.

    Every numeric field is coerced leniently (malformed -> 0). When the
    down-payment amount is absent or zero, it is derived from the
    down-payment percentage instead.
    """
    total = to_amount(total_amount)
    down = to_amount(down_payment)
    pct = to_amount(downpayment_pct)

    if down == ZERO and total > ZERO and pct > ZERO:
        down = round_half_up(total * pct / HUNDRED)

    return Contract(
        total_amount=total,
        down_payment=down,
        downpayment_pct=pct,
        possession_pct=to_amount(possession_pct),
        months=to_count(months),
        start_date=to_iso_date(start_date),
        booking_date=to_iso_date(booking_date),
    )


def resolve_terms(contract: Contract) -> ContractTerms:
    """
    Derive possession amount, monthly pool and total payable.

    Rules:
    - possession = round(total * possession% / 100)
    - monthly pool = max(0, total - down payment - possession), clamped so a
      down payment larger than the remaining value yields an empty schedule
    - total payable = round(possession + monthly pool)
    - per-period due = round(monthly pool / months), 0 without a duration

    Example:
        1,000,000 total, 200,000 down, 10% possession, 36 months
        -> possession 100,000, pool 700,000, per month 19,444
    """
    total = to_amount(contract.total_amount)
    down = to_amount(contract.down_payment)
    months = to_count(contract.months)

    possession_amount = round_half_up(total * to_amount(contract.possession_pct) / HUNDRED)
    monthly_pool = max(ZERO, total - down - possession_amount)
    total_payable = round_half_up(possession_amount + monthly_pool)
    per_period = round_half_up(monthly_pool / months) if months > 0 else ZERO

    return ContractTerms(
        total_amount=total,
        down_payment=down,
        possession_amount=possession_amount,
        monthly_pool=monthly_pool,
        total_payable=total_payable,
        per_period_amount=per_period,
        months=months,
    )
