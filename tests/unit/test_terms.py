"""Unit tests for contract terms resolution"""

from decimal import Decimal
from makkaan_portal.domain.models import Contract
from makkaan_portal.domain.terms import build_contract, resolve_terms


def test_resolve_terms_reference_contract(sample_contract):
    """1,000,000 total, 200,000 down, 10% possession over 36 months"""
    terms = resolve_terms(sample_contract)

    assert terms.possession_amount == 100_000
    assert terms.monthly_pool == 700_000
    assert terms.total_payable == 800_000
    assert terms.per_period_amount == 19_444  # 700,000 / 36 = 19,444.44
    assert terms.months == 36


def test_resolve_terms_pool_clamped_when_down_payment_exceeds_value():
    """Down payment larger than the remaining value yields an empty schedule"""
    contract = build_contract(total_amount=500_000, down_payment=480_000, possession_pct=10, months=12)
    terms = resolve_terms(contract)

    assert terms.possession_amount == 50_000
    assert terms.monthly_pool == 0
    assert terms.total_payable == 50_000
    assert terms.per_period_amount == 0


def test_resolve_terms_pool_bounded_by_total():
    """possession + pool never exceeds total while down payment + possession fit inside it"""
    for total, down, pct in [(1_000_000, 0, 0), (750_000, 150_000, 25), (999, 1, 33), (0, 0, 50)]:
        terms = resolve_terms(build_contract(total_amount=total, down_payment=down, possession_pct=pct, months=10))
        if down + terms.possession_amount <= total:
            assert terms.possession_amount + terms.monthly_pool <= total
        else:
            assert terms.monthly_pool == 0


def test_possession_rounds_half_up():
    terms = resolve_terms(build_contract(total_amount=25, possession_pct=10, months=1))
    assert terms.possession_amount == 3  # 2.5 rounds up


def test_malformed_numbers_coerced_to_zero():
    contract = build_contract(
        total_amount="not-a-number",
        down_payment=None,
        possession_pct="",
        months="abc",
    )
    terms = resolve_terms(contract)

    assert contract.total_amount == 0
    assert contract.months == 0
    assert terms.total_payable == 0
    assert terms.per_period_amount == 0


def test_down_payment_falls_back_to_percentage():
    """Absent or zero down payment is derived from the down-payment percentage"""
    contract = build_contract(total_amount=1_000_000, down_payment=0, downpayment_pct=20, months=24)

    assert contract.down_payment == 200_000
    assert resolve_terms(contract).monthly_pool == 800_000


def test_explicit_down_payment_wins_over_percentage():
    contract = build_contract(total_amount=1_000_000, down_payment=150_000, downpayment_pct=20, months=24)
    assert contract.down_payment == 150_000


def test_resolve_terms_from_stored_decimal_values():
    """Terms tolerate a contract built directly from raw stored values"""
    contract = Contract(
        total_amount=Decimal("1200000.00"),
        down_payment=Decimal("0"),
        downpayment_pct=Decimal("0"),
        possession_pct=Decimal("12.5"),
        months=24,
        start_date="2024-01-01",
    )
    terms = resolve_terms(contract)

    assert terms.possession_amount == 150_000
    assert terms.monthly_pool == 1_050_000
    assert terms.per_period_amount == 43_750


def test_resolve_terms_beyond_default_decimal_precision():
    """Amounts wider than 28 digits still resolve instead of raising"""
    terms = resolve_terms(build_contract(total_amount="1e30", possession_pct=10, months=12))

    assert terms.possession_amount == Decimal("1e29")
    assert terms.monthly_pool == Decimal("9e29")
    assert terms.total_payable == Decimal("1e30")
    assert terms.per_period_amount == Decimal("7.5e28")
