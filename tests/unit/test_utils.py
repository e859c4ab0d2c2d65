"""Unit tests for date and money helpers"""

from datetime import date, datetime
from decimal import Decimal
from makkaan_portal.utils.date_utils import days_between, parse_iso_date, to_iso_date
from makkaan_portal.utils.money import round_half_up, to_amount, to_count


def test_to_iso_date_variants():
    assert to_iso_date(date(2024, 1, 5)) == "2024-01-05"
    assert to_iso_date(datetime(2024, 1, 5, 23, 30)) == "2024-01-05"
    assert to_iso_date("2024-01-05T19:00:00.000Z") == "2024-01-05"
    assert to_iso_date("2024-13-40") == ""
    assert to_iso_date(None) == ""


def test_parse_iso_date():
    assert parse_iso_date("2024-02-29") == date(2024, 2, 29)
    assert parse_iso_date("") is None


def test_days_between_can_be_negative():
    assert days_between(date(2024, 1, 10), date(2024, 1, 1)) == -9


def test_to_amount_coercion():
    assert to_amount("19444.50") == Decimal("19444.50")
    assert to_amount(1500) == 1500
    assert to_amount(12.5) == Decimal("12.5")
    assert to_amount(None) == 0
    assert to_amount("") == 0
    assert to_amount("Rs. 100") == 0
    assert to_amount(float("nan")) == 0
    assert to_amount(True) == 0


def test_to_count_truncates():
    assert to_count("36") == 36
    assert to_count(12.9) == 12
    assert to_count("twelve") == 0


def test_round_half_up():
    assert round_half_up(Decimal("19444.5")) == 19445
    assert round_half_up(Decimal("19444.49")) == 19444


def test_round_half_up_wide_values():
    assert round_half_up(Decimal("1e30")) == Decimal("1e30")
    assert round_half_up(Decimal("12345678901234567890123456789.5")) == Decimal("12345678901234567890123456790")
