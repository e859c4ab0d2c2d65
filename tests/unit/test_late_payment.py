"""Unit tests for late-day counting"""

from datetime import date, datetime, timezone
from decimal import Decimal
from makkaan_portal.domain.late_payment import late_days, locked_surcharge
from makkaan_portal.utils.date_utils import reference_today


def test_unpaid_row_counts_until_today():
    assert late_days("2024-01-01", "", today=date(2024, 2, 1)) == 31


def test_paid_row_counts_until_payment_date():
    assert late_days("2024-01-01", "2024-01-05", today=date(2024, 6, 1)) == 4


def test_early_payment_is_not_late():
    assert late_days("2024-01-10", "2024-01-02", today=date(2024, 6, 1)) == 0


def test_missing_or_invalid_due_date_is_not_late():
    assert late_days(None, "", today=date(2024, 6, 1)) == 0
    assert late_days("", "2024-01-02", today=date(2024, 6, 1)) == 0
    assert late_days("31/01/2024", "", today=date(2024, 6, 1)) == 0


def test_timestamp_strings_use_calendar_date():
    assert late_days("2024-01-01T00:00:00.000Z", "2024-01-03T23:59:59.000Z", today=date(2024, 6, 1)) == 2


def test_late_days_monotonic_as_today_advances():
    previous = -1
    for day in range(1, 29):
        current = late_days("2024-02-10", "", today=date(2024, 2, day))
        assert current >= previous
        previous = current


def test_reference_today_uses_fixed_offset():
    """21:00 UTC is already the next day at UTC+5"""
    now = datetime(2024, 1, 31, 21, 0, tzinfo=timezone.utc)
    assert reference_today(5.0, now=now) == date(2024, 2, 1)
    assert reference_today(0.0, now=now) == date(2024, 1, 31)


def test_locked_surcharge_is_read_verbatim():
    assert locked_surcharge(Decimal("750.50")) == Decimal("750.50")
    assert locked_surcharge(None) == 0
    assert locked_surcharge("garbage") == 0
