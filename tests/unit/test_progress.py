"""Unit tests for installment progress summaries"""

from decimal import Decimal
from makkaan_portal.domain.models import ChildPayment, InstallmentRow
from makkaan_portal.domain.progress import empty_progress, summarize_progress


def _row(sr_no, installment, paid=0, children=()):
    return InstallmentRow(
        sr_no=sr_no,
        installment_amount=Decimal(installment),
        amount_paid=Decimal(paid),
        children=[ChildPayment(line_no=i + 1, amount_paid=Decimal(a)) for i, a in enumerate(children)],
    )


def test_progress_by_installment_count(sample_rows):
    summary = summarize_progress(sample_rows, total_installments=36, total_amount=1_000_000)

    assert summary.paid_installments == 1
    assert summary.total_installments == 36
    assert summary.percent == 3  # 1/36 = 2.78%


def test_child_payments_complete_an_installment():
    rows = [_row(1, 1000, paid=400, children=[600])]
    assert summarize_progress(rows, total_installments=4).paid_installments == 1


def test_zero_amount_rows_never_count_as_paid():
    rows = [_row(1, 0), _row(2, 0, paid=100)]
    assert summarize_progress(rows, total_installments=2).paid_installments == 0


def test_progress_falls_back_to_amount():
    rows = [_row(1, 1000, paid=250_000)]
    summary = summarize_progress(rows, total_installments=0, total_amount=1_000_000)

    assert summary.paid_amount == 250_000
    assert summary.percent == 25


def test_progress_clamped_to_hundred():
    rows = [_row(i, 100, paid=100) for i in range(1, 6)]
    assert summarize_progress(rows, total_installments=3).percent == 100


def test_progress_zero_without_totals():
    assert summarize_progress([_row(1, 100, paid=100)]).percent == 0


def test_empty_progress_placeholder():
    summary = empty_progress(24)

    assert summary.paid_installments == 0
    assert summary.total_installments == 24
    assert summary.percent == 0
