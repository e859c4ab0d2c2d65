"""Conversions from ORM records and domain results to response schemas"""

from datetime import date
from typing import Optional

from makkaan_portal.api.v1.schemas import (
    ChildPaymentSchema,
    ClientSummary,
    LedgerResponse,
    LedgerRowSchema,
    LedgerTotalsSchema,
    ProgressSchema,
    TermsSchema,
)
from makkaan_portal.config import settings
from makkaan_portal.domain.models import ChildPayment, ContractTerms, LedgerView, ProgressSummary, RowLedger
from makkaan_portal.infrastructure.database.models import Contract
from makkaan_portal.utils.date_utils import to_iso_date


def file_url(reference: str) -> str:
    """Absolute URL for a stored payment-proof reference"""
    if not reference:
        return ""
    if reference.startswith(("http://", "https://")):
        return reference
    origin = settings.public_file_origin.rstrip("/")
    return f"{origin}/{reference.lstrip('/')}"


def terms_schema(terms: ContractTerms) -> TermsSchema:
    return TermsSchema(
        total_amount=float(terms.total_amount),
        down_payment=float(terms.down_payment),
        possession_amount=float(terms.possession_amount),
        monthly_pool=float(terms.monthly_pool),
        total_payable=float(terms.total_payable),
        per_period_amount=float(terms.per_period_amount),
        months=terms.months,
    )


def progress_schema(progress: ProgressSummary) -> ProgressSchema:
    return ProgressSchema(
        paid_installments=progress.paid_installments,
        total_installments=progress.total_installments,
        paid_amount=float(progress.paid_amount),
        percent=progress.percent,
    )


def client_summary(
    contract: Contract,
    terms: ContractTerms,
    progress: Optional[ProgressSummary] = None,
) -> ClientSummary:
    """Flatten a contract with its user and unit; missing relations render as blanks"""
    user, unit = contract.user, contract.unit
    return ClientSummary(
        contract_id=contract.id,
        client_id=contract.client_id,
        client_name=(user.name if user else "") or "",
        email=(user.email if user else "") or "",
        phone=(user.phone if user else "") or "",
        cnic=(user.cnic if user else "") or "",
        address=(user.address if user else "") or "",
        project=(unit.project if unit else "") or "",
        unit_number=(unit.unit_number if unit else "") or "",
        unit_size=float(unit.unit_size or 0) if unit else 0.0,
        unit_type=(unit.unit_type if unit else "") or "",
        status=contract.status or "Active",
        total_amount=float(terms.total_amount),
        down_payment=float(terms.down_payment),
        downpayment_pct=float(contract.downpayment_pct or 0),
        possession=float(contract.possession or 0),
        months=terms.months,
        booking_date=to_iso_date(contract.booking_date) or None,
        start_date=to_iso_date(contract.start_date) or None,
        terms=terms_schema(terms),
        progress=progress_schema(progress) if progress else None,
    )


def child_schema(child: ChildPayment) -> ChildPaymentSchema:
    return ChildPaymentSchema(
        id=child.child_id,
        line_no=child.line_no,
        description=child.description,
        amount_paid=float(child.amount_paid),
        payment_date=child.payment_date,
        instrument_type=child.instrument_type,
        instrument_no=child.instrument_no,
        payment_proof=file_url(child.payment_proof),
    )


def row_schema(entry: RowLedger) -> LedgerRowSchema:
    row = entry.row
    return LedgerRowSchema(
        id=row.row_id,
        sr_no=row.sr_no,
        description=row.description,
        installment_amount=float(row.installment_amount),
        due_date=row.due_date,
        amount_paid=float(row.amount_paid),
        payment_date=row.payment_date,
        instrument_type=row.instrument_type,
        instrument_no=row.instrument_no,
        payment_proof=file_url(row.payment_proof),
        child_paid=float(entry.child_paid),
        effective_paid=float(entry.effective_paid),
        balance=float(entry.balance),
        effective_payment_date=entry.effective_payment_date,
        late_days=entry.late_days,
        late_payment_surcharge=float(entry.surcharge),
        fully_paid=entry.fully_paid,
        children=[child_schema(c) for c in row.children],
    )


def ledger_response(contract: Contract, view: LedgerView, reference_date: date) -> LedgerResponse:
    totals = view.totals
    return LedgerResponse(
        contract=client_summary(contract, view.terms),
        reference_date=reference_date.isoformat(),
        rows=[row_schema(entry) for entry in view.rows],
        totals=LedgerTotalsSchema(
            total_paid=float(totals.total_paid),
            total_receivable=float(totals.total_receivable),
            total_surcharge=float(totals.total_surcharge),
            total_due=float(totals.total_due),
        ),
    )
