"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class Contract:
    """Client purchase terms for a single property unit"""

    total_amount: Decimal
    down_payment: Decimal
    downpayment_pct: Decimal
    possession_pct: Decimal
    months: int
    start_date: str  # ISO YYYY-MM-DD, "" when unknown
    booking_date: str = ""


@dataclass(frozen=True)
class ChildPayment:
    """Partial payment split against a parent installment row"""

    line_no: int
    amount_paid: Decimal
    payment_date: str = ""
    description: str = ""
    instrument_type: str = ""
    instrument_no: str = ""
    payment_proof: str = ""
    child_id: Optional[int] = None


@dataclass(frozen=True)
class InstallmentRow:
    """One scheduled due item with its direct payment and child payments"""

    sr_no: int
    installment_amount: Decimal
    due_date: str = ""
    description: str = ""
    amount_paid: Decimal = Decimal(0)
    payment_date: str = ""
    instrument_type: str = ""
    instrument_no: str = ""
    payment_proof: str = ""
    late_payment_surcharge: Decimal = Decimal(0)  # Locked upstream, read-only here
    children: List[ChildPayment] = field(default_factory=list)
    row_id: Optional[int] = None


@dataclass(frozen=True)
class ContractTerms:
    """Payable schedule derived from a contract"""

    total_amount: Decimal
    down_payment: Decimal
    possession_amount: Decimal
    monthly_pool: Decimal
    total_payable: Decimal
    per_period_amount: Decimal
    months: int


@dataclass(frozen=True)
class RowLedger:
    """Reconciled view of a single installment row"""

    row: InstallmentRow
    child_paid: Decimal
    effective_paid: Decimal
    balance: Decimal
    effective_payment_date: str
    late_days: int
    surcharge: Decimal
    fully_paid: bool


@dataclass(frozen=True)
class LedgerTotals:
    """Aggregate figures over all rows of a contract"""

    total_paid: Decimal
    total_receivable: Decimal
    total_surcharge: Decimal
    total_due: Decimal


@dataclass(frozen=True)
class LedgerView:
    """Output of ledger reconciliation"""

    terms: ContractTerms
    rows: List[RowLedger]
    totals: LedgerTotals


@dataclass(frozen=True)
class ProgressSummary:
    """Installment progress shown on the administrator client list"""

    paid_installments: int
    total_installments: int
    paid_amount: Decimal
    percent: int
