"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

# Largest values the Numeric(14, 2) / Numeric(12, 2) columns hold
MAX_AMOUNT = Decimal("999999999999.99")
MAX_UNIT_SIZE = Decimal("9999999999.99")

BLANK_AS_NULL = (
    "cnic",
    "address",
    "unit_type",
    "unit_size",
    "down_payment",
    "downpayment_pct",
    "possession",
    "booking_date",
    "start_date",
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ClientCreateRequest(BaseModel):
    """Request body for POST /v1/clients"""

    full_name: str = Field(..., min_length=1, description="Client full name")
    email: str = Field(..., min_length=3, description="Login email, stored lower-cased")
    phone: str = Field(..., min_length=1)
    cnic: Optional[str] = None
    address: Optional[str] = None

    project: Optional[str] = None
    unit_number: str = Field(..., min_length=1)
    unit_type: Optional[str] = None
    unit_size: Optional[Decimal] = Field(None, ge=0, le=MAX_UNIT_SIZE)
    status: Optional[str] = None

    total_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, description="Total contract value")
    down_payment: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    downpayment_pct: Optional[Decimal] = Field(None, ge=0, le=100)
    possession: Optional[Decimal] = Field(None, ge=0, le=100, description="Possession percentage of total")
    months: int = Field(..., gt=0, description="Installment duration in months")
    booking_date: Optional[date] = None
    start_date: Optional[date] = None

    @field_validator(*BLANK_AS_NULL, mode="before")
    @classmethod
    def blank_as_null(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ClientUpdateRequest(BaseModel):
    """Request body for PUT /v1/clients/{contract_id}; omitted fields are left unchanged"""

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    cnic: Optional[str] = None
    address: Optional[str] = None

    project: Optional[str] = None
    unit_number: Optional[str] = None
    unit_type: Optional[str] = None
    unit_size: Optional[Decimal] = Field(None, ge=0, le=MAX_UNIT_SIZE)
    status: Optional[str] = None

    total_amount: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    down_payment: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    downpayment_pct: Optional[Decimal] = Field(None, ge=0, le=100)
    possession: Optional[Decimal] = Field(None, ge=0, le=100)
    months: Optional[int] = Field(None, gt=0)
    booking_date: Optional[date] = None
    start_date: Optional[date] = None

    @field_validator(*BLANK_AS_NULL, mode="before")
    @classmethod
    def blank_as_null(cls, value: Any) -> Any:
        return _blank_to_none(value)


class TermsSchema(BaseModel):
    """Payable schedule resolved from contract terms"""

    total_amount: float
    down_payment: float
    possession_amount: float
    monthly_pool: float
    total_payable: float
    per_period_amount: float
    months: int


class ProgressSchema(BaseModel):
    paid_installments: int
    total_installments: int
    paid_amount: float
    percent: int


class ClientSummary(BaseModel):
    """Contract with its client and unit, as shown in the administrator list"""

    contract_id: int
    client_id: int
    client_name: str
    email: str
    phone: str
    cnic: str
    address: str
    project: str
    unit_number: str
    unit_size: float
    unit_type: str
    status: str
    total_amount: float
    down_payment: float
    downpayment_pct: float
    possession: float
    months: int
    booking_date: Optional[str] = None
    start_date: Optional[str] = None
    terms: TermsSchema
    progress: Optional[ProgressSchema] = None


class DeleteResponse(BaseModel):
    ok: bool = True


class LedgerRowCreateRequest(BaseModel):
    """Request body for POST /v1/ledger/{contract_id}/rows"""

    sr_no: Optional[int] = Field(None, ge=1, description="Defaults to the next sequence number")
    description: Optional[str] = None
    installment_amount: Decimal = Field(Decimal(0), ge=0, le=MAX_AMOUNT)
    due_date: Optional[date] = None
    amount_paid: Decimal = Field(Decimal(0), ge=0, le=MAX_AMOUNT)
    payment_date: Optional[date] = None
    instrument_type: Optional[str] = None
    instrument_no: Optional[str] = None
    payment_proof: Optional[str] = None
    late_payment_surcharge: Decimal = Field(Decimal(0), ge=0, le=MAX_AMOUNT)

    @field_validator("due_date", "payment_date", mode="before")
    @classmethod
    def blank_as_null(cls, value: Any) -> Any:
        return _blank_to_none(value)


class LedgerRowUpdateRequest(BaseModel):
    """Request body for PATCH /v1/ledger/rows/{row_id}; omitted fields are left unchanged"""

    sr_no: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    installment_amount: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    due_date: Optional[date] = None
    amount_paid: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    payment_date: Optional[date] = None
    instrument_type: Optional[str] = None
    instrument_no: Optional[str] = None
    payment_proof: Optional[str] = None
    late_payment_surcharge: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)

    @field_validator("due_date", "payment_date", mode="before")
    @classmethod
    def blank_as_null(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ChildPaymentCreateRequest(BaseModel):
    """Request body for POST /v1/ledger/rows/{row_id}/children"""

    amount_paid: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    payment_date: Optional[date] = None
    description: Optional[str] = None
    instrument_type: Optional[str] = None
    instrument_no: Optional[str] = None
    payment_proof: Optional[str] = None

    @field_validator("payment_date", mode="before")
    @classmethod
    def blank_as_null(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ChildPaymentSchema(BaseModel):
    id: Optional[int] = None
    line_no: int
    description: str
    amount_paid: float
    payment_date: str
    instrument_type: str
    instrument_no: str
    payment_proof: str


class LedgerRowSchema(BaseModel):
    """Installment row with its reconciled figures"""

    id: Optional[int] = None
    sr_no: int
    description: str
    installment_amount: float
    due_date: str
    amount_paid: float
    payment_date: str
    instrument_type: str
    instrument_no: str
    payment_proof: str
    child_paid: float
    effective_paid: float
    balance: float
    effective_payment_date: str
    late_days: int
    late_payment_surcharge: float
    fully_paid: bool
    children: List[ChildPaymentSchema]


class LedgerTotalsSchema(BaseModel):
    total_paid: float
    total_receivable: float
    total_surcharge: float
    total_due: float


class LedgerResponse(BaseModel):
    """Response for GET /v1/ledger/{contract_id} and GET /v1/client/ledger"""

    contract: ClientSummary
    reference_date: str
    rows: List[LedgerRowSchema]
    totals: LedgerTotalsSchema
