"""Ledger endpoints - reconciled views and administrator row maintenance"""

import logging
import time
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from makkaan_portal.api.dependencies import get_reference_today, get_request_id
from makkaan_portal.api.v1.clients import validate_contract_id
from makkaan_portal.api.v1.presenters import ledger_response
from makkaan_portal.api.v1.schemas import (
    ChildPaymentCreateRequest,
    LedgerResponse,
    LedgerRowCreateRequest,
    LedgerRowUpdateRequest,
)
from makkaan_portal.domain.exceptions import (
    ChildPaymentNotFoundError,
    ContractNotFoundError,
    DomainException,
    LedgerRowNotFoundError,
)
from makkaan_portal.domain.ledger import reconcile
from makkaan_portal.domain.terms import resolve_terms
from makkaan_portal.infrastructure.database.models import Contract
from makkaan_portal.infrastructure.database.repositories import (
    ClientRepository,
    LedgerRepository,
    to_domain_contract,
    to_domain_row,
)
from makkaan_portal.infrastructure.database.session import get_db
from makkaan_portal.infrastructure.observability.logging import log_ledger_view
from makkaan_portal.infrastructure.observability.metrics import ledger_row_mutation_counter, record_ledger_view

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND_DETAIL = {
    ContractNotFoundError: "Contract not found",
    LedgerRowNotFoundError: "Ledger row not found",
    ChildPaymentNotFoundError: "Child payment not found",
}


def build_ledger(
    db: Session,
    contract: Contract,
    today: date,
    request_id: str,
    audience: str,
) -> LedgerResponse:
    """Load rows fresh from the store and reconcile them against the contract terms"""
    start_time = time.time()

    terms = resolve_terms(to_domain_contract(contract))
    rows = [to_domain_row(r) for r in LedgerRepository(db).get_rows(contract.id)]
    view = reconcile(terms, rows, today=today)

    late_rows = sum(1 for entry in view.rows if entry.late_days > 0)
    record_ledger_view(audience, late_rows)
    log_ledger_view(
        request_id,
        contract.id,
        row_count=len(view.rows),
        late_rows=late_rows,
        total_due=str(view.totals.total_due),
        duration_ms=(time.time() - start_time) * 1000,
    )

    return ledger_response(contract, view, today)


def _mutation_failed(db: Session, e: Exception, request_id: str, action: str) -> HTTPException:
    """Roll back and translate a failed ledger mutation into an HTTP error"""
    db.rollback()
    if isinstance(e, DomainException):
        return HTTPException(status_code=404, detail=NOT_FOUND_DETAIL.get(type(e), str(e)))
    logger.error(f"Unexpected error during {action}: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Failed to update ledger")


def _refreshed_ledger(db: Session, contract_id: int, today: date, request_id: str) -> LedgerResponse:
    contract = ClientRepository(db).require_contract(contract_id)
    return build_ledger(db, contract, today, request_id, audience="admin")


@router.get("/ledger/{contract_id}", response_model=LedgerResponse)
def get_ledger(
    contract_id: int,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_reference_today),
):
    """
    Administrator ledger: contract terms, reconciled rows and totals.

    Surcharges are the locked values stored on each row; total due excludes them.
    """
    validate_contract_id(contract_id)

    contract = ClientRepository(db).get_contract(contract_id)
    if not contract:
        raise HTTPException(status_code=404, detail="Contract not found")

    return build_ledger(db, contract, today, get_request_id(request), audience="admin")


@router.get("/client/ledger", response_model=LedgerResponse)
def get_client_ledger(
    request: Request,
    client_id: int = Query(..., gt=0, description="Client user identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_reference_today),
):
    """Read-only ledger for a client's most recent contract"""
    contract = ClientRepository(db).get_latest_contract_for_client(client_id)
    if not contract:
        raise HTTPException(status_code=404, detail="No contract found for client")

    return build_ledger(db, contract, today, get_request_id(request), audience="client")


@router.post("/ledger/{contract_id}/rows", response_model=LedgerResponse)
def create_row(
    contract_id: int,
    request_body: LedgerRowCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_reference_today),
):
    """Append an installment row and return the refreshed ledger"""
    validate_contract_id(contract_id)
    request_id = get_request_id(request)

    try:
        ClientRepository(db).require_contract(contract_id)
        LedgerRepository(db).create_row(contract_id, request_body.model_dump())
        db.commit()
    except Exception as e:
        raise _mutation_failed(db, e, request_id, "row creation")

    ledger_row_mutation_counter.labels(action="row_created").inc()
    return _refreshed_ledger(db, contract_id, today, request_id)


@router.patch("/ledger/rows/{row_id}", response_model=LedgerResponse)
def update_row(
    row_id: int,
    request_body: LedgerRowUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_reference_today),
):
    """Edit row fields, record its direct payment, or store a locked surcharge"""
    request_id = get_request_id(request)

    try:
        row = LedgerRepository(db).update_row(row_id, request_body.model_dump(exclude_unset=True))
        contract_id = row.contract_id
        db.commit()
    except Exception as e:
        raise _mutation_failed(db, e, request_id, "row update")

    ledger_row_mutation_counter.labels(action="row_updated").inc()
    return _refreshed_ledger(db, contract_id, today, request_id)


@router.delete("/ledger/rows/{row_id}", response_model=LedgerResponse)
def delete_row(
    row_id: int,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_reference_today),
):
    """Delete a row together with its child payments"""
    request_id = get_request_id(request)

    try:
        contract_id = LedgerRepository(db).delete_row(row_id)
        db.commit()
    except Exception as e:
        raise _mutation_failed(db, e, request_id, "row deletion")

    ledger_row_mutation_counter.labels(action="row_deleted").inc()
    return _refreshed_ledger(db, contract_id, today, request_id)


@router.post("/ledger/rows/{row_id}/children", response_model=LedgerResponse)
def add_child_payment(
    row_id: int,
    request_body: ChildPaymentCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_reference_today),
):
    """Split a partial payment against a row"""
    request_id = get_request_id(request)

    try:
        child = LedgerRepository(db).add_child(row_id, request_body.model_dump())
        contract_id = child.row.contract_id
        db.commit()
    except Exception as e:
        raise _mutation_failed(db, e, request_id, "child payment")

    ledger_row_mutation_counter.labels(action="child_added").inc()
    return _refreshed_ledger(db, contract_id, today, request_id)


@router.delete("/ledger/children/{child_id}", response_model=LedgerResponse)
def delete_child_payment(
    child_id: int,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_reference_today),
):
    request_id = get_request_id(request)

    try:
        contract_id = LedgerRepository(db).delete_child(child_id)
        db.commit()
    except Exception as e:
        raise _mutation_failed(db, e, request_id, "child payment deletion")

    ledger_row_mutation_counter.labels(action="child_deleted").inc()
    return _refreshed_ledger(db, contract_id, today, request_id)
