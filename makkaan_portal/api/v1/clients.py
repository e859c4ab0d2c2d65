"""Administrator client endpoints - contract CRUD with list-view progress"""

import logging
from datetime import date
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from makkaan_portal.api.dependencies import get_reference_today, get_request_id
from makkaan_portal.api.v1.presenters import client_summary
from makkaan_portal.api.v1.schemas import ClientCreateRequest, ClientSummary, ClientUpdateRequest, DeleteResponse
from makkaan_portal.config import settings
from makkaan_portal.domain.exceptions import ContractNotFoundError, DuplicateEmailError
from makkaan_portal.domain.models import ProgressSummary
from makkaan_portal.domain.progress import empty_progress, summarize_progress
from makkaan_portal.domain.terms import resolve_terms
from makkaan_portal.infrastructure.database.models import Contract
from makkaan_portal.infrastructure.database.repositories import (
    ClientRepository,
    LedgerRepository,
    to_domain_contract,
    to_domain_row,
)
from makkaan_portal.infrastructure.database.session import get_db
from makkaan_portal.infrastructure.observability.logging import log_contract_event
from makkaan_portal.infrastructure.observability.metrics import (
    contract_mutation_counter,
    progress_enrichment_failures_counter,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def validate_contract_id(contract_id: int) -> int:
    if contract_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid contract ID")
    return contract_id


def summarize_contract(contract: Contract, progress: ProgressSummary | None = None) -> ClientSummary:
    return client_summary(contract, resolve_terms(to_domain_contract(contract)), progress)


def enrich_progress(db: Session, contracts: List[Contract], request_id: str) -> Dict[int, ProgressSummary]:
    """
    Progress per contract from a single batched row query.

    Each contract is summarized on its own: one that fails is logged,
    counted, and shown at zero progress while the rest are unaffected.
    """
    rows_by_contract = LedgerRepository(db).get_rows_for_contracts(c.id for c in contracts)

    progress: Dict[int, ProgressSummary] = {}
    for contract in contracts:
        try:
            rows = [to_domain_row(r) for r in rows_by_contract.get(contract.id, [])]
            terms = resolve_terms(to_domain_contract(contract))
            progress[contract.id] = summarize_progress(rows, terms.months, terms.total_amount)
        except Exception as e:
            progress_enrichment_failures_counter.inc()
            logger.warning(
                f"Progress unavailable for contract {contract.id}: {e}",
                extra={"request_id": request_id, "contract_id": contract.id},
            )
            progress[contract.id] = empty_progress(contract.months)
    return progress


@router.get("/clients", response_model=List[ClientSummary])
def list_clients(request: Request, db: Session = Depends(get_db)):
    """
    List contracts, newest first, with client, unit, terms and progress.

    Progress counts fully paid installments against the contract's month count.
    """
    request_id = get_request_id(request)
    contracts = ClientRepository(db).list_contracts(limit=settings.client_list_limit)
    progress = enrich_progress(db, contracts, request_id)

    return [summarize_contract(c, progress.get(c.id)) for c in contracts]


@router.get("/clients/{contract_id}", response_model=ClientSummary)
def get_client(contract_id: int, db: Session = Depends(get_db)):
    """Single contract with client and unit details (edit form auto-fill)"""
    validate_contract_id(contract_id)

    contract = ClientRepository(db).get_contract(contract_id)
    if not contract:
        raise HTTPException(status_code=404, detail="Contract not found")

    return summarize_contract(contract)


@router.post("/clients", response_model=ClientSummary)
def create_client(
    request_body: ClientCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_reference_today),
):
    """
    Create client user, unit and contract in one transaction.

    Defaults: project from settings, 20% down-payment percentage, start date
    today in the reference timezone, status "Active".
    """
    request_id = get_request_id(request)

    try:
        contract = ClientRepository(db).create_client(
            full_name=request_body.full_name,
            email=request_body.email,
            phone=request_body.phone,
            cnic=request_body.cnic,
            address=request_body.address,
            project=request_body.project or settings.default_project,
            unit_number=request_body.unit_number,
            unit_type=request_body.unit_type,
            unit_size=request_body.unit_size,
            status=request_body.status,
            total_amount=request_body.total_amount,
            down_payment=request_body.down_payment,
            downpayment_pct=(
                request_body.downpayment_pct
                if request_body.downpayment_pct is not None
                else settings.default_downpayment_pct
            ),
            possession=request_body.possession,
            months=request_body.months,
            booking_date=request_body.booking_date,
            start_date=request_body.start_date or today,
        )
        db.commit()

    except DuplicateEmailError as e:
        db.rollback()
        logger.warning(f"Client not created: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail="Email already exists")

    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error creating client: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to create client")

    contract_mutation_counter.labels(action="created").inc()
    log_contract_event(request_id, "created", contract.id, client_id=contract.client_id)

    return summarize_contract(contract)


@router.put("/clients/{contract_id}", response_model=ClientSummary)
def update_client(
    contract_id: int,
    request_body: ClientUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Partial edit: only fields present in the body are changed"""
    validate_contract_id(contract_id)
    request_id = get_request_id(request)
    changes = request_body.model_dump(exclude_unset=True)

    try:
        contract = ClientRepository(db).update_contract(contract_id, changes)
        db.commit()

    except ContractNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Contract not found")

    except DuplicateEmailError as e:
        db.rollback()
        logger.warning(f"Client not updated: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail="Email already exists")

    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error updating contract {contract_id}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to update client")

    contract_mutation_counter.labels(action="updated").inc()
    log_contract_event(request_id, "updated", contract_id, fields=sorted(changes))

    return summarize_contract(contract)


@router.delete("/clients/{contract_id}", response_model=DeleteResponse)
def delete_client(contract_id: int, request: Request, db: Session = Depends(get_db)):
    """Delete ledger rows, contract, unit and client user together"""
    validate_contract_id(contract_id)
    request_id = get_request_id(request)

    try:
        ClientRepository(db).delete_contract(contract_id)
        db.commit()

    except ContractNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Contract not found")

    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error deleting contract {contract_id}: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to delete client")

    contract_mutation_counter.labels(action="deleted").inc()
    log_contract_event(request_id, "deleted", contract_id)

    return DeleteResponse(ok=True)
