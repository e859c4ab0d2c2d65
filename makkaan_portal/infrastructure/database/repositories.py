"""Data access layer for clients, contracts and ledger rows"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from makkaan_portal.domain import models as domain
from makkaan_portal.domain.exceptions import (
    ChildPaymentNotFoundError,
    ContractNotFoundError,
    DuplicateEmailError,
    LedgerRowNotFoundError,
)
from makkaan_portal.domain.terms import build_contract
from makkaan_portal.infrastructure.database.models import (
    ROLE_CLIENT,
    ChildPayment,
    Contract,
    LedgerRow,
    Unit,
    User,
)
from makkaan_portal.utils.date_utils import parse_iso_date, to_iso_date
from makkaan_portal.utils.money import to_amount, to_count


def _clean_text(value: Any) -> Optional[str]:
    """Trim a free-text field; blank values are stored as NULL"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_email(email: str) -> str:
    return str(email).lower().strip()


# Canonical schema: ORM records are converted to domain objects here and nowhere else


def to_domain_contract(contract: Contract) -> domain.Contract:
    return build_contract(
        total_amount=contract.total_amount,
        down_payment=contract.down_payment,
        downpayment_pct=contract.downpayment_pct,
        possession_pct=contract.possession,
        months=contract.months,
        start_date=contract.start_date,
        booking_date=contract.booking_date,
    )


def to_domain_child(child: ChildPayment) -> domain.ChildPayment:
    return domain.ChildPayment(
        child_id=child.id,
        line_no=child.line_no or 0,
        amount_paid=to_amount(child.amount_paid),
        payment_date=to_iso_date(child.payment_date),
        description=child.description or "",
        instrument_type=child.instrument_type or "",
        instrument_no=child.instrument_no or "",
        payment_proof=child.payment_proof or "",
    )


def to_domain_row(row: LedgerRow) -> domain.InstallmentRow:
    return domain.InstallmentRow(
        row_id=row.id,
        sr_no=row.sr_no or 0,
        installment_amount=to_amount(row.installment_amount),
        due_date=to_iso_date(row.due_date),
        description=row.description or "",
        amount_paid=to_amount(row.amount_paid),
        payment_date=to_iso_date(row.payment_date),
        instrument_type=row.instrument_type or "",
        instrument_no=row.instrument_no or "",
        payment_proof=row.payment_proof or "",
        late_payment_surcharge=to_amount(row.late_payment_surcharge),
        children=[to_domain_child(c) for c in row.children],
    )


class ClientRepository:
    """Repository for client users, their units and contracts"""

    def __init__(self, db: Session):
        self.db = db

    def _contract_query(self):
        return self.db.query(Contract).options(joinedload(Contract.user), joinedload(Contract.unit))

    def _ensure_email_free(self, email: str, exclude_user_id: Optional[int] = None) -> None:
        query = self.db.query(User).filter(User.email == email)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        if query.first() is not None:
            raise DuplicateEmailError(f"Email already exists: {email}")

    def create_client(
        self,
        full_name: str,
        email: str,
        phone: str,
        unit_number: str,
        total_amount: Decimal,
        months: int,
        project: str,
        downpayment_pct: Decimal,
        start_date: date,
        cnic: Optional[str] = None,
        address: Optional[str] = None,
        unit_type: Optional[str] = None,
        unit_size: Any = None,
        status: Optional[str] = None,
        down_payment: Any = None,
        possession: Any = None,
        booking_date: Optional[date] = None,
    ) -> Contract:
        """
        Create user + unit + contract as one unit of work.

        Rows are flushed, not committed; the caller owns the transaction.

        Raises:
            DuplicateEmailError: Email is already registered
        """
        email = normalize_email(email)
        self._ensure_email_free(email)

        user = User(
            name=full_name.strip(),
            email=email,
            phone=str(phone).strip(),
            cnic=_clean_text(cnic),
            address=_clean_text(address),
            role=ROLE_CLIENT,
        )
        unit = Unit(
            project=project,
            unit_number=str(unit_number).strip(),
            unit_type=_clean_text(unit_type),
            unit_size=to_amount(unit_size),
        )
        self.db.add_all([user, unit])
        self.db.flush()

        contract = Contract(
            client_id=user.id,
            unit_id=unit.id,
            status=status or "Active",
            total_amount=to_amount(total_amount),
            down_payment=to_amount(down_payment),
            downpayment_pct=to_amount(downpayment_pct),
            possession=to_amount(possession),
            months=to_count(months),
            booking_date=booking_date,
            start_date=start_date,
        )
        self.db.add(contract)
        self.db.flush()
        return contract

    def get_contract(self, contract_id: int) -> Optional[Contract]:
        """Fetch contract with its user and unit"""
        return self._contract_query().filter(Contract.id == contract_id).first()

    def require_contract(self, contract_id: int) -> Contract:
        contract = self.get_contract(contract_id)
        if contract is None:
            raise ContractNotFoundError(f"Contract {contract_id} not found")
        return contract

    def list_contracts(self, limit: int = 500) -> List[Contract]:
        """Most recent contracts first"""
        return (
            self._contract_query()
            .order_by(Contract.created_at.desc(), Contract.id.desc())
            .limit(limit)
            .all()
        )

    def get_latest_contract_for_client(self, client_id: int) -> Optional[Contract]:
        return (
            self._contract_query()
            .filter(Contract.client_id == client_id)
            .order_by(Contract.created_at.desc(), Contract.id.desc())
            .first()
        )

    def update_contract(self, contract_id: int, changes: Dict[str, Any]) -> Contract:
        """
        Apply a partial edit; keys absent from `changes` keep their stored value.

        Blank phone/cnic/address clear the field, a null down payment or
        possession resets it to 0 (a zero down payment is then derived from
        the percentage), and null dates are ignored rather than clearing the
        stored date.
        """
        contract = self.require_contract(contract_id)
        user, unit = contract.user, contract.unit

        if changes.get("full_name") is not None:
            user.name = str(changes["full_name"]).strip()
        if changes.get("email"):
            email = normalize_email(changes["email"])
            self._ensure_email_free(email, exclude_user_id=user.id)
            user.email = email
        for key in ("phone", "cnic", "address"):
            if key in changes:
                setattr(user, key, _clean_text(changes[key]))

        for key in ("project", "unit_number", "unit_type"):
            if changes.get(key) is not None:
                setattr(unit, key, changes[key])
        if "unit_size" in changes:
            unit.unit_size = to_amount(changes["unit_size"])

        if changes.get("status") is not None:
            contract.status = changes["status"]
        for key in ("total_amount", "downpayment_pct"):
            if changes.get(key) is not None:
                setattr(contract, key, to_amount(changes[key]))
        if changes.get("months") is not None:
            contract.months = to_count(changes["months"])
        for key in ("down_payment", "possession"):
            if key in changes:
                setattr(contract, key, to_amount(changes[key]))
        for key in ("booking_date", "start_date"):
            parsed = parse_iso_date(changes.get(key))
            if parsed is not None:
                setattr(contract, key, parsed)

        self.db.flush()
        return contract

    def delete_contract(self, contract_id: int) -> None:
        """Remove contract with its rows, its unit and (for clients) its user"""
        contract = self.require_contract(contract_id)
        unit, user = contract.unit, contract.user

        self.db.delete(contract)  # Cascades to ledger rows and child payments
        self.db.flush()
        self.db.delete(unit)
        if user is not None and user.role == ROLE_CLIENT:
            self.db.delete(user)
        self.db.flush()


class LedgerRepository:
    """Repository for installment rows and their child payments"""

    ROW_FIELDS = (
        "sr_no",
        "description",
        "installment_amount",
        "due_date",
        "amount_paid",
        "payment_date",
        "instrument_type",
        "instrument_no",
        "payment_proof",
        "late_payment_surcharge",
    )
    AMOUNT_FIELDS = ("installment_amount", "amount_paid", "late_payment_surcharge")
    DATE_FIELDS = ("due_date", "payment_date")

    def __init__(self, db: Session):
        self.db = db

    def _row_query(self):
        return self.db.query(LedgerRow).options(selectinload(LedgerRow.children))

    def get_rows(self, contract_id: int) -> List[LedgerRow]:
        """Fetch a contract's rows in schedule order, children preloaded"""
        return (
            self._row_query()
            .filter(LedgerRow.contract_id == contract_id)
            .order_by(LedgerRow.sr_no, LedgerRow.id)
            .all()
        )

    def get_rows_for_contracts(self, contract_ids: Iterable[int]) -> Dict[int, List[LedgerRow]]:
        """Fetch rows for many contracts in one query, keyed by contract id"""
        ids = list(contract_ids)
        grouped: Dict[int, List[LedgerRow]] = defaultdict(list)
        if not ids:
            return grouped

        rows = (
            self._row_query()
            .filter(LedgerRow.contract_id.in_(ids))
            .order_by(LedgerRow.contract_id, LedgerRow.sr_no, LedgerRow.id)
            .all()
        )
        for row in rows:
            grouped[row.contract_id].append(row)
        return grouped

    def require_row(self, row_id: int) -> LedgerRow:
        row = self._row_query().filter(LedgerRow.id == row_id).first()
        if row is None:
            raise LedgerRowNotFoundError(f"Ledger row {row_id} not found")
        return row

    def _apply_row_fields(self, row: LedgerRow, values: Dict[str, Any]) -> None:
        for key in self.ROW_FIELDS:
            if key not in values:
                continue
            value = values[key]
            if key in self.AMOUNT_FIELDS:
                value = to_amount(value)
            elif key in self.DATE_FIELDS:
                value = parse_iso_date(value)
            elif key == "sr_no":
                value = to_count(value)
            else:
                value = _clean_text(value)
            setattr(row, key, value)

    def create_row(self, contract_id: int, values: Dict[str, Any]) -> LedgerRow:
        """Append a row; sequence number defaults to the next free one"""
        if values.get("sr_no") is None:
            current = (
                self.db.query(func.max(LedgerRow.sr_no))
                .filter(LedgerRow.contract_id == contract_id)
                .scalar()
            )
            values = {**values, "sr_no": (current or 0) + 1}

        row = LedgerRow(contract_id=contract_id)
        self._apply_row_fields(row, values)
        self.db.add(row)
        self.db.flush()
        return row

    def update_row(self, row_id: int, changes: Dict[str, Any]) -> LedgerRow:
        row = self.require_row(row_id)
        self._apply_row_fields(row, changes)
        self.db.flush()
        return row

    def delete_row(self, row_id: int) -> int:
        """Delete a row with its children; returns the owning contract id"""
        row = self.require_row(row_id)
        contract_id = row.contract_id
        self.db.delete(row)
        self.db.flush()
        return contract_id

    def add_child(self, row_id: int, values: Dict[str, Any]) -> ChildPayment:
        """Record a split payment; line numbers continue from the last child"""
        row = self.require_row(row_id)
        next_line = max((c.line_no for c in row.children), default=0) + 1

        child = ChildPayment(
            line_no=next_line,
            description=_clean_text(values.get("description")),
            amount_paid=to_amount(values.get("amount_paid")),
            payment_date=parse_iso_date(values.get("payment_date")),
            instrument_type=_clean_text(values.get("instrument_type")),
            instrument_no=_clean_text(values.get("instrument_no")),
            payment_proof=_clean_text(values.get("payment_proof")),
        )
        row.children.append(child)
        self.db.flush()
        return child

    def delete_child(self, child_id: int) -> int:
        """Delete a child payment; returns the owning contract id"""
        child = self.db.query(ChildPayment).filter(ChildPayment.id == child_id).first()
        if child is None:
            raise ChildPaymentNotFoundError(f"Child payment {child_id} not found")
        row = child.row
        contract_id = row.contract_id
        row.children.remove(child)  # delete-orphan removes the record on flush
        self.db.flush()
        return contract_id
