"""SQLAlchemy ORM models for clients, units, contracts and the payment ledger"""

from sqlalchemy import Column, String, Integer, Numeric, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

ROLE_CLIENT = "CLIENT"


class User(Base):
    """Portal user; clients are created together with their contract"""

    __tablename__ = "portal_user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(Text, nullable=True)
    cnic = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    role = Column(String(32), nullable=False, default=ROLE_CLIENT)  # CLIENT | ACQUISITION
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    contracts = relationship("Contract", back_populates="user")


class Unit(Base):
    """Property unit sold under a contract"""

    __tablename__ = "unit"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project = Column(Text, nullable=False)
    unit_number = Column(Text, nullable=False)
    unit_type = Column(Text, nullable=True)
    unit_size = Column(Numeric(12, 2), nullable=False, default=0)

    contracts = relationship("Contract", back_populates="unit")


class Contract(Base):
    """Installment contract between a client and the developer"""

    __tablename__ = "contract"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("portal_user.id"), nullable=False, index=True)
    unit_id = Column(Integer, ForeignKey("unit.id"), nullable=False)
    status = Column(Text, nullable=False, default="Active")
    total_amount = Column(Numeric(14, 2), nullable=False)
    down_payment = Column(Numeric(14, 2), nullable=False, default=0)
    downpayment_pct = Column(Numeric(5, 2), nullable=False, default=20)
    possession = Column(Numeric(5, 2), nullable=False, default=0)  # percent of total
    months = Column(Integer, nullable=False)
    booking_date = Column(Date, nullable=True)
    start_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="contracts")
    unit = relationship("Unit", back_populates="contracts")
    rows = relationship(
        "LedgerRow",
        back_populates="contract",
        cascade="all, delete-orphan",
        order_by="LedgerRow.sr_no",
    )


class LedgerRow(Base):
    """Scheduled installment with its direct payment and locked surcharge"""

    __tablename__ = "ledger_row"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contract_id = Column(Integer, ForeignKey("contract.id", ondelete="CASCADE"), nullable=False, index=True)
    sr_no = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    installment_amount = Column(Numeric(14, 2), nullable=False, default=0)
    due_date = Column(Date, nullable=True)
    amount_paid = Column(Numeric(14, 2), nullable=False, default=0)
    payment_date = Column(Date, nullable=True)
    instrument_type = Column(Text, nullable=True)
    instrument_no = Column(Text, nullable=True)
    payment_proof = Column(Text, nullable=True)
    late_payment_surcharge = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    contract = relationship("Contract", back_populates="rows")
    children = relationship(
        "ChildPayment",
        back_populates="row",
        cascade="all, delete-orphan",
        order_by="ChildPayment.line_no",
    )


class ChildPayment(Base):
    """Partial payment split against a ledger row"""

    __tablename__ = "ledger_child_payment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    row_id = Column(Integer, ForeignKey("ledger_row.id", ondelete="CASCADE"), nullable=False, index=True)
    line_no = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    amount_paid = Column(Numeric(14, 2), nullable=False, default=0)
    payment_date = Column(Date, nullable=True)
    instrument_type = Column(Text, nullable=True)
    instrument_no = Column(Text, nullable=True)
    payment_proof = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    row = relationship("LedgerRow", back_populates="children")
