from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .db import Base


ACCOUNT_TYPES = ("ASSET", "LIABILITY", "EQUITY", "REVENUE", "EXPENSE")
PERSON_TYPES = ("SUPPLIER", "CUSTOMER", "EMPLOYEE")
ENDPOINT_TYPES = ("ACCOUNT",) + PERSON_TYPES


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String(20), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    type = Column(Enum(*ACCOUNT_TYPES, name="account_type"), nullable=False)
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    txn_date = Column(Date, nullable=False, default=date.today)
    description = Column(String(500), nullable=True)
    source_type = Column(String(50), nullable=False)
    source_id = Column(Integer, nullable=True, index=True)
    posted_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    lines = relationship("JournalLine", back_populates="journal_entry", cascade="all, delete-orphan")

    @property
    def total_debit(self) -> Decimal:
        return sum((Decimal(line.debit or 0) for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((Decimal(line.credit or 0) for line in self.lines), Decimal("0"))


class JournalLine(Base):
    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    account_name = Column(String(200), nullable=False)
    debit = Column(Numeric(18, 2), nullable=False, default=0)
    credit = Column(Numeric(18, 2), nullable=False, default=0)

    journal_entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account")


class BalanceAdjustment(Base):
    """Undo log of every non-account balance change made by a posting."""

    __tablename__ = "balance_adjustments"

    id = Column(Integer, primary_key=True)
    source_type = Column(String(50), nullable=False)
    source_id = Column(Integer, nullable=False, index=True)
    entity_type = Column(Enum("SUPPLIER", "CUSTOMER", "EMPLOYEE", "LOAN", name="adjustment_entity_type"), nullable=False)
    entity_id = Column(Integer, nullable=False)
    field = Column(String(50), nullable=False)
    delta = Column(Numeric(18, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=True)
    category = Column(String(100), nullable=True)
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=True)
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    active_subscription_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    subscriptions = relationship("Subscription", back_populates="customer", cascade="all, delete-orphan")


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True)
    full_name = Column(String(200), nullable=False)
    role = Column(String(100), nullable=False)
    department = Column(String(50), nullable=True)
    base_salary = Column(Numeric(18, 2), nullable=False, default=0)
    join_date = Column(Date, nullable=True)
    balance = Column(Numeric(18, 2), nullable=False, default=0)

    @property
    def is_courier(self) -> bool:
        return self.department == "COURIER" or self.role in {"پیک", "پیک موتوری"}


class PurchaseRequest(Base):
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True)
    requester = Column(String(200), nullable=True)
    amount = Column(Numeric(18, 2), nullable=False)
    category = Column(String(200), nullable=False)
    supplier_name = Column(String(200), nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(Enum("PENDING", "APPROVED", "REJECTED", name="purchase_status"), nullable=False, default="PENDING")
    txn_date = Column(Date, nullable=False, default=date.today)
    quantity = Column(Numeric(14, 3), nullable=True)
    unit = Column(String(50), nullable=True)
    payment_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    expense_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    is_credit = Column(Boolean, nullable=False, default=False)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=True)
    inventory_quantity = Column(Numeric(14, 3), nullable=True)
    inventory_unit_price = Column(Numeric(18, 2), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    supplier = relationship("Supplier")

    @property
    def is_inventory_purchase(self) -> bool:
        return self.inventory_item_id is not None


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    stream = Column(Enum("CAFE", "SUBSCRIPTION", "ASSESSMENT", name="revenue_stream"), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    txn_date = Column(Date, nullable=False, default=date.today)
    details = Column(String(500), nullable=True)
    duration = Column(String(50), nullable=True)
    gross_amount = Column(Numeric(18, 2), nullable=True)
    discount = Column(Numeric(18, 2), nullable=False, default=0)
    refund = Column(Numeric(18, 2), nullable=False, default=0)
    cash_amount = Column(Numeric(18, 2), nullable=False, default=0)
    pos_amount = Column(Numeric(18, 2), nullable=False, default=0)
    snappfood_amount = Column(Numeric(18, 2), nullable=False, default=0)
    tapsifood_amount = Column(Numeric(18, 2), nullable=False, default=0)
    foodex_amount = Column(Numeric(18, 2), nullable=False, default=0)
    employee_credit_amount = Column(Numeric(18, 2), nullable=False, default=0)
    credit_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
    payment_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    customer_name = Column(String(200), nullable=True)
    subscription_id = Column(Integer, nullable=True)
    subscription_status = Column(Enum("ACTIVE", "CANCELLED", "EXPIRED", name="sale_subscription_status"), nullable=True)
    is_credit = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    card_transfers = relationship("SaleCardTransfer", back_populates="sale", cascade="all, delete-orphan")


class SaleCardTransfer(Base):
    __tablename__ = "sale_card_transfers"

    id = Column(Integer, primary_key=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False)
    sender = Column(String(200), nullable=True)
    amount = Column(Numeric(18, 2), nullable=False)
    receiver_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)

    sale = relationship("Sale", back_populates="card_transfers")


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    plan_name = Column(String(200), nullable=False)
    delivery_days = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
    payment_status = Column(Enum("PAID", "CREDIT", name="subscription_payment_status"), nullable=False, default="PAID")
    status = Column(Enum("ACTIVE", "CANCELLED", "EXPIRED", name="subscription_status"), nullable=False, default="ACTIVE")
    renewed_from_id = Column(Integer, ForeignKey("subscriptions.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    customer = relationship("Customer", back_populates="subscriptions")


class PayrollPayment(Base):
    __tablename__ = "payroll_payments"

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    employee_name = Column(String(200), nullable=False)
    total_amount = Column(Numeric(18, 2), nullable=False)
    payment_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    txn_date = Column(Date, nullable=False, default=date.today)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    unit = Column(String(50), nullable=False)
    category = Column(String(100), nullable=True)
    current_stock = Column(Numeric(14, 3), nullable=False, default=0)
    min_stock = Column(Numeric(14, 3), nullable=True)
    last_cost = Column(Numeric(18, 2), nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def is_low_stock(self) -> bool:
        if self.min_stock is None:
            return False
        return Decimal(self.current_stock or 0) <= Decimal(self.min_stock)


class InventoryTransaction(Base):
    __tablename__ = "inventory_transactions"

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False)
    txn_type = Column(Enum("PURCHASE", "USAGE", "ADJUSTMENT", "RETURN", name="inventory_txn_type"), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    unit_cost = Column(Numeric(18, 2), nullable=True)
    reference_type = Column(String(50), nullable=True)
    reference_id = Column(Integer, nullable=True, index=True)
    description = Column(Text, nullable=True)
    txn_date = Column(Date, nullable=False, default=date.today)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    item = relationship("InventoryItem")


class Transfer(Base):
    __tablename__ = "transfers"

    id = Column(Integer, primary_key=True)
    from_type = Column(Enum(*ENDPOINT_TYPES, name="transfer_from_type"), nullable=False)
    from_id = Column(Integer, nullable=False)
    to_type = Column(Enum(*ENDPOINT_TYPES, name="transfer_to_type"), nullable=False)
    to_id = Column(Integer, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    txn_date = Column(Date, nullable=False, default=date.today)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class PayableCheck(Base):
    __tablename__ = "payable_checks"

    id = Column(Integer, primary_key=True)
    check_number = Column(String(50), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    payee = Column(String(200), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    bank_name = Column(String(100), nullable=True)
    issue_date = Column(Date, nullable=False, default=date.today)
    due_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Enum("PENDING", "PASSED", "BOUNCED", "CANCELLED", name="check_status"), nullable=False, default="PENDING")
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    passed_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Loan(Base):
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True)
    lender = Column(String(200), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    interest_rate = Column(Numeric(6, 3), nullable=False, default=0)
    start_date = Column(Date, nullable=False)
    installments_count = Column(Integer, nullable=True)
    remaining_balance = Column(Numeric(18, 2), nullable=False)
    status = Column(Enum("ACTIVE", "PAID_OFF", name="loan_status"), nullable=False, default="ACTIVE")
    deposit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    repayments = relationship("LoanRepayment", back_populates="loan", cascade="all, delete-orphan")


class LoanRepayment(Base):
    __tablename__ = "loan_repayments"

    id = Column(Integer, primary_key=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    principal_amount = Column(Numeric(18, 2), nullable=False)
    interest_amount = Column(Numeric(18, 2), nullable=False, default=0)
    txn_date = Column(Date, nullable=False, default=date.today)
    payment_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    loan = relationship("Loan", back_populates="repayments")
