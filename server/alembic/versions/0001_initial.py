"""initial cafe ledger schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


ACCOUNT_TYPES = ("ASSET", "LIABILITY", "EQUITY", "REVENUE", "EXPENSE")
ENDPOINT_TYPES = ("ACCOUNT", "SUPPLIER", "CUSTOMER", "EMPLOYEE")


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("type", sa.Enum(*ACCOUNT_TYPES, name="account_type"), nullable=False),
        sa.Column("balance", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("code", name="uq_accounts_code"),
    )
    op.create_index("ix_accounts_type", "accounts", ["type"], unique=False)

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("txn_date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("source_type", sa.String(length=50), nullable=False),
        sa.Column("source_id", sa.Integer(), nullable=True),
        sa.Column("posted_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_journal_entries_source_id", "journal_entries", ["source_id"], unique=False)

    op.create_table(
        "journal_lines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("journal_entry_id", sa.Integer(), sa.ForeignKey("journal_entries.id"), nullable=False),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("account_name", sa.String(length=200), nullable=False),
        sa.Column("debit", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("credit", sa.Numeric(18, 2), nullable=False, server_default="0"),
    )

    op.create_table(
        "balance_adjustments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("source_type", sa.String(length=50), nullable=False),
        sa.Column("source_id", sa.Integer(), nullable=False),
        sa.Column(
            "entity_type",
            sa.Enum("SUPPLIER", "CUSTOMER", "EMPLOYEE", "LOAN", name="adjustment_entity_type"),
            nullable=False,
        ),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("field", sa.String(length=50), nullable=False),
        sa.Column("delta", sa.Numeric(18, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_balance_adjustments_source_id", "balance_adjustments", ["source_id"], unique=False)

    op.create_table(
        "suppliers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("balance", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("balance", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("active_subscription_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("role", sa.String(length=100), nullable=False),
        sa.Column("department", sa.String(length=50), nullable=True),
        sa.Column("base_salary", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("join_date", sa.Date(), nullable=True),
        sa.Column("balance", sa.Numeric(18, 2), nullable=False, server_default="0"),
    )

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("current_stock", sa.Numeric(14, 3), nullable=False, server_default="0"),
        sa.Column("min_stock", sa.Numeric(14, 3), nullable=True),
        sa.Column("last_cost", sa.Numeric(18, 2), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "inventory_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("inventory_items.id"), nullable=False),
        sa.Column(
            "txn_type",
            sa.Enum("PURCHASE", "USAGE", "ADJUSTMENT", "RETURN", name="inventory_txn_type"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=False),
        sa.Column("unit_cost", sa.Numeric(18, 2), nullable=True),
        sa.Column("reference_type", sa.String(length=50), nullable=True),
        sa.Column("reference_id", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("txn_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_inventory_transactions_reference_id", "inventory_transactions", ["reference_id"], unique=False)

    op.create_table(
        "purchases",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("requester", sa.String(length=200), nullable=True),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("category", sa.String(length=200), nullable=False),
        sa.Column("supplier_name", sa.String(length=200), nullable=True),
        sa.Column("supplier_id", sa.Integer(), sa.ForeignKey("suppliers.id"), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "APPROVED", "REJECTED", name="purchase_status"),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("txn_date", sa.Date(), nullable=False),
        sa.Column("quantity", sa.Numeric(14, 3), nullable=True),
        sa.Column("unit", sa.String(length=50), nullable=True),
        sa.Column("payment_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("expense_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("is_credit", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("inventory_item_id", sa.Integer(), sa.ForeignKey("inventory_items.id"), nullable=True),
        sa.Column("inventory_quantity", sa.Numeric(14, 3), nullable=True),
        sa.Column("inventory_unit_price", sa.Numeric(18, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("stream", sa.Enum("CAFE", "SUBSCRIPTION", "ASSESSMENT", name="revenue_stream"), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("txn_date", sa.Date(), nullable=False),
        sa.Column("details", sa.String(length=500), nullable=True),
        sa.Column("duration", sa.String(length=50), nullable=True),
        sa.Column("gross_amount", sa.Numeric(18, 2), nullable=True),
        sa.Column("discount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("refund", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("cash_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("pos_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("snappfood_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("tapsifood_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("foodex_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("employee_credit_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("credit_employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("payment_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("customer_name", sa.String(length=200), nullable=True),
        sa.Column("subscription_id", sa.Integer(), nullable=True),
        sa.Column(
            "subscription_status",
            sa.Enum("ACTIVE", "CANCELLED", "EXPIRED", name="sale_subscription_status"),
            nullable=True,
        ),
        sa.Column("is_credit", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_sales_stream", "sales", ["stream"], unique=False)
    op.create_index("ix_sales_txn_date", "sales", ["txn_date"], unique=False)

    op.create_table(
        "sale_card_transfers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sale_id", sa.Integer(), sa.ForeignKey("sales.id"), nullable=False),
        sa.Column("sender", sa.String(length=200), nullable=True),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("receiver_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=True),
    )

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("plan_name", sa.String(length=200), nullable=False),
        sa.Column("delivery_days", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("price", sa.Numeric(18, 2), nullable=False),
        sa.Column(
            "payment_status",
            sa.Enum("PAID", "CREDIT", name="subscription_payment_status"),
            nullable=False,
            server_default="PAID",
        ),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "CANCELLED", "EXPIRED", name="subscription_status"),
            nullable=False,
            server_default="ACTIVE",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "payroll_payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("employee_name", sa.String(length=200), nullable=False),
        sa.Column("total_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("payment_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("txn_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "transfers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("from_type", sa.Enum(*ENDPOINT_TYPES, name="transfer_from_type"), nullable=False),
        sa.Column("from_id", sa.Integer(), nullable=False),
        sa.Column("to_type", sa.Enum(*ENDPOINT_TYPES, name="transfer_to_type"), nullable=False),
        sa.Column("to_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("txn_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "payable_checks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("check_number", sa.String(length=50), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("payee", sa.String(length=200), nullable=False),
        sa.Column("supplier_id", sa.Integer(), sa.ForeignKey("suppliers.id"), nullable=True),
        sa.Column("bank_name", sa.String(length=100), nullable=True),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("PENDING", "PASSED", "BOUNCED", "CANCELLED", name="check_status"),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("passed_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "loans",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("lender", sa.String(length=200), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("interest_rate", sa.Numeric(6, 3), nullable=False, server_default="0"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("installments_count", sa.Integer(), nullable=True),
        sa.Column("remaining_balance", sa.Numeric(18, 2), nullable=False),
        sa.Column("status", sa.Enum("ACTIVE", "PAID_OFF", name="loan_status"), nullable=False, server_default="ACTIVE"),
        sa.Column("deposit_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "loan_repayments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("loan_id", sa.Integer(), sa.ForeignKey("loans.id"), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("principal_amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("interest_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("txn_date", sa.Date(), nullable=False),
        sa.Column("payment_account_id", sa.Integer(), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("loan_repayments")
    op.drop_table("loans")
    op.drop_table("payable_checks")
    op.drop_table("transfers")
    op.drop_table("payroll_payments")
    op.drop_table("subscriptions")
    op.drop_table("sale_card_transfers")
    op.drop_index("ix_sales_txn_date", table_name="sales")
    op.drop_index("ix_sales_stream", table_name="sales")
    op.drop_table("sales")
    op.drop_table("purchases")
    op.drop_index("ix_inventory_transactions_reference_id", table_name="inventory_transactions")
    op.drop_table("inventory_transactions")
    op.drop_table("inventory_items")
    op.drop_table("employees")
    op.drop_table("customers")
    op.drop_table("suppliers")
    op.drop_index("ix_balance_adjustments_source_id", table_name="balance_adjustments")
    op.drop_table("balance_adjustments")
    op.drop_table("journal_lines")
    op.drop_index("ix_journal_entries_source_id", table_name="journal_entries")
    op.drop_table("journal_entries")
    op.drop_index("ix_accounts_type", table_name="accounts")
    op.drop_table("accounts")
