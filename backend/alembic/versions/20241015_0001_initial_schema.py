"""Initial OpsEase schema: parties, orders, invoices, ledger and operations."""

from __future__ import annotations

from alembic import context, op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "20241015_0001"
down_revision = None
branch_labels = None
depends_on = None


SQLITE_UUID_DEFAULT = sa.text(
    "lower(hex(randomblob(4)) || '-' || hex(randomblob(2)) || '-4' || "
    "substr(hex(randomblob(2)), 2) || '-' || substr('89ab', abs(random()) % 4 + 1, 1) || "
    "substr(hex(randomblob(2)), 2) || '-' || hex(randomblob(6)))"
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    if bind is not None:
        dialect_name = bind.dialect.name
    else:
        ctx = context.get_context()
        dialect_name = ctx.dialect.name if ctx is not None else ""

    uuid_type = sa.String(length=36)
    uuid_default = SQLITE_UUID_DEFAULT

    if dialect_name == "postgresql":
        uuid_type = postgresql.UUID(as_uuid=True)
        uuid_default = sa.text("gen_random_uuid()")
        op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    for table_name, code_column, extra in (
        (
            "customers",
            "customer_code",
            [sa.Column("credit_limit", sa.Numeric(12, 2), nullable=False, server_default="0")],
        ),
        ("suppliers", "supplier_code", [sa.Column("category", sa.String(length=100), nullable=True)]),
    ):
        id_column = f"{table_name[:-1]}_id"
        op.create_table(
            table_name,
            sa.Column(id_column, uuid_type, primary_key=True, server_default=uuid_default),
            sa.Column("user_id", sa.String(length=64), nullable=False),
            sa.Column(code_column, sa.String(length=50), nullable=False),
            sa.Column("company_name", sa.String(length=200), nullable=False),
            sa.Column("contact_person", sa.String(length=120), nullable=True),
            sa.Column("email", sa.String(length=200), nullable=True),
            sa.Column("phone", sa.String(length=40), nullable=True),
            sa.Column("gst_number", sa.String(length=20), nullable=True),
            sa.Column("address", sa.Text(), nullable=True),
            sa.Column("city", sa.String(length=100), nullable=True),
            sa.Column("state", sa.String(length=100), nullable=True),
            sa.Column("country", sa.String(length=100), nullable=False, server_default="India"),
            sa.Column("pincode", sa.String(length=12), nullable=True),
            sa.Column("payment_terms", sa.Integer(), nullable=False, server_default="30"),
            *extra,
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
            sa.UniqueConstraint("user_id", code_column, name=f"uq_{table_name}_user_code"),
        )
        op.create_index(f"ix_{table_name}_user_id", table_name, ["user_id"])

    op.create_table(
        "orders",
        sa.Column("order_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("order_code", sa.String(length=50), nullable=False),
        sa.Column("order_type", sa.String(length=14), nullable=False),
        sa.Column(
            "customer_id",
            uuid_type,
            sa.ForeignKey("customers.customer_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "supplier_id",
            uuid_type,
            sa.ForeignKey("suppliers.supplier_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("party_name", sa.String(length=200), nullable=False),
        sa.Column("party_email", sa.String(length=200), nullable=True),
        sa.Column("party_phone", sa.String(length=40), nullable=True),
        sa.Column("products", sa.JSON(), nullable=False),
        sa.Column("total_quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("delivery_date", sa.Date(), nullable=False),
        sa.Column("order_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=11), nullable=False, server_default="planning"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "order_code", name="uq_orders_user_code"),
    )
    op.create_index("orders_user_status_idx", "orders", ["user_id", "status"])

    op.create_table(
        "production_plans",
        sa.Column("production_plan_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column(
            "order_id",
            uuid_type,
            sa.ForeignKey("orders.order_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("stage", sa.String(length=13), nullable=False),
        sa.Column("target_quantity", sa.Integer(), nullable=False),
        sa.Column("completed_quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("assigned_team", sa.String(length=120), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=11), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("target_quantity > 0", name="ck_production_plans_target_positive"),
        sa.CheckConstraint(
            "completed_quantity >= 0 AND completed_quantity <= target_quantity",
            name="ck_production_plans_completed_range",
        ),
    )
    op.create_index(
        "production_plans_user_order_idx", "production_plans", ["user_id", "order_id"]
    )

    op.create_table(
        "invoices",
        sa.Column("invoice_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("invoice_number", sa.String(length=50), nullable=False),
        sa.Column("invoice_type", sa.String(length=16), nullable=False),
        sa.Column(
            "order_id",
            uuid_type,
            sa.ForeignKey("orders.order_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "customer_id",
            uuid_type,
            sa.ForeignKey("customers.customer_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "supplier_id",
            uuid_type,
            sa.ForeignKey("suppliers.supplier_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("buyer_name", sa.String(length=200), nullable=False),
        sa.Column("buyer_address", sa.Text(), nullable=True),
        sa.Column("buyer_gst", sa.String(length=20), nullable=True),
        sa.Column("buyer_phone", sa.String(length=40), nullable=True),
        sa.Column("buyer_email", sa.String(length=200), nullable=True),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("shipping_cost", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="INR"),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=7), nullable=False, server_default="draft"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "invoice_number", name="uq_invoices_user_number"),
    )
    op.create_index("invoices_user_status_idx", "invoices", ["user_id", "status"])

    op.create_table(
        "ledger_entries",
        sa.Column("ledger_entry_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("party_name", sa.String(length=200), nullable=False),
        sa.Column("party_type", sa.String(length=8), nullable=False),
        sa.Column("entry_type", sa.String(length=6), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("reference", sa.String(length=100), nullable=True),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("balance", sa.Numeric(14, 2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("amount > 0", name="ck_ledger_entries_amount_positive"),
    )
    op.create_index(
        "ledger_entries_user_party_date_idx",
        "ledger_entries",
        ["user_id", "party_name", "entry_date", "created_at"],
    )
    op.create_index(
        "ledger_entries_reference_idx", "ledger_entries", ["user_id", "reference"]
    )

    op.create_table(
        "expenses",
        sa.Column("expense_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("category", sa.String(length=14), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("paid_by", sa.String(length=120), nullable=True),
        sa.Column("paid_to", sa.String(length=200), nullable=True),
        sa.Column("payment_method", sa.String(length=13), nullable=False, server_default="cash"),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("receipt_url", sa.String(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )
    op.create_index("expenses_user_date_idx", "expenses", ["user_id", "expense_date"])
    op.create_index("expenses_user_category_idx", "expenses", ["user_id", "category"])

    op.create_table(
        "stock_items",
        sa.Column("stock_item_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("item_name", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=14), nullable=False),
        sa.Column("current_stock", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("reorder_level", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("unit_cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("supplier", sa.String(length=200), nullable=True),
        sa.Column("location", sa.String(length=120), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("current_stock >= 0", name="ck_stock_items_current_non_negative"),
        sa.CheckConstraint("reorder_level >= 0", name="ck_stock_items_reorder_non_negative"),
    )
    op.create_index("stock_items_user_name_idx", "stock_items", ["user_id", "item_name"])

    op.create_table(
        "stock_transactions",
        sa.Column(
            "stock_transaction_id", uuid_type, primary_key=True, server_default=uuid_default
        ),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column(
            "stock_item_id",
            uuid_type,
            sa.ForeignKey("stock_items.stock_item_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("transaction_type", sa.String(length=3), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("reference", sa.String(length=100), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("quantity > 0", name="ck_stock_transactions_quantity_positive"),
    )
    op.create_index(
        "stock_transactions_item_idx", "stock_transactions", ["stock_item_id", "created_at"]
    )

    op.create_table(
        "employees",
        sa.Column("employee_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("employee_code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("department", sa.String(length=15), nullable=False),
        sa.Column("position", sa.String(length=120), nullable=True),
        sa.Column("employee_type", sa.String(length=6), nullable=False),
        sa.Column("payment_type", sa.String(length=14), nullable=False),
        sa.Column("rate", sa.Numeric(8, 2), nullable=False),
        sa.Column("join_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "employee_code", name="uq_employees_user_code"),
        sa.CheckConstraint("rate >= 0", name="ck_employees_rate_non_negative"),
    )
    op.create_index("ix_employees_user_id", "employees", ["user_id"])

    op.create_table(
        "attendance",
        sa.Column("attendance_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column(
            "employee_id",
            uuid_type,
            sa.ForeignKey("employees.employee_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("attendance_date", sa.Date(), nullable=False),
        sa.Column("check_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_out", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=8), nullable=False),
        sa.Column("work_hours", sa.Numeric(4, 2), nullable=False, server_default="0"),
        sa.Column("overtime", sa.Numeric(4, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "employee_id", "attendance_date", name="uq_attendance_employee_date"
        ),
    )
    op.create_index("attendance_user_date_idx", "attendance", ["user_id", "attendance_date"])

    op.create_table(
        "worker_payments",
        sa.Column("worker_payment_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column(
            "employee_id",
            uuid_type,
            sa.ForeignKey("employees.employee_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("pay_period_start", sa.Date(), nullable=False),
        sa.Column("pay_period_end", sa.Date(), nullable=False),
        sa.Column("regular_hours", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("overtime_hours", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("pieces_completed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("gross_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("deductions", sa.Numeric(8, 2), nullable=False, server_default="0"),
        sa.Column("net_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(length=7), nullable=False, server_default="pending"),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("payment_method", sa.String(length=13), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "pay_period_start <= pay_period_end", name="ck_worker_payments_period"
        ),
        sa.CheckConstraint("net_amount >= 0", name="ck_worker_payments_net_non_negative"),
    )
    op.create_index(
        "worker_payments_user_status_idx", "worker_payments", ["user_id", "status"]
    )

    op.create_table(
        "operational_metric_events",
        sa.Column("event_id", uuid_type, primary_key=True, server_default=uuid_default),
        sa.Column("event_type", sa.String(length=120), nullable=False),
        sa.Column("outcome", sa.String(length=32), nullable=False),
        sa.Column("duration_ms", sa.Numeric(14, 3), nullable=True),
        sa.Column("labels", sa.JSON(), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_operational_metric_events_type_created",
        "operational_metric_events",
        ["event_type", "created_at"],
    )
    op.create_index(
        "ix_operational_metric_events_outcome", "operational_metric_events", ["outcome"]
    )
    op.create_index(
        "ix_operational_metric_events_created_at", "operational_metric_events", ["created_at"]
    )


def downgrade() -> None:
    for table_name in (
        "operational_metric_events",
        "worker_payments",
        "attendance",
        "employees",
        "stock_transactions",
        "stock_items",
        "expenses",
        "ledger_entries",
        "invoices",
        "production_plans",
        "orders",
        "suppliers",
        "customers",
    ):
        op.drop_table(table_name)
