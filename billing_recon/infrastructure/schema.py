"""SQLAlchemy Core schema of the reconciliation database."""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.engine import Engine

AMOUNT = Numeric(18, 4)

metadata = MetaData()

workspaces = Table(
    "workspaces",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("slug", String(255), nullable=False, default=""),
)

reports = Table(
    "reports",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("workspace_id", ForeignKey("workspaces.id"), nullable=False),
    Column("contractor_id", Integer),
    Column("client_id", Integer),
    Column("net_value", AMOUNT, nullable=False),
    Column("currency", String(3), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("period_start", Date),
    Column("period_end", Date),
)

billings = Table(
    "billings",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("workspace_id", ForeignKey("workspaces.id"), nullable=False),
    Column("client_id", Integer),
    Column("net_value", AMOUNT, nullable=False),
    Column("gross_value", AMOUNT),
    Column("currency", String(3), nullable=False),
    Column("invoice_number", String(64), nullable=False, default=""),
    Column("invoice_date", Date),
    Column("description", Text),
)

costs = Table(
    "costs",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("workspace_id", ForeignKey("workspaces.id"), nullable=False),
    Column("contractor_id", Integer),
    Column("net_value", AMOUNT, nullable=False),
    Column("gross_value", AMOUNT),
    Column("currency", String(3), nullable=False),
    Column("invoice_number", String(64)),
    Column("counterparty", String(255)),
    Column("invoice_date", Date),
    Column("description", Text),
)

link_billing_report = Table(
    "link_billing_report",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("billing_id", ForeignKey("billings.id", ondelete="CASCADE")),
    Column("report_id", ForeignKey("reports.id", ondelete="CASCADE")),
    Column("billing_amount", AMOUNT),
    Column("report_amount", AMOUNT),
    Column("description", Text),
)

link_cost_report = Table(
    "link_cost_report",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("cost_id", ForeignKey("costs.id", ondelete="CASCADE")),
    Column("report_id", ForeignKey("reports.id", ondelete="CASCADE")),
    Column("cost_amount", AMOUNT),
    Column("report_amount", AMOUNT),
    Column("description", Text),
)


def create_schema(engine: Engine) -> None:
    """Create every missing table on the given engine."""
    metadata.create_all(engine)


__all__ = [
    "metadata",
    "workspaces",
    "reports",
    "billings",
    "costs",
    "link_billing_report",
    "link_cost_report",
    "create_schema",
]
