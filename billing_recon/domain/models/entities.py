"""Domain models for reconciled entities and workspaces."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from .links import RawBillingReportLink, RawCostReportLink


class ReconciledEntity(Protocol):
    """Shape shared by reports, billings and costs."""

    id: int
    workspace_id: int
    net_value: Decimal
    currency: str


@dataclass(frozen=True)
class Workspace:
    """Tenant-like grouping every entity belongs to."""

    id: int
    name: str
    slug: str = ""


@dataclass(frozen=True)
class Report:
    """Contractor work performed.

    Attributes:
        billing_links: Raw billing links attached to the report.
        cost_links: Raw cost links attached to the report.
        previous_report_id: Latest earlier report of the same contractor in
            the same workspace, if any.
        previous_period_end: Last day covered by that previous report.
    """

    id: int
    workspace_id: int
    net_value: Decimal
    currency: str
    contractor_id: int | None = None
    client_id: int | None = None
    description: str = ""
    period_start: date | None = None
    period_end: date | None = None
    billing_links: tuple[RawBillingReportLink, ...] = ()
    cost_links: tuple[RawCostReportLink, ...] = ()
    previous_report_id: int | None = None
    previous_period_end: date | None = None


@dataclass(frozen=True)
class Billing:
    """Invoice issued to a client."""

    id: int
    workspace_id: int
    net_value: Decimal
    currency: str
    gross_value: Decimal | None = None
    client_id: int | None = None
    invoice_number: str = ""
    invoice_date: date | None = None
    description: str | None = None
    links: tuple[RawBillingReportLink, ...] = ()


@dataclass(frozen=True)
class Cost:
    """Money paid out to a contractor or a third party."""

    id: int
    workspace_id: int
    net_value: Decimal
    currency: str
    gross_value: Decimal | None = None
    contractor_id: int | None = None
    invoice_number: str | None = None
    counterparty: str | None = None
    invoice_date: date | None = None
    description: str | None = None
    links: tuple[RawCostReportLink, ...] = ()


__all__ = ["ReconciledEntity", "Workspace", "Report", "Billing", "Cost"]
