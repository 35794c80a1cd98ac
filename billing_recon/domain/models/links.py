"""Link records between reports and billings or costs.

Raw records mirror the storage rows, with nullable foreign keys and
amounts. Classified links are the tagged union produced by the link
classifier; nothing past that boundary sees the nullable shape.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Union

RECONCILE = "reconcile"
CLARIFY = "clarify"


@dataclass(frozen=True)
class RawBillingReportLink:
    """Unclassified ``link_billing_report`` row."""

    id: int
    created_at: datetime
    billing_id: int | None = None
    report_id: int | None = None
    billing_amount: Decimal | None = None
    report_amount: Decimal | None = None
    description: str | None = None


@dataclass(frozen=True)
class RawCostReportLink:
    """Unclassified ``link_cost_report`` row."""

    id: int
    created_at: datetime
    cost_id: int | None = None
    report_id: int | None = None
    cost_amount: Decimal | None = None
    report_amount: Decimal | None = None
    description: str | None = None


@dataclass(frozen=True)
class ReconcileLink:
    """Report amount covered by a billing amount."""

    id: int
    created_at: datetime
    billing_id: int
    report_id: int
    billing_amount: Decimal
    report_amount: Decimal
    description: str = ""
    link_type = RECONCILE


@dataclass(frozen=True)
class ClarifyBillingLink:
    """Billing amount that will never be matched by a report."""

    id: int
    created_at: datetime
    billing_id: int
    billing_amount: Decimal
    description: str
    link_type = CLARIFY


@dataclass(frozen=True)
class ClarifyReportLink:
    """Report amount that will never be billed."""

    id: int
    created_at: datetime
    report_id: int
    report_amount: Decimal
    description: str
    link_type = CLARIFY


@dataclass(frozen=True)
class CostReconcileLink:
    """Report amount paid out through a cost amount."""

    id: int
    created_at: datetime
    cost_id: int
    report_id: int
    cost_amount: Decimal
    report_amount: Decimal
    description: str = ""
    link_type = RECONCILE


@dataclass(frozen=True)
class ClarifyCostLink:
    """Cost amount that does not correspond to any report."""

    id: int
    created_at: datetime
    cost_id: int
    cost_amount: Decimal
    description: str
    link_type = CLARIFY


@dataclass(frozen=True)
class ClarifyReportCostLink:
    """Report amount that will never be paid out."""

    id: int
    created_at: datetime
    report_id: int
    report_amount: Decimal
    description: str
    link_type = CLARIFY


BillingReportLink = Union[ReconcileLink, ClarifyBillingLink, ClarifyReportLink]
CostReportLink = Union[CostReconcileLink, ClarifyCostLink, ClarifyReportCostLink]
Link = Union[BillingReportLink, CostReportLink]
RawLink = Union[RawBillingReportLink, RawCostReportLink]


__all__ = [
    "RECONCILE",
    "CLARIFY",
    "RawBillingReportLink",
    "RawCostReportLink",
    "ReconcileLink",
    "ClarifyBillingLink",
    "ClarifyReportLink",
    "CostReconcileLink",
    "ClarifyCostLink",
    "ClarifyReportCostLink",
    "BillingReportLink",
    "CostReportLink",
    "Link",
    "RawLink",
]
