"""Domain models package."""

from .entities import Billing, Cost, ReconciledEntity, Report, Workspace
from .links import (
    CLARIFY,
    RECONCILE,
    BillingReportLink,
    ClarifyBillingLink,
    ClarifyCostLink,
    ClarifyReportCostLink,
    ClarifyReportLink,
    CostReconcileLink,
    CostReportLink,
    Link,
    RawBillingReportLink,
    RawCostReportLink,
    RawLink,
    ReconcileLink,
)
from .money import CurrencyPair, CurrencyValue, CurrencyValueGroup, ExchangeRate
from .reconciliation import (
    Adjacency,
    BalanceResult,
    CounterpartSummary,
    EarningsStatus,
    ReconciliationView,
    ReconciliationViewEntry,
    ReportEarnings,
    Status,
    ViewKind,
    ViewTotals,
)

__all__ = [
    "Billing",
    "Cost",
    "ReconciledEntity",
    "Report",
    "Workspace",
    "CLARIFY",
    "RECONCILE",
    "BillingReportLink",
    "ClarifyBillingLink",
    "ClarifyCostLink",
    "ClarifyReportCostLink",
    "ClarifyReportLink",
    "CostReconcileLink",
    "CostReportLink",
    "Link",
    "RawBillingReportLink",
    "RawCostReportLink",
    "RawLink",
    "ReconcileLink",
    "CurrencyPair",
    "CurrencyValue",
    "CurrencyValueGroup",
    "ExchangeRate",
    "Adjacency",
    "BalanceResult",
    "EarningsStatus",
    "ReportEarnings",
    "ViewTotals",
    "CounterpartSummary",
    "ReconciliationView",
    "ReconciliationViewEntry",
    "Status",
    "ViewKind",
]
