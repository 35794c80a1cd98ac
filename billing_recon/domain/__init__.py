"""Domain package for reconciliation rules and core models."""

from .constants import DEFAULT_DISPLAY_CURRENCY
from .exceptions import (
    InvalidLinkError,
    MissingWorkspaceError,
    MutationRejected,
    ReconciliationError,
)
from .models import (
    BalanceResult,
    Billing,
    Cost,
    CurrencyValue,
    CurrencyValueGroup,
    ExchangeRate,
    ReconciliationView,
    ReconciliationViewEntry,
    Report,
    Status,
    ViewKind,
    Workspace,
)
from .services import (
    approximate,
    build_currency_value_group,
    build_view,
    classify_cost_link,
    classify_link,
    classify_links,
    compute_balance,
    group_by_currency,
    select_totals,
)

__all__ = [
    "DEFAULT_DISPLAY_CURRENCY",
    "InvalidLinkError",
    "MissingWorkspaceError",
    "MutationRejected",
    "ReconciliationError",
    "BalanceResult",
    "Billing",
    "Cost",
    "CurrencyValue",
    "CurrencyValueGroup",
    "ExchangeRate",
    "ReconciliationView",
    "ReconciliationViewEntry",
    "Report",
    "Status",
    "ViewKind",
    "Workspace",
    "approximate",
    "build_currency_value_group",
    "build_view",
    "classify_cost_link",
    "classify_link",
    "classify_links",
    "compute_balance",
    "group_by_currency",
    "select_totals",
]
