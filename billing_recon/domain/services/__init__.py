"""Domain services package."""

from .balance import (
    compute_balance,
    derive_status,
    minor_unit_exponent,
    quantize_amount,
)
from .currency import (
    approximate,
    build_currency_value_group,
    build_rate_map,
    group_by_currency,
    required_pairs,
)
from .earnings import (
    compute_report_earnings,
    deferred_earnings_status,
    instant_earnings_status,
    report_adjacency,
)
from .link_classifier import classify_cost_link, classify_link, classify_links
from .normalization import normalize_currency, normalize_description
from .view_builder import build_view, compute_totals, embedded_links, select_totals

__all__ = [
    "compute_balance",
    "derive_status",
    "minor_unit_exponent",
    "quantize_amount",
    "approximate",
    "build_currency_value_group",
    "build_rate_map",
    "group_by_currency",
    "required_pairs",
    "compute_report_earnings",
    "deferred_earnings_status",
    "instant_earnings_status",
    "report_adjacency",
    "classify_cost_link",
    "classify_link",
    "classify_links",
    "normalize_currency",
    "normalize_description",
    "build_view",
    "compute_totals",
    "embedded_links",
    "select_totals",
]
