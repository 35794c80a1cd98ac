"""Contractor earnings position of reports.

Billing links tell how much of a report was billed to the client, cost links
how much the contractor was already paid for it. Together they say what is
due to the contractor right now and what is still owed in the long run.
"""

from datetime import date, timedelta
from decimal import Decimal

from billing_recon.domain.models import (
    Adjacency,
    BalanceResult,
    EarningsStatus,
    ReportEarnings,
)


def compute_report_earnings(
    net_value: Decimal,
    billing: BalanceResult,
    compensation: BalanceResult,
    has_cost_clarification: bool = False,
) -> ReportEarnings:
    """Derive the billing/cost position of a report.

    Args:
        net_value: Reported net value, already rounded.
        billing: Balance of the report against its billing links.
        compensation: Balance of the report against its cost links.
        has_cost_clarification: Whether a cost link explains part of the
            report without referencing a cost.

    Returns:
        ReportEarnings: Balances and both earnings statuses.
    """
    billed = billing.matched_amount
    report_cost_balance = compensation.remaining_amount
    billing_cost_balance = billed - compensation.matched_amount
    # Never pay out more than the reported value, even when overbilled.
    immediate_payment_due = min(billing_cost_balance, report_cost_balance)
    return ReportEarnings(
        billing_cost_balance=billing_cost_balance,
        immediate_payment_due=immediate_payment_due,
        instant=instant_earnings_status(
            net_value, billed, immediate_payment_due, has_cost_clarification
        ),
        deferred=deferred_earnings_status(net_value, billed, report_cost_balance),
    )


def instant_earnings_status(
    net_value: Decimal,
    billed: Decimal,
    immediate_payment_due: Decimal,
    has_cost_clarification: bool = False,
) -> EarningsStatus:
    """Status of contractor payment against what has been billed so far.

    Args:
        net_value: Reported net value.
        billed: Report amount covered by billing links.
        immediate_payment_due: Amount payable to the contractor right now.
        has_cost_clarification: Whether a cost clarification is attached.

    Returns:
        EarningsStatus: Instant earnings status.
    """
    if billed == immediate_payment_due:
        if net_value == 0:
            return EarningsStatus.COMPENSATED
        return EarningsStatus.UNCOMPENSATED
    if immediate_payment_due > 0:
        return EarningsStatus.PARTIALLY_COMPENSATED
    if has_cost_clarification:
        return EarningsStatus.CLARIFIED
    return EarningsStatus.COMPENSATED


def deferred_earnings_status(
    net_value: Decimal,
    billed: Decimal,
    report_cost_balance: Decimal,
) -> EarningsStatus:
    """Status of contractor payment against the whole reported value.

    Args:
        net_value: Reported net value.
        billed: Report amount covered by billing links.
        report_cost_balance: Reported value not covered by cost links.

    Returns:
        EarningsStatus: Deferred earnings status.
    """
    if report_cost_balance <= 0:
        return EarningsStatus.COMPENSATED
    if report_cost_balance >= net_value - billed:
        return EarningsStatus.UNCOMPENSATED
    return EarningsStatus.PARTIALLY_COMPENSATED


def report_adjacency(
    previous_period_end: date | None,
    period_start: date | None,
) -> Adjacency | None:
    """Compare a report period with the previous report of the contractor.

    Returns:
        Adjacency | None: None when either date is unknown.
    """
    if previous_period_end is None or period_start is None:
        return None
    if previous_period_end + timedelta(days=1) == period_start:
        return Adjacency.ADJACENT
    if previous_period_end < period_start:
        return Adjacency.SEPARATED
    return Adjacency.OVERLAPS


__all__ = [
    "compute_report_earnings",
    "instant_earnings_status",
    "deferred_earnings_status",
    "report_adjacency",
]
