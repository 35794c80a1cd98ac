"""Tests for report earnings derivation."""

from datetime import date
from decimal import Decimal

import pytest

from billing_recon.domain.models import (
    Adjacency,
    BalanceResult,
    EarningsStatus,
    Status,
)
from billing_recon.domain.services import (
    compute_report_earnings,
    deferred_earnings_status,
    instant_earnings_status,
    report_adjacency,
)


@pytest.mark.parametrize(
    ("net", "billed", "due", "clarified", "expected"),
    [
        ("0", "0", "0", False, EarningsStatus.COMPENSATED),
        ("100", "0", "0", False, EarningsStatus.UNCOMPENSATED),
        ("100", "100", "60", False, EarningsStatus.PARTIALLY_COMPENSATED),
        ("100", "100", "0", True, EarningsStatus.CLARIFIED),
        ("100", "100", "0", False, EarningsStatus.COMPENSATED),
    ],
)
def test_instant_earnings_status(net, billed, due, clarified, expected) -> None:
    status = instant_earnings_status(
        Decimal(net), Decimal(billed), Decimal(due), clarified
    )

    assert status is expected


@pytest.mark.parametrize(
    ("net", "billed", "report_cost_balance", "expected"),
    [
        ("100", "100", "0", EarningsStatus.COMPENSATED),
        ("100", "0", "-10", EarningsStatus.COMPENSATED),
        ("100", "60", "100", EarningsStatus.UNCOMPENSATED),
        ("100", "60", "40", EarningsStatus.UNCOMPENSATED),
        ("100", "60", "30", EarningsStatus.PARTIALLY_COMPENSATED),
    ],
)
def test_deferred_earnings_status(net, billed, report_cost_balance, expected) -> None:
    status = deferred_earnings_status(
        Decimal(net), Decimal(billed), Decimal(report_cost_balance)
    )

    assert status is expected


def test_immediate_payment_due_is_clamped_to_reported_value() -> None:
    """Overbilling never makes more than the unpaid reported value due."""
    billing = BalanceResult(Decimal("150"), Decimal("-50"), Status.OVERMATCHED)
    compensation = BalanceResult(
        Decimal("20"), Decimal("80"), Status.PARTIALLY_MATCHED
    )

    earnings = compute_report_earnings(Decimal("100"), billing, compensation)

    assert earnings.billing_cost_balance == Decimal("130")
    assert earnings.immediate_payment_due == Decimal("80")
    assert earnings.instant is EarningsStatus.PARTIALLY_COMPENSATED
    assert earnings.deferred is EarningsStatus.UNCOMPENSATED


def test_loss_makes_nothing_due() -> None:
    billing = BalanceResult(Decimal("40"), Decimal("60"), Status.PARTIALLY_MATCHED)
    compensation = BalanceResult(Decimal("100"), Decimal("0"), Status.MATCHED)

    earnings = compute_report_earnings(Decimal("100"), billing, compensation)

    assert earnings.billing_cost_balance == Decimal("-60")
    assert earnings.immediate_payment_due == Decimal("-60")
    assert earnings.instant is EarningsStatus.COMPENSATED
    assert earnings.deferred is EarningsStatus.COMPENSATED


@pytest.mark.parametrize(
    ("previous_end", "start", "expected"),
    [
        (date(2024, 1, 31), date(2024, 2, 1), Adjacency.ADJACENT),
        (date(2024, 1, 15), date(2024, 2, 1), Adjacency.SEPARATED),
        (date(2024, 2, 1), date(2024, 2, 1), Adjacency.OVERLAPS),
        (date(2024, 2, 10), date(2024, 2, 1), Adjacency.OVERLAPS),
        (None, date(2024, 2, 1), None),
        (date(2024, 1, 31), None, None),
    ],
)
def test_report_adjacency(previous_end, start, expected) -> None:
    assert report_adjacency(previous_end, start) is expected
