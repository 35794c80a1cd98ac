"""Tests for the balance calculator."""

from datetime import datetime
from decimal import Decimal

from billing_recon.domain.models import (
    Billing,
    ClarifyBillingLink,
    ReconcileLink,
    Report,
    Status,
)
from billing_recon.domain.services import (
    compute_balance,
    derive_status,
    minor_unit_exponent,
    quantize_amount,
)

CREATED_AT = datetime(2024, 1, 1)


def _reconcile(link_id: int, billing_amount: str, report_amount: str) -> ReconcileLink:
    return ReconcileLink(
        id=link_id,
        created_at=CREATED_AT,
        billing_id=1,
        report_id=2,
        billing_amount=Decimal(billing_amount),
        report_amount=Decimal(report_amount),
    )


def _billing_amount(link) -> Decimal:
    return link.billing_amount


def test_exact_match_is_matched() -> None:
    """A billing fully covered by links is matched."""
    billing = Billing(id=1, workspace_id=1, net_value=Decimal("1000"), currency="EUR")

    result = compute_balance(
        billing,
        [_reconcile(1, "600", "2400"), _reconcile(2, "400", "1600")],
        _billing_amount,
    )

    assert result.matched_amount == Decimal("1000")
    assert result.remaining_amount == Decimal("0")
    assert result.status is Status.MATCHED


def test_partial_match() -> None:
    """A billing partially covered is partially matched."""
    billing = Billing(id=1, workspace_id=1, net_value=Decimal("1000"), currency="EUR")

    result = compute_balance(billing, [_reconcile(1, "250", "1000")], _billing_amount)

    assert result.remaining_amount == Decimal("750")
    assert result.status is Status.PARTIALLY_MATCHED


def test_no_links_is_unmatched() -> None:
    """Without links the whole net value remains."""
    billing = Billing(id=1, workspace_id=1, net_value=Decimal("10"), currency="EUR")

    result = compute_balance(billing, [], _billing_amount)

    assert result.matched_amount == Decimal("0")
    assert result.remaining_amount == Decimal("10")
    assert result.status is Status.UNMATCHED


def test_excess_is_overmatched() -> None:
    """Links exceeding the net value leave a negative remainder."""
    billing = Billing(id=1, workspace_id=1, net_value=Decimal("100"), currency="EUR")

    result = compute_balance(billing, [_reconcile(1, "150", "150")], _billing_amount)

    assert result.remaining_amount == Decimal("-50")
    assert result.status is Status.OVERMATCHED


def test_zero_value_entity_without_links_is_matched() -> None:
    """The zero check runs first, so an empty zero-value entity is matched."""
    report = Report(id=2, workspace_id=1, net_value=Decimal("0"), currency="PLN")

    result = compute_balance(report, [], lambda link: link.report_amount)

    assert result.status is Status.MATCHED


def test_extractor_selects_the_entity_side() -> None:
    """The same links yield different sums depending on the extractor."""
    report = Report(id=2, workspace_id=1, net_value=Decimal("4000"), currency="PLN")
    links = [
        _reconcile(1, "1000", "4000"),
    ]

    result = compute_balance(report, links, lambda link: link.report_amount)

    assert result.matched_amount == Decimal("4000")
    assert result.status is Status.MATCHED


def test_clarify_links_count_towards_matched_amount() -> None:
    """A clarification covers the remainder like a reconcile link."""
    billing = Billing(id=1, workspace_id=1, net_value=Decimal("100"), currency="EUR")
    links = [
        _reconcile(1, "70", "280"),
        ClarifyBillingLink(
            id=2,
            created_at=CREATED_AT,
            billing_id=1,
            billing_amount=Decimal("30"),
            description="bank fee",
        ),
    ]

    result = compute_balance(billing, links, _billing_amount)

    assert result.status is Status.MATCHED


def test_matched_plus_remaining_equals_net() -> None:
    """The balance always adds up to the entity net value."""
    billing = Billing(id=1, workspace_id=1, net_value=Decimal("99.99"), currency="EUR")

    result = compute_balance(
        billing,
        [_reconcile(1, "33.33", "1"), _reconcile(2, "120.01", "1")],
        _billing_amount,
    )

    assert result.matched_amount + result.remaining_amount == billing.net_value


def test_derive_status_order() -> None:
    """Status checks run in the documented order."""
    assert derive_status(Decimal("5"), Decimal("0")) is Status.MATCHED
    assert derive_status(Decimal("5"), Decimal("1")) is Status.PARTIALLY_MATCHED
    assert derive_status(Decimal("0"), Decimal("1")) is Status.UNMATCHED
    assert derive_status(Decimal("5"), Decimal("-1")) is Status.OVERMATCHED


def test_quantize_amount_uses_currency_minor_unit() -> None:
    """Amounts are rounded half up to the currency minor unit."""
    assert quantize_amount(Decimal("10.005"), "eur") == Decimal("10.01")
    assert quantize_amount(Decimal("10.5"), "JPY") == Decimal("11")
    assert minor_unit_exponent("BHD") == Decimal("0.001")
