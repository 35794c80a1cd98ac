"""Tests for the link classifier."""

from datetime import datetime
from decimal import Decimal

import pytest

from billing_recon.domain.exceptions import InvalidLinkError
from billing_recon.domain.models import (
    ClarifyBillingLink,
    ClarifyCostLink,
    ClarifyReportCostLink,
    ClarifyReportLink,
    CostReconcileLink,
    RawBillingReportLink,
    RawCostReportLink,
    ReconcileLink,
)
from billing_recon.domain.services import (
    classify_cost_link,
    classify_link,
    classify_links,
)

CREATED_AT = datetime(2024, 1, 1, 12, 0)


def _raw(**kwargs) -> RawBillingReportLink:
    return RawBillingReportLink(id=1, created_at=CREATED_AT, **kwargs)


def test_both_references_produce_reconcile_link() -> None:
    """A row referencing both sides is a reconcile link."""
    link = classify_link(
        _raw(
            billing_id=5,
            report_id=7,
            billing_amount=Decimal("100"),
            report_amount=Decimal("400"),
            description=None,
        )
    )

    assert isinstance(link, ReconcileLink)
    assert link.billing_id == 5
    assert link.report_id == 7
    assert link.billing_amount == Decimal("100")
    assert link.report_amount == Decimal("400")
    assert link.description == ""
    assert link.link_type == "reconcile"


def test_reconcile_missing_amount_names_the_field() -> None:
    """A reconcile row without billing_amount fails naming the field."""
    with pytest.raises(InvalidLinkError) as excinfo:
        classify_link(
            _raw(billing_id=5, report_id=7, report_amount=Decimal("400"))
        )

    assert excinfo.value.field == "billing_amount"
    assert excinfo.value.link_id == 1
    assert excinfo.value.code == "INVALID_LINK"
    assert "billing_amount" in str(excinfo.value)


def test_billing_only_row_is_billing_clarification() -> None:
    """A row with only billing_id clarifies the billing."""
    link = classify_link(
        _raw(
            billing_id=5,
            billing_amount=Decimal("30"),
            description="bank fee",
        )
    )

    assert isinstance(link, ClarifyBillingLink)
    assert link.billing_amount == Decimal("30")
    assert link.description == "bank fee"
    assert link.link_type == "clarify"


def test_report_only_row_is_report_clarification() -> None:
    """A row with only report_id clarifies the report."""
    link = classify_link(
        _raw(report_id=7, report_amount=Decimal("12.5"), description="  gift ")
    )

    assert isinstance(link, ClarifyReportLink)
    assert link.report_amount == Decimal("12.5")
    assert link.description == "gift"


def test_clarification_without_description_is_rejected() -> None:
    """Clarify links require a description."""
    with pytest.raises(InvalidLinkError) as excinfo:
        classify_link(_raw(billing_id=5, billing_amount=Decimal("30")))

    assert excinfo.value.field == "description"


def test_blank_description_counts_as_missing() -> None:
    """Whitespace-only justifications are rejected."""
    with pytest.raises(InvalidLinkError):
        classify_link(
            _raw(report_id=7, report_amount=Decimal("1"), description="   ")
        )


def test_row_without_references_is_invalid() -> None:
    """A row with neither reference cannot be classified."""
    with pytest.raises(InvalidLinkError) as excinfo:
        classify_link(_raw(billing_amount=Decimal("1"), description="x"))

    assert "neither billing nor report" in str(excinfo.value)


def test_cost_rows_follow_the_same_priority() -> None:
    """Cost link rows classify into reconcile, clarify-cost, clarify-report."""
    reconcile = classify_cost_link(
        RawCostReportLink(
            id=2,
            created_at=CREATED_AT,
            cost_id=3,
            report_id=7,
            cost_amount=Decimal("200"),
            report_amount=Decimal("50"),
        )
    )
    clarify_cost = classify_cost_link(
        RawCostReportLink(
            id=3,
            created_at=CREATED_AT,
            cost_id=3,
            cost_amount=Decimal("20"),
            description="rounding",
        )
    )
    clarify_report = classify_cost_link(
        RawCostReportLink(
            id=4,
            created_at=CREATED_AT,
            report_id=7,
            report_amount=Decimal("5"),
            description="unpaid",
        )
    )

    assert isinstance(reconcile, CostReconcileLink)
    assert isinstance(clarify_cost, ClarifyCostLink)
    assert isinstance(clarify_report, ClarifyReportCostLink)


def test_cost_row_without_references_is_invalid() -> None:
    """The cost classifier names its own sides in the error."""
    with pytest.raises(InvalidLinkError) as excinfo:
        classify_cost_link(RawCostReportLink(id=9, created_at=CREATED_AT))

    assert "neither cost nor report" in str(excinfo.value)


def test_classify_links_dispatches_on_record_type() -> None:
    """Mixed sequences keep their order and pick the right classifier."""
    links = classify_links(
        [
            RawCostReportLink(
                id=2,
                created_at=CREATED_AT,
                cost_id=3,
                report_id=7,
                cost_amount=Decimal("1"),
                report_amount=Decimal("1"),
            ),
            _raw(billing_id=1, report_id=7, billing_amount=Decimal("1"), report_amount=Decimal("1")),
        ]
    )

    assert [type(link) for link in links] == [CostReconcileLink, ReconcileLink]


def test_classify_links_rejects_unknown_records() -> None:
    """Unknown record types raise TypeError."""
    with pytest.raises(TypeError):
        classify_links([object()])
