"""Classification of raw link rows into typed reconcile/clarify links.

Rules are evaluated in priority order and the first match wins:

1. both foreign keys present: reconcile, both amounts required;
2. only the billing (or cost) key present: clarify that side, description
   and that side's amount required;
3. only the report key present: clarify the report, description and
   ``report_amount`` required;
4. otherwise the row is invalid.
"""

from collections.abc import Iterable
from decimal import Decimal

from billing_recon.domain.exceptions import InvalidLinkError
from billing_recon.domain.models import (
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
from billing_recon.domain.services.normalization import normalize_description


def classify_link(raw: RawBillingReportLink) -> BillingReportLink:
    """Classify a billing/report link row.

    Args:
        raw: Link row with nullable foreign keys and amounts.

    Returns:
        BillingReportLink: Reconcile, clarify-billing or clarify-report link.

    Raises:
        InvalidLinkError: When the row has no reference or lacks a field the
            matching variant requires.
    """
    if raw.billing_id is not None and raw.report_id is not None:
        return ReconcileLink(
            id=raw.id,
            created_at=raw.created_at,
            billing_id=raw.billing_id,
            report_id=raw.report_id,
            billing_amount=_require_amount(
                raw.billing_amount, "billing_amount", "reconcile", raw.id
            ),
            report_amount=_require_amount(
                raw.report_amount, "report_amount", "reconcile", raw.id
            ),
            description=raw.description or "",
        )
    if raw.billing_id is not None:
        return ClarifyBillingLink(
            id=raw.id,
            created_at=raw.created_at,
            billing_id=raw.billing_id,
            billing_amount=_require_amount(
                raw.billing_amount, "billing_amount", "clarify", raw.id
            ),
            description=_require_description(raw.description, raw.id),
        )
    if raw.report_id is not None:
        return ClarifyReportLink(
            id=raw.id,
            created_at=raw.created_at,
            report_id=raw.report_id,
            report_amount=_require_amount(
                raw.report_amount, "report_amount", "clarify", raw.id
            ),
            description=_require_description(raw.description, raw.id),
        )
    raise InvalidLinkError(
        "link has neither billing nor report reference",
        link_id=raw.id,
    )


def classify_cost_link(raw: RawCostReportLink) -> CostReportLink:
    """Classify a cost/report link row.

    Args:
        raw: Link row with nullable foreign keys and amounts.

    Returns:
        CostReportLink: Reconcile, clarify-cost or clarify-report link.

    Raises:
        InvalidLinkError: When the row cannot be classified.
    """
    if raw.cost_id is not None and raw.report_id is not None:
        return CostReconcileLink(
            id=raw.id,
            created_at=raw.created_at,
            cost_id=raw.cost_id,
            report_id=raw.report_id,
            cost_amount=_require_amount(
                raw.cost_amount, "cost_amount", "reconcile", raw.id
            ),
            report_amount=_require_amount(
                raw.report_amount, "report_amount", "reconcile", raw.id
            ),
            description=raw.description or "",
        )
    if raw.cost_id is not None:
        return ClarifyCostLink(
            id=raw.id,
            created_at=raw.created_at,
            cost_id=raw.cost_id,
            cost_amount=_require_amount(
                raw.cost_amount, "cost_amount", "clarify", raw.id
            ),
            description=_require_description(raw.description, raw.id),
        )
    if raw.report_id is not None:
        return ClarifyReportCostLink(
            id=raw.id,
            created_at=raw.created_at,
            report_id=raw.report_id,
            report_amount=_require_amount(
                raw.report_amount, "report_amount", "clarify", raw.id
            ),
            description=_require_description(raw.description, raw.id),
        )
    raise InvalidLinkError(
        "link has neither cost nor report reference",
        link_id=raw.id,
    )


def classify_links(raws: Iterable[RawLink]) -> tuple[Link, ...]:
    """Classify a mixed sequence of billing and cost link rows.

    Args:
        raws: Raw link rows of either kind.

    Returns:
        tuple[Link, ...]: Classified links in input order.

    Raises:
        InvalidLinkError: On the first row that cannot be classified.
    """
    classified: list[Link] = []
    for raw in raws:
        if isinstance(raw, RawCostReportLink):
            classified.append(classify_cost_link(raw))
        elif isinstance(raw, RawBillingReportLink):
            classified.append(classify_link(raw))
        else:
            raise TypeError(f"Unsupported link record: {type(raw).__name__}")
    return tuple(classified)


def _require_amount(
    value: Decimal | None,
    field: str,
    link_type: str,
    link_id: int,
) -> Decimal:
    if value is None:
        raise InvalidLinkError(
            f'{field} is required for link type "{link_type}"',
            link_id=link_id,
            field=field,
        )
    return value


def _require_description(description: str | None, link_id: int) -> str:
    cleaned = normalize_description(description)
    if cleaned is None:
        raise InvalidLinkError(
            'description is required for link type "clarify"',
            link_id=link_id,
            field="description",
        )
    return cleaned


__all__ = ["classify_link", "classify_cost_link", "classify_links"]
