"""Pure construction of reconciliation views from fetched snapshots."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from decimal import Decimal
from logging import Logger

from billing_recon.domain.constants import ZERO
from billing_recon.domain.exceptions import MissingWorkspaceError
from billing_recon.domain.models import (
    CLARIFY,
    Adjacency,
    BalanceResult,
    Billing,
    ClarifyBillingLink,
    ClarifyCostLink,
    ClarifyReportCostLink,
    ClarifyReportLink,
    Cost,
    CostReconcileLink,
    CounterpartSummary,
    CurrencyValue,
    CurrencyValueGroup,
    ExchangeRate,
    Link,
    RawLink,
    ReconcileLink,
    ReconciliationView,
    ReconciliationViewEntry,
    Report,
    ReportEarnings,
    Status,
    ViewKind,
    ViewTotals,
    Workspace,
)
from billing_recon.domain.services.balance import compute_balance, quantize_amount
from billing_recon.domain.services.currency import build_currency_value_group
from billing_recon.domain.services.earnings import (
    compute_report_earnings,
    report_adjacency,
)
from billing_recon.domain.services.link_classifier import classify_links
from billing_recon.domain.services.normalization import normalize_currency

Entity = Report | Billing | Cost

_BILLING_SIDE = (ReconcileLink, ClarifyBillingLink)
_COST_SIDE = (CostReconcileLink, ClarifyCostLink)
_REPORT_BILLING_SIDE = (ReconcileLink, ClarifyReportLink)
_REPORT_COST_SIDE = (CostReconcileLink, ClarifyReportCostLink)


def build_view(
    kind: ViewKind,
    entities: Sequence[Entity],
    links: Iterable[RawLink],
    workspaces: Iterable[Workspace],
    rates: Iterable[ExchangeRate],
    display_currency: str,
    logger: Logger | None = None,
) -> ReconciliationView:
    """Build the reconciliation view for one entity kind.

    Args:
        kind: Kind of every entity in ``entities``.
        entities: Reports, billings or costs to project.
        links: Raw link rows; rows unrelated to the entities are ignored
            once classified.
        workspaces: Workspaces the entities may belong to.
        rates: Exchange rates into the display currency.
        display_currency: Target currency of approximated totals.
        logger: Optional logger used for missing-rate warnings.

    Returns:
        ReconciliationView: One entry per entity plus aggregated totals.

    Raises:
        InvalidLinkError: When any link row cannot be classified.
        MissingWorkspaceError: When an entity's workspace is absent.
    """
    classified = classify_links(links)
    workspace_map = {workspace.id: workspace for workspace in workspaces}
    rate_tuple = tuple(rates)
    target = normalize_currency(display_currency) or display_currency

    entries = tuple(
        _build_entry(kind, entity, classified, workspace_map)
        for entity in entities
    )
    return ReconciliationView(
        kind=kind,
        display_currency=target,
        entries=entries,
        totals=compute_totals(kind, entries, target, rate_tuple, logger),
        rates=rate_tuple,
    )


def compute_totals(
    kind: ViewKind,
    entries: Iterable[ReconciliationViewEntry],
    display_currency: str,
    rates: Iterable[ExchangeRate],
    logger: Logger | None = None,
) -> ViewTotals:
    """Aggregate entry amounts into per-currency groups.

    Args:
        kind: Kind of the entries.
        entries: Entries to aggregate.
        display_currency: Target currency of approximated totals.
        rates: Exchange rates into the display currency.
        logger: Optional logger used for missing-rate warnings.

    Returns:
        ViewTotals: ``net``, ``matched`` and ``remaining`` for every kind,
        ``gross`` for billings and costs, ``compensated``,
        ``to_compensate`` and ``to_fully_compensate`` for reports.
    """
    entry_list = list(entries)
    rate_list = list(rates)

    def group(values: Iterable[CurrencyValue]) -> CurrencyValueGroup:
        return build_currency_value_group(
            values, display_currency, rate_list, logger
        )

    totals = {
        "net": group(entry.net_value for entry in entry_list),
        "matched": group(entry.matched_amount for entry in entry_list),
        "remaining": group(entry.remaining_amount for entry in entry_list),
    }
    if kind in (ViewKind.BILLING, ViewKind.COST):
        totals["gross"] = group(
            entry.gross_value
            for entry in entry_list
            if entry.gross_value is not None
        )
    if kind is ViewKind.REPORT:
        reports = [
            entry
            for entry in entry_list
            if entry.compensation is not None and entry.earnings is not None
        ]
        totals["compensated"] = group(
            CurrencyValue(entry.compensation.matched_amount, entry.net_value.currency)
            for entry in reports
        )
        totals["to_compensate"] = group(
            CurrencyValue(
                max(ZERO, entry.earnings.immediate_payment_due),
                entry.net_value.currency,
            )
            for entry in reports
        )
        totals["to_fully_compensate"] = group(
            CurrencyValue(
                entry.compensation.remaining_amount, entry.net_value.currency
            )
            for entry in reports
        )
    return ViewTotals(tuple(totals.items()))


def select_totals(
    view: ReconciliationView,
    entity_ids: Iterable[int],
    logger: Logger | None = None,
) -> ViewTotals:
    """Aggregate totals for a selected subset of a view's entries.

    Args:
        view: Previously built view.
        entity_ids: Identifiers of the selected entities.
        logger: Optional logger used for missing-rate warnings.

    Returns:
        ViewTotals: Totals restricted to the selection.
    """
    selected = set(entity_ids)
    return compute_totals(
        view.kind,
        (entry for entry in view.entries if entry.entity_id in selected),
        view.display_currency,
        view.rates,
        logger,
    )


def embedded_links(kind: ViewKind, entities: Iterable[Entity]) -> tuple[RawLink, ...]:
    """Collect the raw links embedded in fetched entities.

    Rows shared by several entities are returned once.

    Args:
        kind: Kind of the entities.
        entities: Entities as returned by the sources.

    Returns:
        tuple[RawLink, ...]: Unique raw link rows in first-seen order.
    """
    unique: dict[tuple[type, int], RawLink] = {}
    for entity in entities:
        if kind is ViewKind.REPORT:
            rows: Iterable[RawLink] = (*entity.billing_links, *entity.cost_links)
        else:
            rows = entity.links
        for row in rows:
            unique.setdefault((type(row), row.id), row)
    return tuple(unique.values())


def _build_entry(
    kind: ViewKind,
    entity: Entity,
    links: Sequence[Link],
    workspace_map: dict[int, Workspace],
) -> ReconciliationViewEntry:
    workspace = workspace_map.get(entity.workspace_id)
    if workspace is None:
        raise MissingWorkspaceError(entity.id, entity.workspace_id)

    currency = entity.currency
    rounded = replace(entity, net_value=quantize_amount(entity.net_value, currency))
    compensation: BalanceResult | None = None
    earnings: ReportEarnings | None = None
    adjacency: Adjacency | None = None

    if kind is ViewKind.BILLING:
        attached = _select(links, _BILLING_SIDE, "billing_id", entity.id)
        balance = compute_balance(
            rounded, attached, _rounded(lambda link: link.billing_amount, currency)
        )
        counterparts = tuple(_report_counterpart(link) for link in attached)
    elif kind is ViewKind.COST:
        attached = _select(links, _COST_SIDE, "cost_id", entity.id)
        balance = compute_balance(
            rounded, attached, _rounded(lambda link: link.cost_amount, currency)
        )
        counterparts = tuple(_report_counterpart(link) for link in attached)
    else:
        billing_links = _select(links, _REPORT_BILLING_SIDE, "report_id", entity.id)
        cost_links = _select(links, _REPORT_COST_SIDE, "report_id", entity.id)
        report_amount = _rounded(lambda link: link.report_amount, currency)
        balance = compute_balance(rounded, billing_links, report_amount)
        compensation = compute_balance(rounded, cost_links, report_amount)
        earnings = compute_report_earnings(
            rounded.net_value,
            balance,
            compensation,
            any(isinstance(link, ClarifyReportCostLink) for link in cost_links),
        )
        adjacency = report_adjacency(entity.previous_period_end, entity.period_start)
        attached = billing_links + cost_links
        counterparts = tuple(_entity_counterpart(link) for link in attached)

    clarified = balance.status is Status.MATCHED and any(
        link.link_type == CLARIFY
        for link in attached
        if not isinstance(link, _REPORT_COST_SIDE)
    )
    gross = getattr(entity, "gross_value", None)
    return ReconciliationViewEntry(
        kind=kind,
        entity_id=entity.id,
        net_value=CurrencyValue(rounded.net_value, currency),
        gross_value=(
            CurrencyValue(quantize_amount(gross, currency), currency)
            if gross is not None
            else None
        ),
        balance=balance,
        matched_amount=CurrencyValue(balance.matched_amount, currency),
        remaining_amount=CurrencyValue(balance.remaining_amount, currency),
        clarified=clarified,
        workspace=workspace,
        links=attached,
        counterparts=counterparts,
        compensation=compensation,
        earnings=earnings,
        previous_report_adjacency=adjacency,
    )


def _select(
    links: Sequence[Link],
    types: tuple[type, ...],
    key: str,
    entity_id: int,
) -> tuple[Link, ...]:
    return tuple(
        link
        for link in links
        if isinstance(link, types) and getattr(link, key) == entity_id
    )


def _rounded(
    extract: Callable[[Link], Decimal],
    currency: str,
) -> Callable[[Link], Decimal]:
    return lambda link: quantize_amount(extract(link), currency)


def _report_counterpart(link: Link) -> CounterpartSummary:
    if isinstance(link, (ReconcileLink, CostReconcileLink)):
        return CounterpartSummary(
            link_id=link.id,
            link_type=link.link_type,
            counterpart_kind=ViewKind.REPORT,
            counterpart_id=link.report_id,
            amount=link.report_amount,
            description=link.description,
        )
    return _clarification(link, ViewKind.REPORT)


def _entity_counterpart(link: Link) -> CounterpartSummary:
    if isinstance(link, ReconcileLink):
        return CounterpartSummary(
            link_id=link.id,
            link_type=link.link_type,
            counterpart_kind=ViewKind.BILLING,
            counterpart_id=link.billing_id,
            amount=link.billing_amount,
            description=link.description,
        )
    if isinstance(link, CostReconcileLink):
        return CounterpartSummary(
            link_id=link.id,
            link_type=link.link_type,
            counterpart_kind=ViewKind.COST,
            counterpart_id=link.cost_id,
            amount=link.cost_amount,
            description=link.description,
        )
    kind = ViewKind.COST if isinstance(link, ClarifyReportCostLink) else ViewKind.BILLING
    return _clarification(link, kind)


def _clarification(link: Link, kind: ViewKind) -> CounterpartSummary:
    return CounterpartSummary(
        link_id=link.id,
        link_type=link.link_type,
        counterpart_kind=kind,
        counterpart_id=None,
        amount=None,
        description=link.description,
    )


__all__ = [
    "build_view",
    "compute_totals",
    "select_totals",
    "embedded_links",
]
