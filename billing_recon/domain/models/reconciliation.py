"""Domain models for reconciliation results and views."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .entities import Workspace
from .links import Link
from .money import CurrencyValue, CurrencyValueGroup, ExchangeRate


class Status(str, Enum):
    """Balance status of a report, billing or cost."""

    MATCHED = "matched"
    PARTIALLY_MATCHED = "partially_matched"
    UNMATCHED = "unmatched"
    OVERMATCHED = "overmatched"


class ViewKind(str, Enum):
    """Entity kind a reconciliation view is built for."""

    REPORT = "report"
    BILLING = "billing"
    COST = "cost"


class EarningsStatus(str, Enum):
    """How far a contractor has been paid for a report."""

    COMPENSATED = "compensated"
    PARTIALLY_COMPENSATED = "partially_compensated"
    UNCOMPENSATED = "uncompensated"
    CLARIFIED = "clarified"


class Adjacency(str, Enum):
    """Position of a report period relative to the previous report."""

    ADJACENT = "adjacent"
    SEPARATED = "separated"
    OVERLAPS = "overlaps"


@dataclass(frozen=True)
class BalanceResult:
    """Matched and remaining amounts for one entity.

    Attributes:
        matched_amount: Sum of link amounts attributed to the entity.
        remaining_amount: Net value minus matched amount, may be negative.
        status: Derived balance status.
    """

    matched_amount: Decimal
    remaining_amount: Decimal
    status: Status


@dataclass(frozen=True)
class ReportEarnings:
    """Billing against cost position of a single report.

    Attributes:
        billing_cost_balance: Billed minus compensated amount; positive is
            profit, negative is loss.
        immediate_payment_due: Billing/cost balance clamped to the part of
            the reported value not compensated yet.
        instant: Status of payment against what has already been billed.
        deferred: Status of payment against the full reported value.
    """

    billing_cost_balance: Decimal
    immediate_payment_due: Decimal
    instant: EarningsStatus
    deferred: EarningsStatus


@dataclass(frozen=True)
class CounterpartSummary:
    """The other side of a link, as seen from the entity it is attached to.

    Attributes:
        link_id: Identifier of the link row.
        link_type: ``reconcile`` or ``clarify``.
        counterpart_kind: Kind of the entity on the other side.
        counterpart_id: Identifier of that entity, None for clarifications.
        amount: Amount booked on the counterpart side, None for
            clarifications.
        description: Link description or clarification justification.
    """

    link_id: int
    link_type: str
    counterpart_kind: ViewKind
    counterpart_id: int | None
    amount: Decimal | None
    description: str


@dataclass(frozen=True)
class ReconciliationViewEntry:
    """Read-only projection of one entity and its balance."""

    kind: ViewKind
    entity_id: int
    net_value: CurrencyValue
    gross_value: CurrencyValue | None
    balance: BalanceResult
    matched_amount: CurrencyValue
    remaining_amount: CurrencyValue
    clarified: bool
    workspace: Workspace
    links: tuple[Link, ...]
    counterparts: tuple[CounterpartSummary, ...]
    compensation: BalanceResult | None = None
    earnings: ReportEarnings | None = None
    previous_report_adjacency: Adjacency | None = None

    @property
    def status(self) -> Status:
        return self.balance.status


@dataclass(frozen=True, eq=False)
class ViewTotals(Mapping[str, CurrencyValueGroup]):
    """Read-only, hashable mapping of total names to currency groups."""

    groups: tuple[tuple[str, CurrencyValueGroup], ...] = ()

    def __getitem__(self, name: str) -> CurrencyValueGroup:
        for key, group in self.groups:
            if key == name:
                return group
        raise KeyError(name)

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def __hash__(self) -> int:
        return hash(frozenset(self.groups))


@dataclass(frozen=True)
class ReconciliationView:
    """Entries of a single kind plus their aggregated totals.

    Attributes:
        kind: Entity kind of every entry.
        display_currency: Target currency of approximated totals.
        entries: One entry per input entity, in input order.
        totals: Aggregated totals keyed by name (``net``, ``matched``...).
        rates: Exchange rates the totals were approximated with.
    """

    kind: ViewKind
    display_currency: str
    entries: tuple[ReconciliationViewEntry, ...]
    totals: ViewTotals
    rates: tuple[ExchangeRate, ...] = ()

    def entry(self, entity_id: int) -> ReconciliationViewEntry | None:
        for candidate in self.entries:
            if candidate.entity_id == entity_id:
                return candidate
        return None


__all__ = [
    "Status",
    "ViewKind",
    "EarningsStatus",
    "Adjacency",
    "BalanceResult",
    "ReportEarnings",
    "CounterpartSummary",
    "ReconciliationViewEntry",
    "ViewTotals",
    "ReconciliationView",
]
