"""Ports for reading reconciliation inputs.

Each source is asynchronous: infrastructure adapters may perform network or
database I/O, and the view use case awaits several of them concurrently.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from billing_recon.domain.models import (
    Billing,
    Cost,
    CurrencyPair,
    ExchangeRate,
    Report,
    Workspace,
)


@dataclass(frozen=True)
class EntityQuery:
    """Immutable, hashable filter shared by the entity sources.

    Attributes:
        workspace_ids: Workspaces to include; empty means all.
        start_date: Optional inclusive lower bound.
        end_date: Optional inclusive upper bound.
    """

    workspace_ids: tuple[int, ...] = ()
    start_date: date | None = None
    end_date: date | None = None


class ReportSourcePort(Protocol):
    """Port exposing contractor reports with their embedded links."""

    async def fetch(self, query: EntityQuery) -> list[Report]:
        """Return reports matching the query."""


class BillingSourcePort(Protocol):
    """Port exposing client billings with their embedded links."""

    async def fetch(self, query: EntityQuery) -> list[Billing]:
        """Return billings matching the query."""


class CostSourcePort(Protocol):
    """Port exposing costs with their embedded links."""

    async def fetch(self, query: EntityQuery) -> list[Cost]:
        """Return costs matching the query."""


class WorkspaceSourcePort(Protocol):
    """Port exposing every workspace."""

    async def fetch(self) -> list[Workspace]:
        """Return all workspaces."""


class ExchangeRateSourcePort(Protocol):
    """Port exposing exchange rates for currency pairs."""

    async def fetch(self, pairs: Sequence[CurrencyPair]) -> list[ExchangeRate]:
        """Return rates for the requested pairs.

        Args:
            pairs: Deduplicated pairs to look up.

        Returns:
            list[ExchangeRate]: Rates for available pairs; unavailable pairs
            are omitted.
        """


__all__ = [
    "EntityQuery",
    "ReportSourcePort",
    "BillingSourcePort",
    "CostSourcePort",
    "WorkspaceSourcePort",
    "ExchangeRateSourcePort",
]
