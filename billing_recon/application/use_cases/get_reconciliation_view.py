"""Use case producing reconciliation views from the entity sources."""

import asyncio
from dataclasses import dataclass, replace
from enum import Enum

from billing_recon.application.ports.sources import (
    BillingSourcePort,
    CostSourcePort,
    EntityQuery,
    ExchangeRateSourcePort,
    ReportSourcePort,
    WorkspaceSourcePort,
)
from billing_recon.application.query_cache import (
    BILLINGS,
    COSTS,
    EXCHANGE_RATES,
    REPORTS,
    WORKSPACES,
    QueryCache,
)
from billing_recon.domain.constants import DEFAULT_DISPLAY_CURRENCY
from billing_recon.domain.models import (
    ExchangeRate,
    ReconciliationView,
    ViewKind,
    Workspace,
)
from billing_recon.domain.services import (
    build_view,
    embedded_links,
    normalize_currency,
    required_pairs,
)
from billing_recon.infrastructure.logging.logger import get_app_logger

ENTITY_NAMESPACES = {
    ViewKind.REPORT: REPORTS,
    ViewKind.BILLING: BILLINGS,
    ViewKind.COST: COSTS,
}


class ViewStatus(str, Enum):
    """Lifecycle of a keyed view."""

    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
    STALE = "stale"


@dataclass(frozen=True)
class ViewRequest:
    """Parameters a view was requested with."""

    kind: ViewKind
    query: EntityQuery
    display_currency: str


@dataclass(frozen=True)
class ViewState:
    """Latest known state of a keyed view.

    Attributes:
        status: Lifecycle status.
        request: Parameters of the latest request.
        view: Last successfully built view, kept while reloading.
        error: Failure of the latest request, if any.
    """

    status: ViewStatus
    request: ViewRequest
    view: ReconciliationView | None = None
    error: Exception | None = None


class GetReconciliationViewUseCase:
    """Fetch entities, workspaces and rates, then build a view."""

    def __init__(
        self,
        report_source: ReportSourcePort,
        billing_source: BillingSourcePort,
        cost_source: CostSourcePort,
        workspace_source: WorkspaceSourcePort,
        rate_source: ExchangeRateSourcePort,
        cache: QueryCache | None = None,
        logger=None,
        display_currency: str = DEFAULT_DISPLAY_CURRENCY,
    ) -> None:
        """Initialize the use case.

        Args:
            report_source: Port providing reports.
            billing_source: Port providing billings.
            cost_source: Port providing costs.
            workspace_source: Port providing workspaces.
            rate_source: Port providing exchange rates.
            cache: Optional shared query cache. Exchange rates are refreshed
                only when the cache gives the ``exchange_rates`` namespace a
                time to live or a caller invalidates it.
            logger: Optional logger compatible with logging.Logger-like API.
            display_currency: Currency used when a request names none.
        """
        self._logger = logger or get_app_logger()
        self._cache = cache or QueryCache(logger=self._logger)
        self._entity_sources = {
            ViewKind.REPORT: report_source,
            ViewKind.BILLING: billing_source,
            ViewKind.COST: cost_source,
        }
        self._workspace_source = workspace_source
        self._rate_source = rate_source
        self._display_currency = display_currency
        self._states: dict[str, ViewState] = {}
        self._tokens: dict[str, int] = {}
        self._dirty: set[str] = set()
        self._unsubscribers = [
            self._cache.subscribe(namespace, self._on_invalidate)
            for namespace in (*ENTITY_NAMESPACES.values(), WORKSPACES, EXCHANGE_RATES)
        ]

    @property
    def cache(self) -> QueryCache:
        return self._cache

    def state(self, view_key: str) -> ViewState | None:
        """Return the latest state of a keyed view, if it was requested."""
        return self._states.get(view_key)

    async def execute(
        self,
        view_key: str,
        kind: ViewKind,
        query: EntityQuery,
        display_currency: str | None = None,
    ) -> ReconciliationView | None:
        """Build the view for the latest request of a key.

        Args:
            view_key: Identifier of the consumer, for example a screen.
            kind: Entity kind to reconcile.
            query: Entity filter.
            display_currency: Optional target currency of totals.

        Returns:
            ReconciliationView | None: Built view, or None when a newer
            request for the same key superseded this one.
        """
        request = ViewRequest(
            kind=ViewKind(kind),
            query=query,
            display_currency=(
                normalize_currency(display_currency) or self._display_currency
            ),
        )
        token = self._tokens.get(view_key, 0) + 1
        self._tokens[view_key] = token
        self._dirty.discard(view_key)
        previous = self._states.get(view_key)
        self._states[view_key] = ViewState(
            status=ViewStatus.LOADING,
            request=request,
            view=previous.view if previous else None,
        )

        try:
            view = await self._build(request)
        except Exception as exc:
            if self._tokens.get(view_key) != token:
                return None
            self._logger.error(f"View {view_key} failed: {exc}")
            self._states[view_key] = replace(
                self._states[view_key], status=ViewStatus.FAILED, error=exc
            )
            raise

        if self._tokens.get(view_key) != token:
            self._logger.debug(f"Discarding superseded view result: {view_key}")
            return None

        status = ViewStatus.STALE if view_key in self._dirty else ViewStatus.READY
        self._states[view_key] = ViewState(status=status, request=request, view=view)
        self._logger.info(
            f"View {view_key} built: kind={request.kind.value}, "
            f"entries={len(view.entries)}"
        )
        return view

    def close(self) -> None:
        """Remove the cache subscriptions of this use case."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    async def _build(self, request: ViewRequest) -> ReconciliationView:
        entities, workspaces = await asyncio.gather(
            self._fetch_entities(request.kind, request.query),
            self._fetch_workspaces(),
        )
        pairs = required_pairs(
            (entity.currency for entity in entities),
            request.display_currency,
        )
        rates = await self._fetch_rates(pairs) if pairs else ()
        return build_view(
            request.kind,
            entities,
            embedded_links(request.kind, entities),
            workspaces,
            rates,
            request.display_currency,
            self._logger,
        )

    async def _fetch_entities(self, kind: ViewKind, query: EntityQuery):
        source = self._entity_sources[kind]

        async def fetch():
            return tuple(await source.fetch(query))

        return await self._cache.get_or_fetch((ENTITY_NAMESPACES[kind], query), fetch)

    async def _fetch_workspaces(self) -> tuple[Workspace, ...]:
        async def fetch():
            return tuple(await self._workspace_source.fetch())

        return await self._cache.get_or_fetch((WORKSPACES, None), fetch)

    async def _fetch_rates(self, pairs) -> tuple[ExchangeRate, ...]:
        async def fetch():
            return tuple(await self._rate_source.fetch(list(pairs)))

        return await self._cache.get_or_fetch((EXCHANGE_RATES, pairs), fetch)

    def _on_invalidate(self, namespace: str) -> None:
        for view_key, state in list(self._states.items()):
            if not self._depends_on(state.request.kind, namespace):
                continue
            if state.status is ViewStatus.READY:
                self._states[view_key] = replace(state, status=ViewStatus.STALE)
            elif state.status is ViewStatus.LOADING:
                self._dirty.add(view_key)

    @staticmethod
    def _depends_on(kind: ViewKind, namespace: str) -> bool:
        return namespace in (ENTITY_NAMESPACES[kind], WORKSPACES, EXCHANGE_RATES)


__all__ = [
    "GetReconciliationViewUseCase",
    "ViewRequest",
    "ViewState",
    "ViewStatus",
]
