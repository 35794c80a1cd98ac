"""Composition root for wiring infrastructure adapters."""

from billing_recon.application.ports.database import DatabaseEnginePort
from billing_recon.application.ports.mutations import MutationGatewayPort
from billing_recon.application.ports.sources import ExchangeRateSourcePort
from billing_recon.application.query_cache import EXCHANGE_RATES, QueryCache
from billing_recon.application.use_cases.get_reconciliation_view import (
    GetReconciliationViewUseCase,
)
from billing_recon.application.use_cases.manage_links import (
    LinkMutationUseCase,
)
from billing_recon.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from billing_recon.infrastructure.logging.logger import get_app_logger
from billing_recon.infrastructure.nbp_exchange import NbpExchangeRateSource
from billing_recon.infrastructure.settings import ReconciliationSettings
from billing_recon.infrastructure.sql_mutations import (
    SqlAlchemyMutationGateway,
)
from billing_recon.infrastructure.sql_sources import (
    SqlAlchemyBillingSource,
    SqlAlchemyCostSource,
    SqlAlchemyReportSource,
    SqlAlchemyWorkspaceSource,
)


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_rate_source(
    settings: ReconciliationSettings | None = None,
) -> ExchangeRateSourcePort:
    """Return the configured exchange rate source."""
    resolved = settings or ReconciliationSettings.from_env()
    return NbpExchangeRateSource(
        base_url=resolved.rates_base_url,
        timeout=resolved.rates_timeout,
        logger=get_app_logger(),
    )


def build_mutation_gateway(
    db_port: DatabaseEnginePort | None = None,
) -> MutationGatewayPort:
    """Return the SQL mutation gateway."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyMutationGateway(resolved_db, logger=get_app_logger())


def build_query_cache(
    settings: ReconciliationSettings | None = None,
) -> QueryCache:
    """Return a query cache expiring exchange rates after the configured TTL."""
    resolved = settings or ReconciliationSettings.from_env()
    return QueryCache(
        logger=get_app_logger(),
        ttls={EXCHANGE_RATES: resolved.rates_ttl},
    )


def build_view_use_case(
    db_port: DatabaseEnginePort | None = None,
    cache: QueryCache | None = None,
    settings: ReconciliationSettings | None = None,
) -> GetReconciliationViewUseCase:
    """Return the reconciliation view use case wired to SQL and NBP."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or ReconciliationSettings.from_env()
    logger = get_app_logger()
    return GetReconciliationViewUseCase(
        report_source=SqlAlchemyReportSource(resolved_db, logger=logger),
        billing_source=SqlAlchemyBillingSource(resolved_db, logger=logger),
        cost_source=SqlAlchemyCostSource(resolved_db, logger=logger),
        workspace_source=SqlAlchemyWorkspaceSource(resolved_db),
        rate_source=build_rate_source(resolved_settings),
        cache=cache or build_query_cache(resolved_settings),
        logger=logger,
        display_currency=resolved_settings.display_currency,
    )


def build_link_mutation_use_case(
    cache: QueryCache,
    db_port: DatabaseEnginePort | None = None,
) -> LinkMutationUseCase:
    """Return the link mutation use case sharing the given cache."""
    return LinkMutationUseCase(
        gateway=build_mutation_gateway(db_port),
        cache=cache,
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_rate_source",
    "build_mutation_gateway",
    "build_query_cache",
    "build_view_use_case",
    "build_link_mutation_use_case",
]
