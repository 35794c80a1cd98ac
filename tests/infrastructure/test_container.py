"""Tests for the composition root."""

from unittest.mock import MagicMock

import pytest

from billing_recon.application.query_cache import QueryCache
from billing_recon.application.use_cases.get_reconciliation_view import (
    GetReconciliationViewUseCase,
)
from billing_recon.application.use_cases import manage_links
from billing_recon.application.use_cases.manage_links import LinkMutationUseCase
from billing_recon.infrastructure import container
from billing_recon.infrastructure.nbp_exchange import NbpExchangeRateSource
from billing_recon.infrastructure.settings import ReconciliationSettings
from billing_recon.infrastructure.sql_mutations import SqlAlchemyMutationGateway


@pytest.fixture(autouse=True)
def _quiet_logger(monkeypatch):
    monkeypatch.setattr(container, "get_app_logger", lambda: MagicMock())
    monkeypatch.setattr(manage_links, "get_usage_logger", lambda: MagicMock())


def test_build_rate_source_uses_settings() -> None:
    settings = ReconciliationSettings(
        rates_base_url="https://rates.local/api",
        rates_timeout=3.0,
    )

    source = container.build_rate_source(settings)

    assert isinstance(source, NbpExchangeRateSource)
    assert source._base_url == "https://rates.local/api"
    assert source._timeout == 3.0


def test_build_view_use_case_shares_given_cache() -> None:
    """The view and mutation use cases should share one cache."""
    db_port = MagicMock()
    cache = QueryCache(logger=MagicMock())

    view_use_case = container.build_view_use_case(
        db_port=db_port,
        cache=cache,
        settings=ReconciliationSettings(display_currency="EUR"),
    )
    mutation_use_case = container.build_link_mutation_use_case(
        cache=cache,
        db_port=db_port,
    )

    assert isinstance(view_use_case, GetReconciliationViewUseCase)
    assert isinstance(mutation_use_case, LinkMutationUseCase)
    assert view_use_case.cache is cache
    assert isinstance(mutation_use_case._gateway, SqlAlchemyMutationGateway)


def test_build_query_cache_expires_exchange_rates() -> None:
    cache = container.build_query_cache(ReconciliationSettings(rates_ttl=60.0))

    assert cache._ttls == {"exchange_rates": 60.0}
