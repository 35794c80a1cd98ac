"""Tests for the reconciliation CLI adapter."""

from datetime import date
from decimal import Decimal

import pytest

from billing_recon.adapters import reconciliation_cli
from billing_recon.domain.exceptions import MissingWorkspaceError
from billing_recon.domain.models import (
    Billing,
    CurrencyValue,
    CurrencyValueGroup,
    ExchangeRate,
    ViewKind,
    Workspace,
)
from billing_recon.domain.services import build_view
from billing_recon.infrastructure.settings import ReconciliationSettings


class _Logger:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def warning(self, msg: str) -> None:
        self.messages.append(msg)

    def info(self, msg: str) -> None:
        self.messages.append(msg)

    def error(self, msg: str) -> None:
        self.messages.append(msg)


class _UseCase:
    def __init__(self, view) -> None:
        self.view = view
        self.calls = []

    async def execute(self, view_key, kind, query, display_currency=None):
        self.calls.append((view_key, kind, query, display_currency))
        return self.view


def _view():
    billings = [
        Billing(id=1, workspace_id=1, net_value=Decimal("100"), currency="EUR"),
    ]
    return build_view(
        ViewKind.BILLING,
        billings,
        [],
        [Workspace(id=1, name="Main")],
        [ExchangeRate("EUR", "PLN", Decimal("4.25"))],
        "PLN",
    )


def test_main_builds_query_from_environment(monkeypatch, capsys) -> None:
    """The CLI should pass parsed filters to the use case and print the view."""
    logger = _Logger()
    use_case = _UseCase(_view())
    monkeypatch.setenv("RECON_VIEW_KIND", "Billing")
    monkeypatch.setenv("RECON_WORKSPACE_IDS", "1, 2,x")
    monkeypatch.setenv("RECON_START_DATE", "2024-01-01")
    monkeypatch.setenv("RECON_END_DATE", "not-a-date")
    monkeypatch.setattr(reconciliation_cli, "get_app_logger", lambda: logger)
    monkeypatch.setattr(
        reconciliation_cli.ReconciliationSettings,
        "from_env",
        classmethod(lambda cls: ReconciliationSettings()),
    )
    monkeypatch.setattr(
        reconciliation_cli,
        "build_view_use_case",
        lambda settings=None: use_case,
    )

    reconciliation_cli.main()

    view_key, kind, query, currency = use_case.calls[0]
    assert view_key == "cli"
    assert kind is ViewKind.BILLING
    assert query.workspace_ids == (1, 2)
    assert query.start_date == date(2024, 1, 1)
    assert query.end_date is None
    assert currency == "PLN"
    assert len(logger.messages) == 2
    output = capsys.readouterr().out
    assert "billing #1 [Main]" in output
    assert "status=unmatched" in output
    assert "net: 100.00 EUR ~ 425.00 PLN" in output


def test_main_stops_on_invalid_kind(monkeypatch, capsys) -> None:
    logger = _Logger()
    monkeypatch.setenv("RECON_VIEW_KIND", "invoices")
    monkeypatch.setattr(reconciliation_cli, "get_app_logger", lambda: logger)
    monkeypatch.setattr(
        reconciliation_cli.ReconciliationSettings,
        "from_env",
        classmethod(lambda cls: ReconciliationSettings()),
    )

    def _unexpected(settings=None):
        raise AssertionError("use case should not be built")

    monkeypatch.setattr(reconciliation_cli, "build_view_use_case", _unexpected)

    reconciliation_cli.main()

    assert capsys.readouterr().out == ""
    assert "invoices" in logger.messages[0]


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (MissingWorkspaceError(1, 9), "Workspace 9 is missing for entity 1"),
        (RuntimeError("RECON_DB_URL is not set"), "RECON_DB_URL is not set"),
    ],
)
def test_main_logs_build_failures(monkeypatch, capsys, error, message) -> None:
    """Build failures are logged instead of escaping as tracebacks."""
    logger = _Logger()

    class _FailingUseCase:
        async def execute(self, *args, **kwargs):
            raise error

    monkeypatch.delenv("RECON_VIEW_KIND", raising=False)
    monkeypatch.delenv("RECON_WORKSPACE_IDS", raising=False)
    monkeypatch.delenv("RECON_START_DATE", raising=False)
    monkeypatch.delenv("RECON_END_DATE", raising=False)
    monkeypatch.setattr(reconciliation_cli, "get_app_logger", lambda: logger)
    monkeypatch.setattr(
        reconciliation_cli.ReconciliationSettings,
        "from_env",
        classmethod(lambda cls: ReconciliationSettings()),
    )
    monkeypatch.setattr(
        reconciliation_cli,
        "build_view_use_case",
        lambda settings=None: _FailingUseCase(),
    )

    reconciliation_cli.main()

    assert capsys.readouterr().out == ""
    assert logger.messages == [message]


def test_format_group_without_approximation() -> None:
    group = CurrencyValueGroup(
        values=(
            CurrencyValue(Decimal("1"), "EUR"),
            CurrencyValue(Decimal("2"), "USD"),
        ),
        target_currency="PLN",
        approximated_joint_value=None,
    )

    assert reconciliation_cli.format_group(group) == "1 EUR + 2 USD ~ n/a PLN"
