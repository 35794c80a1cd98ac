"""CLI adapter printing a reconciliation view.

The view kind, workspace filter and date range are read from environment
variables so the command can run unattended, for example from cron.
"""

import asyncio
from datetime import date
import os

from billing_recon.application.ports.sources import EntityQuery
from billing_recon.domain.exceptions import ReconciliationError
from billing_recon.domain.models import (
    CurrencyValueGroup,
    ReconciliationView,
    ViewKind,
)
from billing_recon.infrastructure.container import build_view_use_case
from billing_recon.infrastructure.logging.logger import get_app_logger
from billing_recon.infrastructure.settings import ReconciliationSettings

CLI_VIEW_KEY = "cli"


def _parse_date(value: str | None, logger) -> date | None:
    """Parse an ISO date string into a date.

    Args:
        value: Date string in YYYY-MM-DD format.
        logger: Logger used for warnings.

    Returns:
        date | None: Parsed date or None when invalid.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        )
        return None


def _parse_workspace_ids(value: str | None, logger) -> tuple[int, ...]:
    """Parse a comma-separated list of workspace ids, skipping bad items."""
    if not value:
        return ()
    ids: list[int] = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            ids.append(int(item))
        except ValueError:
            logger.warning(f"Ignoring invalid workspace id '{item}'.")
    return tuple(ids)


def _parse_kind(value: str | None, logger) -> ViewKind | None:
    raw = (value or ViewKind.REPORT.value).strip().lower()
    try:
        return ViewKind(raw)
    except ValueError:
        logger.warning(
            f"Invalid view kind '{raw}'. Expected report, billing or cost."
        )
        return None


def format_group(group: CurrencyValueGroup) -> str:
    """Render a currency group as ``100 EUR + 50 USD ~ 640.00 PLN``."""
    values = " + ".join(
        f"{value.amount} {value.currency}" for value in group.values
    )
    joint = group.approximated_joint_value
    approximation = (
        f"{joint.amount:.2f} {joint.currency}"
        if joint is not None
        else f"n/a {group.target_currency}"
    )
    return f"{values or '0'} ~ {approximation}"


def print_view(view: ReconciliationView) -> None:
    """Print entries followed by the totals of a view."""
    print(
        f"Reconciliation view (kind={view.kind.value}, "
        f"currency={view.display_currency}, entries={len(view.entries)})"
    )
    for entry in view.entries:
        clarified = " clarified" if entry.clarified else ""
        earnings = (
            f" instant={entry.earnings.instant.value}"
            f" deferred={entry.earnings.deferred.value}"
            if entry.earnings is not None
            else ""
        )
        print(
            f"{entry.kind.value} #{entry.entity_id} [{entry.workspace.name}] "
            f"net={entry.net_value.amount} {entry.net_value.currency} "
            f"matched={entry.matched_amount.amount} "
            f"remaining={entry.remaining_amount.amount} "
            f"status={entry.status.value}{clarified}{earnings}"
        )
    for name, group in view.totals.items():
        print(f"{name}: {format_group(group)}")


def main() -> None:
    """Build and print the configured reconciliation view."""
    logger = get_app_logger()
    settings = ReconciliationSettings.from_env()
    kind = _parse_kind(os.getenv("RECON_VIEW_KIND"), logger)
    if kind is None:
        return
    query = EntityQuery(
        workspace_ids=_parse_workspace_ids(
            os.getenv("RECON_WORKSPACE_IDS"), logger
        ),
        start_date=_parse_date(os.getenv("RECON_START_DATE"), logger),
        end_date=_parse_date(os.getenv("RECON_END_DATE"), logger),
    )

    try:
        use_case = build_view_use_case(settings=settings)
        view = asyncio.run(
            use_case.execute(
                CLI_VIEW_KEY,
                kind,
                query,
                settings.display_currency,
            )
        )
    except (ReconciliationError, RuntimeError) as exc:
        logger.error(str(exc))
        return
    if view is None:
        logger.warning("Reconciliation view was superseded.")
        return
    print_view(view)


if __name__ == "__main__":  # pragma: no cover
    main()
