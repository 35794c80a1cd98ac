"""SQLAlchemy-backed entity, workspace and link sources.

Queries run synchronously on a pooled connection inside a worker thread so
the asyncio loop stays responsive while the database answers.
"""

import asyncio
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import Date, bindparam, text
from sqlalchemy.engine import Connection

from billing_recon.application.ports.database import DatabaseEnginePort
from billing_recon.application.ports.sources import (
    BillingSourcePort,
    CostSourcePort,
    EntityQuery,
    ReportSourcePort,
    WorkspaceSourcePort,
)
from billing_recon.domain.models import (
    Billing,
    Cost,
    RawBillingReportLink,
    RawCostReportLink,
    Report,
    Workspace,
)
from billing_recon.domain.services import normalize_currency
from billing_recon.infrastructure.logging.logger import get_app_logger
from billing_recon.utils import (
    coerce_date,
    coerce_datetime,
    coerce_decimal,
    coerce_optional_decimal,
)

SELECT_WORKSPACES_SQL = text(
    """
    SELECT id, name, slug
    FROM workspaces
    ORDER BY id
    """
)

SELECT_REPORTS_SQL = """
SELECT r.id, r.workspace_id, r.contractor_id, r.client_id, r.net_value,
       r.currency, r.description, r.period_start, r.period_end,
       (SELECT p.id FROM reports p
        WHERE p.contractor_id = r.contractor_id
          AND p.workspace_id = r.workspace_id
          AND p.period_start < r.period_start
        ORDER BY p.period_start DESC, p.id DESC
        LIMIT 1) AS previous_report_id
FROM reports r
WHERE 1=1
"""

SELECT_PERIOD_ENDS_SQL = """
SELECT id, period_end
FROM reports
WHERE id IN :ids
"""

SELECT_BILLINGS_SQL = """
SELECT id, workspace_id, client_id, net_value, gross_value, currency,
       invoice_number, invoice_date, description
FROM billings
WHERE 1=1
"""

SELECT_COSTS_SQL = """
SELECT id, workspace_id, contractor_id, net_value, gross_value, currency,
       invoice_number, counterparty, invoice_date, description
FROM costs
WHERE 1=1
"""

SELECT_BILLING_LINKS_SQL = """
SELECT id, created_at, billing_id, report_id, billing_amount, report_amount,
       description
FROM link_billing_report
WHERE {column} IN :ids
ORDER BY id
"""

SELECT_COST_LINKS_SQL = """
SELECT id, created_at, cost_id, report_id, cost_amount, report_amount,
       description
FROM link_cost_report
WHERE {column} IN :ids
ORDER BY id
"""


class SqlAlchemyWorkspaceSource(WorkspaceSourcePort):
    """Workspace source backed by the reconciliation database."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        self._db_port = db_port

    async def fetch(self) -> list[Workspace]:
        """Return every workspace ordered by id."""
        return await asyncio.to_thread(self._fetch)

    def _fetch(self) -> list[Workspace]:
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_WORKSPACES_SQL).all()
        return [
            Workspace(id=row.id, name=row.name, slug=row.slug or "")
            for row in rows
        ]


class SqlAlchemyReportSource(ReportSourcePort):
    """Report source embedding billing and cost links."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the source.

        Args:
            db_port: Port providing access to the reconciliation engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    async def fetch(self, query: EntityQuery) -> list[Report]:
        """Return reports whose period starts within the query range."""
        return await asyncio.to_thread(self._fetch, query)

    def _fetch(self, query: EntityQuery) -> list[Report]:
        statement, params = _build_entity_query(
            SELECT_REPORTS_SQL, "period_start", query
        )
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            rows = conn.execute(statement, params).all()
            ids = [row.id for row in rows]
            billing_links = _group_links(
                _fetch_billing_links(conn, "report_id", ids), "report_id"
            )
            cost_links = _group_links(
                _fetch_cost_links(conn, "report_id", ids), "report_id"
            )
            previous_ends = _fetch_period_ends(
                conn,
                [row.previous_report_id for row in rows if row.previous_report_id],
            )
        self._logger.info(f"Fetched {len(rows)} reports")
        return [
            Report(
                id=row.id,
                workspace_id=row.workspace_id,
                net_value=coerce_decimal(row.net_value),
                currency=_currency(row.currency),
                contractor_id=row.contractor_id,
                client_id=row.client_id,
                description=row.description or "",
                period_start=coerce_date(row.period_start),
                period_end=coerce_date(row.period_end),
                billing_links=tuple(billing_links.get(row.id, ())),
                cost_links=tuple(cost_links.get(row.id, ())),
                previous_report_id=row.previous_report_id,
                previous_period_end=previous_ends.get(row.previous_report_id),
            )
            for row in rows
        ]


class SqlAlchemyBillingSource(BillingSourcePort):
    """Billing source embedding billing/report links."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    async def fetch(self, query: EntityQuery) -> list[Billing]:
        """Return billings invoiced within the query range."""
        return await asyncio.to_thread(self._fetch, query)

    def _fetch(self, query: EntityQuery) -> list[Billing]:
        statement, params = _build_entity_query(
            SELECT_BILLINGS_SQL, "invoice_date", query
        )
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            rows = conn.execute(statement, params).all()
            links = _group_links(
                _fetch_billing_links(conn, "billing_id", [row.id for row in rows]),
                "billing_id",
            )
        self._logger.info(f"Fetched {len(rows)} billings")
        return [
            Billing(
                id=row.id,
                workspace_id=row.workspace_id,
                net_value=coerce_decimal(row.net_value),
                currency=_currency(row.currency),
                gross_value=coerce_optional_decimal(row.gross_value),
                client_id=row.client_id,
                invoice_number=row.invoice_number or "",
                invoice_date=coerce_date(row.invoice_date),
                description=row.description,
                links=tuple(links.get(row.id, ())),
            )
            for row in rows
        ]


class SqlAlchemyCostSource(CostSourcePort):
    """Cost source embedding cost/report links."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    async def fetch(self, query: EntityQuery) -> list[Cost]:
        """Return costs invoiced within the query range."""
        return await asyncio.to_thread(self._fetch, query)

    def _fetch(self, query: EntityQuery) -> list[Cost]:
        statement, params = _build_entity_query(
            SELECT_COSTS_SQL, "invoice_date", query
        )
        engine = self._db_port.get_engine()
        with engine.connect() as conn:
            rows = conn.execute(statement, params).all()
            links = _group_links(
                _fetch_cost_links(conn, "cost_id", [row.id for row in rows]),
                "cost_id",
            )
        self._logger.info(f"Fetched {len(rows)} costs")
        return [
            Cost(
                id=row.id,
                workspace_id=row.workspace_id,
                net_value=coerce_decimal(row.net_value),
                currency=_currency(row.currency),
                gross_value=coerce_optional_decimal(row.gross_value),
                contractor_id=row.contractor_id,
                invoice_number=row.invoice_number,
                counterparty=row.counterparty,
                invoice_date=coerce_date(row.invoice_date),
                description=row.description,
                links=tuple(links.get(row.id, ())),
            )
            for row in rows
        ]


def _build_entity_query(base_sql: str, date_column: str, query: EntityQuery):
    """Append the query filters to an entity SELECT.

    Args:
        base_sql: SELECT ending with a ``WHERE 1=1`` clause.
        date_column: Column compared with the date bounds.
        query: Entity filter.

    Returns:
        tuple: Executable text clause and its parameters.
    """
    sql = base_sql
    params: dict[str, object] = {}
    binds = []
    if query.workspace_ids:
        sql += " AND workspace_id IN :workspace_ids"
        params["workspace_ids"] = list(query.workspace_ids)
        binds.append(bindparam("workspace_ids", expanding=True))
    if query.start_date:
        sql += f" AND {date_column} >= :start_date"
        params["start_date"] = query.start_date
        binds.append(bindparam("start_date", type_=Date))
    if query.end_date:
        sql += f" AND {date_column} <= :end_date"
        params["end_date"] = query.end_date
        binds.append(bindparam("end_date", type_=Date))
    sql += " ORDER BY id"
    return text(sql).bindparams(*binds), params


def _fetch_billing_links(
    conn: Connection,
    column: str,
    ids: Sequence[int],
) -> list[RawBillingReportLink]:
    if not ids:
        return []
    statement = text(SELECT_BILLING_LINKS_SQL.format(column=column)).bindparams(
        bindparam("ids", expanding=True)
    )
    rows = conn.execute(statement, {"ids": list(ids)}).all()
    return [
        RawBillingReportLink(
            id=row.id,
            created_at=coerce_datetime(row.created_at),
            billing_id=row.billing_id,
            report_id=row.report_id,
            billing_amount=coerce_optional_decimal(row.billing_amount),
            report_amount=coerce_optional_decimal(row.report_amount),
            description=row.description,
        )
        for row in rows
    ]


def _fetch_cost_links(
    conn: Connection,
    column: str,
    ids: Sequence[int],
) -> list[RawCostReportLink]:
    if not ids:
        return []
    statement = text(SELECT_COST_LINKS_SQL.format(column=column)).bindparams(
        bindparam("ids", expanding=True)
    )
    rows = conn.execute(statement, {"ids": list(ids)}).all()
    return [
        RawCostReportLink(
            id=row.id,
            created_at=coerce_datetime(row.created_at),
            cost_id=row.cost_id,
            report_id=row.report_id,
            cost_amount=coerce_optional_decimal(row.cost_amount),
            report_amount=coerce_optional_decimal(row.report_amount),
            description=row.description,
        )
        for row in rows
    ]


def _fetch_period_ends(
    conn: Connection,
    ids: Sequence[int],
) -> dict[int, date | None]:
    if not ids:
        return {}
    statement = text(SELECT_PERIOD_ENDS_SQL).bindparams(
        bindparam("ids", expanding=True)
    )
    rows = conn.execute(statement, {"ids": sorted(set(ids))}).all()
    return {row.id: coerce_date(row.period_end) for row in rows}


def _group_links(links: Iterable, key: str) -> dict[int, list]:
    grouped: dict[int, list] = defaultdict(list)
    for link in links:
        grouped[getattr(link, key)].append(link)
    return grouped


def _currency(value: str | None) -> str:
    currency = normalize_currency(value)
    if currency is None:
        raise ValueError("Entity row has no currency")
    return currency


__all__ = [
    "SqlAlchemyWorkspaceSource",
    "SqlAlchemyReportSource",
    "SqlAlchemyBillingSource",
    "SqlAlchemyCostSource",
]
