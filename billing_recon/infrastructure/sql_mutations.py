"""SQLAlchemy-backed gateway writing link rows."""

import asyncio
from dataclasses import asdict

from sqlalchemy import Table, delete, insert, update

from billing_recon.application.ports.database import DatabaseEnginePort
from billing_recon.application.ports.mutations import (
    BillingLinkPayload,
    CostLinkPayload,
    LinkPayload,
    LinkSide,
    MutationGatewayPort,
    payload_side,
)
from billing_recon.infrastructure.logging.logger import get_app_logger
from billing_recon.infrastructure.schema import link_billing_report, link_cost_report

LINK_TABLES = {
    LinkSide.BILLING: link_billing_report,
    LinkSide.COST: link_cost_report,
}


class SqlAlchemyMutationGateway(MutationGatewayPort):
    """Mutation gateway backed by the reconciliation database."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the gateway.

        Args:
            db_port: Port providing access to the reconciliation engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    async def create_billing_link(self, payload: BillingLinkPayload) -> int:
        """Insert a ``link_billing_report`` row and return its id."""
        return await asyncio.to_thread(self._insert, link_billing_report, payload)

    async def create_cost_link(self, payload: CostLinkPayload) -> int:
        """Insert a ``link_cost_report`` row and return its id."""
        return await asyncio.to_thread(self._insert, link_cost_report, payload)

    async def edit_link(
        self,
        link_id: int,
        side: LinkSide,
        payload: LinkPayload,
    ) -> None:
        """Overwrite every column of a link with the payload values.

        Raises:
            ValueError: When the payload belongs to the other side.
            LookupError: When no link with that id exists.
        """
        side = LinkSide(side)
        if payload_side(payload) is not side:
            raise ValueError(
                f"{type(payload).__name__} cannot edit a {side.value} link"
            )
        await asyncio.to_thread(self._update, link_id, LINK_TABLES[side], payload)

    async def delete_link(self, link_id: int, side: LinkSide) -> None:
        """Delete a link row.

        Raises:
            LookupError: When no link with that id exists.
        """
        await asyncio.to_thread(self._delete, link_id, LinkSide(side))

    def _insert(self, table: Table, payload: LinkPayload) -> int:
        engine = self._db_port.get_engine()
        with engine.begin() as conn:
            result = conn.execute(insert(table).values(**asdict(payload)))
            link_id = result.inserted_primary_key[0]
        self._logger.info(f"Inserted {table.name} row {link_id}")
        return link_id

    def _update(self, link_id: int, table: Table, payload: LinkPayload) -> None:
        engine = self._db_port.get_engine()
        with engine.begin() as conn:
            result = conn.execute(
                update(table)
                .where(table.c.id == link_id)
                .values(**asdict(payload))
            )
            updated = result.rowcount
        if updated == 0:
            raise LookupError(f"{table.name} row {link_id} does not exist")
        self._logger.info(f"Updated {table.name} row {link_id}")

    def _delete(self, link_id: int, side: LinkSide) -> None:
        table = LINK_TABLES[side]
        engine = self._db_port.get_engine()
        with engine.begin() as conn:
            result = conn.execute(delete(table).where(table.c.id == link_id))
            deleted = result.rowcount
        if deleted == 0:
            raise LookupError(f"{table.name} row {link_id} does not exist")
        self._logger.info(f"Deleted {table.name} row {link_id}")


__all__ = ["SqlAlchemyMutationGateway", "LINK_TABLES"]
