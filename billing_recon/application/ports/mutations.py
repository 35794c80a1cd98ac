"""Ports for writing link records."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Protocol


class LinkSide(str, Enum):
    """Link table a mutation targets."""

    BILLING = "billing"
    COST = "cost"


@dataclass(frozen=True)
class BillingLinkPayload:
    """Column values of a billing/report link row."""

    billing_id: int | None = None
    report_id: int | None = None
    billing_amount: Decimal | None = None
    report_amount: Decimal | None = None
    description: str | None = None


@dataclass(frozen=True)
class CostLinkPayload:
    """Column values of a cost/report link row."""

    cost_id: int | None = None
    report_id: int | None = None
    cost_amount: Decimal | None = None
    report_amount: Decimal | None = None
    description: str | None = None


LinkPayload = BillingLinkPayload | CostLinkPayload


def payload_side(payload: LinkPayload) -> LinkSide:
    """Return the link table a payload belongs to."""
    if isinstance(payload, CostLinkPayload):
        return LinkSide.COST
    return LinkSide.BILLING


@dataclass(frozen=True)
class MutationCapability:
    """Permissions granted by the caller for a single mutation.

    Attributes:
        allow_destructive: Whether irreversible operations such as link
            deletion may run.
    """

    allow_destructive: bool = False


class MutationGatewayPort(Protocol):
    """Port exposing write access to link storage."""

    async def create_billing_link(self, payload: BillingLinkPayload) -> int:
        """Insert a billing/report link and return its id."""

    async def create_cost_link(self, payload: CostLinkPayload) -> int:
        """Insert a cost/report link and return its id."""

    async def edit_link(
        self,
        link_id: int,
        side: LinkSide,
        payload: LinkPayload,
    ) -> None:
        """Replace the column values of an existing link of the given side."""

    async def delete_link(self, link_id: int, side: LinkSide) -> None:
        """Delete a link from the table of the given side."""


__all__ = [
    "LinkSide",
    "BillingLinkPayload",
    "CostLinkPayload",
    "LinkPayload",
    "payload_side",
    "MutationCapability",
    "MutationGatewayPort",
]
