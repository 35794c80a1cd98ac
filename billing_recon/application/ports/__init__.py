"""Application ports package."""

from .database import DatabaseEnginePort
from .mutations import (
    BillingLinkPayload,
    CostLinkPayload,
    LinkPayload,
    LinkSide,
    MutationCapability,
    MutationGatewayPort,
    payload_side,
)
from .sources import (
    BillingSourcePort,
    CostSourcePort,
    EntityQuery,
    ExchangeRateSourcePort,
    ReportSourcePort,
    WorkspaceSourcePort,
)

__all__ = [
    "DatabaseEnginePort",
    "BillingLinkPayload",
    "CostLinkPayload",
    "LinkPayload",
    "LinkSide",
    "MutationCapability",
    "MutationGatewayPort",
    "payload_side",
    "BillingSourcePort",
    "CostSourcePort",
    "EntityQuery",
    "ExchangeRateSourcePort",
    "ReportSourcePort",
    "WorkspaceSourcePort",
]
