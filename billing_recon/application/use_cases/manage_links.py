"""Use case creating, editing and deleting link records."""

from datetime import datetime, timezone
from decimal import Decimal

from billing_recon.application.ports.mutations import (
    BillingLinkPayload,
    CostLinkPayload,
    LinkPayload,
    LinkSide,
    MutationCapability,
    MutationGatewayPort,
    payload_side,
)
from billing_recon.application.query_cache import (
    BILLINGS,
    COSTS,
    REPORTS,
    QueryCache,
)
from billing_recon.domain.exceptions import InvalidLinkError, MutationRejected
from billing_recon.domain.models import (
    ClarifyBillingLink,
    ClarifyCostLink,
    ClarifyReportCostLink,
    ClarifyReportLink,
    CostReconcileLink,
    Link,
    RawBillingReportLink,
    RawCostReportLink,
    ReconcileLink,
)
from billing_recon.domain.services import classify_cost_link, classify_link
from billing_recon.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)

INVALIDATED_NAMESPACES = (REPORTS, BILLINGS, COSTS)


class LinkMutationUseCase:
    """Validate link mutations, forward them and refresh cached queries."""

    def __init__(
        self,
        gateway: MutationGatewayPort,
        cache: QueryCache,
        logger=None,
        usage_logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            gateway: Port writing link rows.
            cache: Query cache invalidated after successful mutations.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording user actions.
        """
        self._gateway = gateway
        self._cache = cache
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()

    async def create_billing_link(
        self,
        billing_id: int,
        report_id: int,
        billing_amount: Decimal,
        report_amount: Decimal,
        description: str = "",
    ) -> int:
        """Reconcile a report amount with a billing amount.

        Returns:
            int: Identifier of the created link.

        Raises:
            InvalidLinkError: When a reference or an amount is missing.
        """
        payload = BillingLinkPayload(
            billing_id=billing_id,
            report_id=report_id,
            billing_amount=billing_amount,
            report_amount=report_amount,
            description=description,
        )
        self._validate(payload, ReconcileLink)
        link_id = await self._gateway.create_billing_link(payload)
        self._after_write("create_billing_link", link_id, payload)
        return link_id

    async def create_cost_link(
        self,
        cost_id: int,
        report_id: int,
        cost_amount: Decimal,
        report_amount: Decimal,
        description: str = "",
    ) -> int:
        """Attribute a cost amount to a report amount.

        Returns:
            int: Identifier of the created link.
        """
        payload = CostLinkPayload(
            cost_id=cost_id,
            report_id=report_id,
            cost_amount=cost_amount,
            report_amount=report_amount,
            description=description,
        )
        self._validate(payload, CostReconcileLink)
        link_id = await self._gateway.create_cost_link(payload)
        self._after_write("create_cost_link", link_id, payload)
        return link_id

    async def clarify_billing(
        self,
        billing_id: int,
        billing_amount: Decimal,
        description: str,
    ) -> int:
        """Explain a billing amount that no report will ever match."""
        payload = BillingLinkPayload(
            billing_id=billing_id,
            billing_amount=billing_amount,
            description=description,
        )
        self._validate(payload, ClarifyBillingLink)
        link_id = await self._gateway.create_billing_link(payload)
        self._after_write("clarify_billing", link_id, payload)
        return link_id

    async def clarify_report(
        self,
        report_id: int,
        report_amount: Decimal,
        description: str,
        side: LinkSide = LinkSide.BILLING,
    ) -> int:
        """Explain a report amount that will never be billed or paid out.

        Args:
            report_id: Report being clarified.
            report_amount: Amount of the report covered by the explanation.
            description: Justification, must not be blank.
            side: ``billing`` to clarify the billed side, ``cost`` to clarify
                the compensated side.

        Returns:
            int: Identifier of the created link.
        """
        if LinkSide(side) is LinkSide.COST:
            payload: LinkPayload = CostLinkPayload(
                report_id=report_id,
                report_amount=report_amount,
                description=description,
            )
            self._validate(payload, ClarifyReportCostLink)
            link_id = await self._gateway.create_cost_link(payload)
        else:
            payload = BillingLinkPayload(
                report_id=report_id,
                report_amount=report_amount,
                description=description,
            )
            self._validate(payload, ClarifyReportLink)
            link_id = await self._gateway.create_billing_link(payload)
        self._after_write("clarify_report", link_id, payload)
        return link_id

    async def clarify_cost(
        self,
        cost_id: int,
        cost_amount: Decimal,
        description: str,
    ) -> int:
        """Explain a cost amount that is not attributed to any report."""
        payload = CostLinkPayload(
            cost_id=cost_id,
            cost_amount=cost_amount,
            description=description,
        )
        self._validate(payload, ClarifyCostLink)
        link_id = await self._gateway.create_cost_link(payload)
        self._after_write("clarify_cost", link_id, payload)
        return link_id

    async def edit_link(
        self,
        link_id: int,
        side: LinkSide,
        payload: LinkPayload,
    ) -> None:
        """Replace the values of an existing link after validating them.

        Args:
            link_id: Link to edit.
            side: Table the link lives in.
            payload: New column values; must belong to ``side``.

        Raises:
            InvalidLinkError: When the payload belongs to the other side or
                does not classify.
        """
        side = LinkSide(side)
        if payload_side(payload) is not side:
            raise InvalidLinkError(
                f"{type(payload).__name__} cannot edit a {side.value} link",
                link_id=link_id,
            )
        self._validate(payload, None, link_id)
        await self._gateway.edit_link(link_id, side, payload)
        self._after_write("edit_link", link_id, payload)

    async def delete_link(
        self,
        link_id: int,
        side: LinkSide,
        capability: MutationCapability | None = None,
    ) -> None:
        """Delete a link when the caller granted destructive access.

        Args:
            link_id: Link to delete.
            side: Table the link lives in.
            capability: Permissions granted for this call.

        Raises:
            MutationRejected: When destructive mutations are not allowed.
        """
        if capability is None or not capability.allow_destructive:
            self._logger.warning(f"Rejected deletion of link {link_id}")
            raise MutationRejected(
                "delete_link", "destructive mutations are not allowed"
            )
        await self._gateway.delete_link(link_id, LinkSide(side))
        self._after_write("delete_link", link_id, side)

    @staticmethod
    def _validate(
        payload: LinkPayload,
        expected: type | None,
        link_id: int = 0,
    ) -> Link:
        created_at = datetime.now(timezone.utc)
        if isinstance(payload, CostLinkPayload):
            link = classify_cost_link(
                RawCostReportLink(
                    id=link_id,
                    created_at=created_at,
                    cost_id=payload.cost_id,
                    report_id=payload.report_id,
                    cost_amount=payload.cost_amount,
                    report_amount=payload.report_amount,
                    description=payload.description,
                )
            )
        else:
            link = classify_link(
                RawBillingReportLink(
                    id=link_id,
                    created_at=created_at,
                    billing_id=payload.billing_id,
                    report_id=payload.report_id,
                    billing_amount=payload.billing_amount,
                    report_amount=payload.report_amount,
                    description=payload.description,
                )
            )
        if expected is not None and not isinstance(link, expected):
            raise InvalidLinkError(
                f"payload describes a {link.link_type} link, "
                f"expected {expected.__name__}",
                link_id=link_id or None,
            )
        return link

    def _after_write(self, action: str, link_id: int, detail) -> None:
        for namespace in INVALIDATED_NAMESPACES:
            self._cache.invalidate(namespace)
        self._usage_logger.info(f"{action}: link_id={link_id}, {detail}")


__all__ = ["LinkMutationUseCase"]
