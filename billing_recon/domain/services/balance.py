"""Balance derivation for reports, billings and costs."""

from collections.abc import Callable, Iterable
from decimal import ROUND_HALF_UP, Decimal

from billing_recon.domain.constants import (
    CURRENCY_MINOR_UNITS,
    DEFAULT_MINOR_UNITS,
    ZERO,
)
from billing_recon.domain.models import (
    BalanceResult,
    Link,
    ReconciledEntity,
    Status,
)
from billing_recon.domain.services.normalization import normalize_currency


def compute_balance(
    entity: ReconciledEntity,
    links: Iterable[Link],
    extract_amount: Callable[[Link], Decimal],
) -> BalanceResult:
    """Compute matched and remaining amounts for one entity.

    The extractor picks the side of each link that belongs to the entity,
    which keeps this function independent of link direction. No rounding is
    applied here.

    Args:
        entity: Report, billing or cost being evaluated.
        links: Classified links attached to the entity.
        extract_amount: Returns the entity-side amount of a link.

    Returns:
        BalanceResult: Matched amount, remaining amount and status.
    """
    matched_amount = sum(
        (extract_amount(link) for link in links),
        ZERO,
    )
    remaining_amount = entity.net_value - matched_amount
    return BalanceResult(
        matched_amount=matched_amount,
        remaining_amount=remaining_amount,
        status=derive_status(matched_amount, remaining_amount),
    )


def derive_status(matched_amount: Decimal, remaining_amount: Decimal) -> Status:
    """Derive the balance status.

    Checks run in a fixed order so that a zero-value entity with no links
    is ``matched`` rather than ``unmatched``.

    Args:
        matched_amount: Sum of attributed link amounts.
        remaining_amount: Net value minus matched amount.

    Returns:
        Status: Derived status.
    """
    if remaining_amount == 0:
        return Status.MATCHED
    if remaining_amount > 0 and matched_amount > 0:
        return Status.PARTIALLY_MATCHED
    if remaining_amount > 0 and matched_amount == 0:
        return Status.UNMATCHED
    return Status.OVERMATCHED


def minor_unit_exponent(currency: str) -> Decimal:
    """Return the quantization exponent for a currency's minor unit.

    Args:
        currency: Currency code, case-insensitive.

    Returns:
        Decimal: Exponent such as ``Decimal("0.01")``.
    """
    code = normalize_currency(currency) or ""
    digits = CURRENCY_MINOR_UNITS.get(code, DEFAULT_MINOR_UNITS)
    return Decimal(1).scaleb(-digits)


def quantize_amount(value: Decimal, currency: str) -> Decimal:
    """Round an amount to the currency's minor unit (half up).

    Args:
        value: Amount to round.
        currency: Currency of the amount.

    Returns:
        Decimal: Rounded amount.
    """
    return value.quantize(minor_unit_exponent(currency), rounding=ROUND_HALF_UP)


__all__ = [
    "compute_balance",
    "derive_status",
    "minor_unit_exponent",
    "quantize_amount",
]
