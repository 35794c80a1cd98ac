"""Multi-currency grouping and approximation into a display currency."""

from collections.abc import Iterable
from decimal import Decimal
from logging import Logger

from billing_recon.domain.constants import ZERO
from billing_recon.domain.models import (
    CurrencyPair,
    CurrencyValue,
    CurrencyValueGroup,
    ExchangeRate,
)
from billing_recon.domain.services.normalization import normalize_currency


def group_by_currency(
    values: Iterable[CurrencyValue],
) -> tuple[CurrencyValue, ...]:
    """Sum values per currency.

    Args:
        values: Values in any currencies.

    Returns:
        tuple[CurrencyValue, ...]: One summed value per currency, ordered by
        currency code.
    """
    totals: dict[str, Decimal] = {}
    for value in values:
        totals[value.currency] = totals.get(value.currency, ZERO) + value.amount
    return tuple(
        CurrencyValue(amount=amount, currency=currency)
        for currency, amount in sorted(totals.items())
    )


def build_rate_map(
    rates: Iterable[ExchangeRate],
    logger: Logger | None = None,
) -> dict[tuple[str, str], Decimal]:
    """Index exchange rates by ``(from, to)``.

    Args:
        rates: Rates returned by the exchange rate source.
        logger: Optional logger used for warnings.

    Returns:
        dict[tuple[str, str], Decimal]: Rate per currency pair.
    """
    rate_map: dict[tuple[str, str], Decimal] = {}
    for rate in rates:
        if rate.rate <= 0:
            if logger is not None:
                logger.warning(
                    "Skipping non-positive FX rate "
                    f"{rate.from_currency}->{rate.to_currency}: {rate.rate}"
                )
            continue
        rate_map.setdefault((rate.from_currency, rate.to_currency), rate.rate)
    return rate_map


def approximate(
    values: Iterable[CurrencyValue],
    target_currency: str,
    rates: Iterable[ExchangeRate],
    logger: Logger | None = None,
) -> CurrencyValue | None:
    """Approximate a multi-currency total in the target currency.

    Args:
        values: Values to convert and sum.
        target_currency: Currency of the result.
        rates: Available exchange rates.
        logger: Optional logger used for warnings.

    Returns:
        CurrencyValue | None: Joint value, or None when any required rate is
        missing.
    """
    target = _require_currency(target_currency)
    grouped = group_by_currency(values)
    if len(grouped) == 1 and grouped[0].currency == target:
        return grouped[0]

    rate_map = build_rate_map(rates, logger)
    total = ZERO
    for value in grouped:
        rate = _rate_for(value.currency, target, rate_map)
        if rate is None:
            if logger is not None:
                logger.warning(
                    f"Missing FX rate for {value.currency} to {target}"
                )
            return None
        total += value.amount * rate
    return CurrencyValue(amount=total, currency=target)


def build_currency_value_group(
    values: Iterable[CurrencyValue],
    target_currency: str,
    rates: Iterable[ExchangeRate],
    logger: Logger | None = None,
) -> CurrencyValueGroup:
    """Group values per currency and attach the approximated joint value.

    Args:
        values: Values in any currencies.
        target_currency: Currency of the approximated joint value.
        rates: Available exchange rates.
        logger: Optional logger used for warnings.

    Returns:
        CurrencyValueGroup: Per-currency values plus the joint value.
    """
    grouped = group_by_currency(values)
    target = _require_currency(target_currency)
    return CurrencyValueGroup(
        values=grouped,
        target_currency=target,
        approximated_joint_value=approximate(grouped, target, rates, logger),
    )


def required_pairs(
    currencies: Iterable[str],
    target_currency: str,
) -> tuple[CurrencyPair, ...]:
    """Return the deduplicated rate pairs needed to reach the target.

    Args:
        currencies: Source currencies, case-insensitive.
        target_currency: Currency to convert into.

    Returns:
        tuple[CurrencyPair, ...]: Pairs ordered by source currency, without
        same-currency pairs.
    """
    target = _require_currency(target_currency)
    codes = {
        code
        for code in (normalize_currency(currency) for currency in currencies)
        if code and code != target
    }
    return tuple(CurrencyPair(code, target) for code in sorted(codes))


def _rate_for(
    source: str,
    target: str,
    rate_map: dict[tuple[str, str], Decimal],
) -> Decimal | None:
    if source == target:
        return Decimal("1")
    return rate_map.get((source, target))


def _require_currency(currency: str) -> str:
    code = normalize_currency(currency)
    if code is None:
        raise ValueError("Target currency must not be empty")
    return code


__all__ = [
    "group_by_currency",
    "build_rate_map",
    "approximate",
    "build_currency_value_group",
    "required_pairs",
]
