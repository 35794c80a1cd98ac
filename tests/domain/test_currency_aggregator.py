"""Tests for multi-currency grouping and approximation."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from billing_recon.domain.models import CurrencyPair, CurrencyValue, ExchangeRate
from billing_recon.domain.services import (
    approximate,
    build_currency_value_group,
    build_rate_map,
    group_by_currency,
    required_pairs,
)


def test_group_by_currency_sums_case_insensitively() -> None:
    """Values are summed per upper-cased currency and sorted by code."""
    grouped = group_by_currency(
        [
            CurrencyValue(Decimal("10"), "usd"),
            CurrencyValue(Decimal("5"), "EUR"),
            CurrencyValue(Decimal("2.5"), "USD"),
        ]
    )

    assert grouped == (
        CurrencyValue(Decimal("5"), "EUR"),
        CurrencyValue(Decimal("12.5"), "USD"),
    )


def test_group_by_currency_of_nothing_is_empty() -> None:
    assert group_by_currency([]) == ()


def test_approximate_converts_with_rates() -> None:
    """Foreign values are multiplied by their rate into the target."""
    result = approximate(
        [
            CurrencyValue(Decimal("100"), "USD"),
            CurrencyValue(Decimal("50"), "EUR"),
        ],
        "USD",
        [ExchangeRate("EUR", "USD", Decimal("1.1"))],
    )

    assert result == CurrencyValue(Decimal("155.0"), "USD")


def test_approximate_missing_rate_returns_none_and_warns() -> None:
    """A missing rate yields no joint value and a logged warning."""
    logger = MagicMock()

    result = approximate(
        [
            CurrencyValue(Decimal("100"), "USD"),
            CurrencyValue(Decimal("50"), "GBP"),
        ],
        "USD",
        [],
        logger=logger,
    )

    assert result is None
    logger.warning.assert_called_once()
    assert "GBP" in logger.warning.call_args.args[0]


def test_approximate_single_target_value_is_returned_as_is() -> None:
    """A lone value already in the target currency needs no rates."""
    value = CurrencyValue(Decimal("42.10"), "PLN")

    assert approximate([value], "pln", []) == value


def test_same_currency_values_never_need_rates() -> None:
    """Same-currency conversion uses an implicit rate of one."""
    result = approximate(
        [CurrencyValue(Decimal("1"), "PLN"), CurrencyValue(Decimal("2"), "pln")],
        "PLN",
        [ExchangeRate("PLN", "PLN", Decimal("4"))],
    )

    assert result == CurrencyValue(Decimal("3"), "PLN")


def test_rate_map_skips_non_positive_rates() -> None:
    """Zero or negative rates are ignored with a warning."""
    logger = MagicMock()

    rate_map = build_rate_map(
        [
            ExchangeRate("EUR", "PLN", Decimal("0")),
            ExchangeRate("USD", "PLN", Decimal("4")),
        ],
        logger,
    )

    assert rate_map == {("USD", "PLN"): Decimal("4")}
    logger.warning.assert_called_once()


def test_currency_value_group_carries_both_views() -> None:
    """Groups keep per-currency values alongside the approximation."""
    group = build_currency_value_group(
        [
            CurrencyValue(Decimal("10"), "EUR"),
            CurrencyValue(Decimal("20"), "PLN"),
        ],
        "PLN",
        [ExchangeRate("EUR", "PLN", Decimal("4.3"))],
    )

    assert group.currencies == ("EUR", "PLN")
    assert group.target_currency == "PLN"
    assert group.is_approximated
    assert group.approximated_joint_value == CurrencyValue(Decimal("63"), "PLN")


def test_currency_value_group_without_rate_is_not_approximated() -> None:
    group = build_currency_value_group(
        [CurrencyValue(Decimal("10"), "EUR")], "PLN", []
    )

    assert group.values == (CurrencyValue(Decimal("10"), "EUR"),)
    assert group.approximated_joint_value is None
    assert not group.is_approximated


def test_required_pairs_are_deduplicated_and_skip_target() -> None:
    """Only distinct foreign currencies produce pairs."""
    pairs = required_pairs(["eur", "EUR", "PLN", "usd", ""], "pln")

    assert pairs == (CurrencyPair("EUR", "PLN"), CurrencyPair("USD", "PLN"))


def test_empty_target_currency_is_rejected() -> None:
    with pytest.raises(ValueError):
        approximate([], " ", [])
