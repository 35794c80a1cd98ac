"""Domain models for monetary values and exchange rates."""

from dataclasses import dataclass
from decimal import Decimal


def _normalize_code(currency: str) -> str:
    cleaned = (currency or "").strip().upper()
    if not cleaned:
        raise ValueError("Currency code must not be empty")
    return cleaned


@dataclass(frozen=True)
class CurrencyValue:
    """Amount expressed in a single currency.

    Attributes:
        amount: Decimal amount.
        currency: Upper-cased currency code.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "currency", _normalize_code(self.currency))


@dataclass(frozen=True)
class CurrencyPair:
    """Direction of a requested exchange rate."""

    from_currency: str
    to_currency: str

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "from_currency", _normalize_code(self.from_currency)
        )
        object.__setattr__(
            self, "to_currency", _normalize_code(self.to_currency)
        )


@dataclass(frozen=True)
class ExchangeRate:
    """Rate converting one unit of ``from_currency`` into ``to_currency``."""

    from_currency: str
    to_currency: str
    rate: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "from_currency", _normalize_code(self.from_currency)
        )
        object.__setattr__(
            self, "to_currency", _normalize_code(self.to_currency)
        )

    @property
    def pair(self) -> CurrencyPair:
        return CurrencyPair(self.from_currency, self.to_currency)


@dataclass(frozen=True)
class CurrencyValueGroup:
    """Per-currency totals plus an approximated single-currency figure.

    Attributes:
        values: One summed value per distinct currency.
        target_currency: Currency of the approximated joint value.
        approximated_joint_value: Joint total in the target currency, or
            None when a required exchange rate is unavailable.
    """

    values: tuple[CurrencyValue, ...]
    target_currency: str
    approximated_joint_value: CurrencyValue | None

    @property
    def is_approximated(self) -> bool:
        return self.approximated_joint_value is not None

    @property
    def currencies(self) -> tuple[str, ...]:
        return tuple(value.currency for value in self.values)


__all__ = [
    "CurrencyValue",
    "CurrencyPair",
    "ExchangeRate",
    "CurrencyValueGroup",
]
