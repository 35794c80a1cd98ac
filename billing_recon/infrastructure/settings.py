"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from billing_recon.domain.constants import DEFAULT_DISPLAY_CURRENCY
from billing_recon.domain.services import normalize_currency
from billing_recon.infrastructure.logging.logger import get_app_logger
from billing_recon.infrastructure.nbp_exchange import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
)

DEFAULT_RATES_TTL = 3600.0


@dataclass(frozen=True)
class ReconciliationSettings:
    """Settings of the reconciliation engine.

    Attributes:
        display_currency: Currency totals are approximated in.
        rates_base_url: Root URL of the NBP exchange rate API.
        rates_timeout: Timeout of exchange rate requests, in seconds.
        rates_ttl: Seconds fetched exchange rates stay cached.
    """

    display_currency: str = DEFAULT_DISPLAY_CURRENCY
    rates_base_url: str = DEFAULT_BASE_URL
    rates_timeout: float = DEFAULT_TIMEOUT
    rates_ttl: float = DEFAULT_RATES_TTL

    @classmethod
    def from_env(cls) -> "ReconciliationSettings":
        """Build settings from environment variables.

        Invalid values are replaced by defaults and reported as warnings.

        Returns:
            ReconciliationSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        display_currency = cls._parse_currency(
            os.getenv("RECON_DISPLAY_CURRENCY"), logger
        )
        base_url = (
            os.getenv("RECON_RATES_BASE_URL", "").strip() or DEFAULT_BASE_URL
        )
        timeout = cls._parse_seconds(
            "RECON_RATES_TIMEOUT",
            os.getenv("RECON_RATES_TIMEOUT"),
            DEFAULT_TIMEOUT,
            logger,
        )
        ttl = cls._parse_seconds(
            "RECON_RATES_TTL",
            os.getenv("RECON_RATES_TTL"),
            DEFAULT_RATES_TTL,
            logger,
        )
        return cls(
            display_currency=display_currency,
            rates_base_url=base_url,
            rates_timeout=timeout,
            rates_ttl=ttl,
        )

    @staticmethod
    def _parse_currency(raw: str | None, logger) -> str:
        if raw is None:
            return DEFAULT_DISPLAY_CURRENCY
        currency = normalize_currency(raw)
        if currency is None or len(currency) != 3 or not currency.isalpha():
            logger.warning(
                f"Invalid RECON_DISPLAY_CURRENCY '{raw}'. "
                f"Falling back to {DEFAULT_DISPLAY_CURRENCY}."
            )
            return DEFAULT_DISPLAY_CURRENCY
        return currency

    @staticmethod
    def _parse_seconds(
        name: str,
        raw: str | None,
        default: float,
        logger,
    ) -> float:
        if not raw:
            return default
        try:
            seconds = float(raw)
        except ValueError:
            seconds = 0.0
        if seconds <= 0:
            logger.warning(
                f"Invalid {name} '{raw}'. Falling back to {default} seconds."
            )
            return default
        return seconds


__all__ = ["ReconciliationSettings", "DEFAULT_RATES_TTL"]
