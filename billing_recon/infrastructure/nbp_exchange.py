"""Exchange rate source backed by the National Bank of Poland API.

The NBP table A publishes mid rates of foreign currencies in PLN. A cross
rate is derived as ``mid(from) / mid(to)`` with PLN fixed at 1.
"""

import asyncio
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation

import httpx

from billing_recon.application.ports.sources import ExchangeRateSourcePort
from billing_recon.domain.models import CurrencyPair, ExchangeRate
from billing_recon.infrastructure.logging.logger import get_app_logger
from billing_recon.utils import coerce_decimal

DEFAULT_BASE_URL = "https://api.nbp.pl/api"
DEFAULT_TIMEOUT = 10.0
BASE_CURRENCY = "PLN"


class NbpExchangeRateSource(ExchangeRateSourcePort):
    """Exchange rate source querying NBP table A mid rates."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        logger=None,
    ) -> None:
        """Initialize the source.

        Args:
            base_url: API root, without a trailing slash.
            timeout: Request timeout in seconds.
            client: Optional shared client; a short-lived one is opened per
                fetch when omitted.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client
        self._logger = logger or get_app_logger()

    async def fetch(self, pairs: Sequence[CurrencyPair]) -> list[ExchangeRate]:
        """Return rates for the requested pairs.

        Pairs whose mid rates cannot be retrieved are logged and omitted.

        Args:
            pairs: Currency pairs to look up.

        Returns:
            list[ExchangeRate]: Rates in the order of the requested pairs.
        """
        if not pairs:
            return []
        codes = sorted(
            {pair.from_currency for pair in pairs}
            | {pair.to_currency for pair in pairs}
        )
        if self._client is not None:
            mids = await self._fetch_mids(self._client, codes)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                mids = await self._fetch_mids(client, codes)

        rates: list[ExchangeRate] = []
        for pair in pairs:
            from_mid = mids.get(pair.from_currency)
            to_mid = mids.get(pair.to_currency)
            if from_mid is None or to_mid is None:
                self._logger.warning(
                    "Omitting exchange rate "
                    f"{pair.from_currency}->{pair.to_currency}"
                )
                continue
            rates.append(
                ExchangeRate(
                    from_currency=pair.from_currency,
                    to_currency=pair.to_currency,
                    rate=from_mid / to_mid,
                )
            )
        return rates

    async def _fetch_mids(
        self,
        client: httpx.AsyncClient,
        codes: Sequence[str],
    ) -> dict[str, Decimal]:
        results = await asyncio.gather(
            *(self._fetch_mid(client, code) for code in codes)
        )
        return {
            code: mid for code, mid in zip(codes, results) if mid is not None
        }

    async def _fetch_mid(
        self,
        client: httpx.AsyncClient,
        code: str,
    ) -> Decimal | None:
        """Return the PLN mid rate of a currency, or None on failure."""
        if code == BASE_CURRENCY:
            return Decimal("1")
        url = f"{self._base_url}/exchangerates/rates/a/{code}"
        try:
            response = await client.get(
                url,
                params={"format": "json"},
                timeout=self._timeout,
            )
            response.raise_for_status()
            mid = coerce_decimal(response.json()["rates"][0]["mid"])
        except httpx.HTTPError as exc:
            self._logger.warning(f"NBP request for {code} failed: {exc}")
            return None
        except (KeyError, IndexError, TypeError, ValueError, InvalidOperation) as exc:
            self._logger.warning(f"Unexpected NBP payload for {code}: {exc}")
            return None
        if mid <= 0:
            self._logger.warning(f"Ignoring non-positive NBP mid for {code}")
            return None
        return mid


__all__ = ["NbpExchangeRateSource", "DEFAULT_BASE_URL", "DEFAULT_TIMEOUT"]
