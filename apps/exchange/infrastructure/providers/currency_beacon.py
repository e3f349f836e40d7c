import logging
from decimal import Decimal

import requests

from core.settings import CURRENCY_BEACON_API_KEY, CURRENCY_BEACON_URL
from apps.exchange.domain.interfaces import BaseExchangeRateProvider

logger = logging.getLogger(__name__)


class CurrencyBeaconProvider(BaseExchangeRateProvider):
    """
    CurrencyBeacon API provider.
    Uses /latest endpoint to fetch today's rates for a base currency.
    """

    def get_rate_table(self, base_currency: str) -> dict[str, Decimal] | None:
        """
        Fetch latest exchange rates from CurrencyBeacon API.

        Args:
            base_currency: Base currency code (e.g. USD)

        Returns:
            Mapping of currency code to Decimal rate, or None if error occurs
        """
        if not CURRENCY_BEACON_API_KEY:
            logger.warning("CURRENCY_BEACON_API_KEY is not configured. Cannot fetch exchange rates.")
            return None

        # Format: https://api.currencybeacon.com/v1/latest?api_key=KEY&base=USD
        url = (
            f"{CURRENCY_BEACON_URL}/latest"
            f"?api_key={CURRENCY_BEACON_API_KEY}"
            f"&base={base_currency}"
        )

        try:
            response = requests.get(url, timeout=10)
            response.raise_for_status()
            data = response.json()

            # Response format: {"response": {"base": "USD", "rates": {"EUR": 0.85}}}
            rates = data["response"]["rates"]
            return {code.upper(): Decimal(str(rate)) for code, rate in rates.items()}

        except requests.exceptions.Timeout:
            logger.warning("Timeout calling CurrencyBeacon API for %s", base_currency)
            return None
        except requests.exceptions.HTTPError as e:
            logger.warning("HTTP error from CurrencyBeacon: %s", e)
            return None
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Invalid response from CurrencyBeacon: %s", e)
            return None
        except requests.exceptions.RequestException as e:
            logger.warning("Unexpected error calling CurrencyBeacon: %s", e)
            return None
