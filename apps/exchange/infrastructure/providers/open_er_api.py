import logging
from decimal import Decimal

import requests

from core.settings import OPEN_ER_API_URL
from apps.exchange.domain.interfaces import BaseExchangeRateProvider

logger = logging.getLogger(__name__)


class OpenExchangeRateProvider(BaseExchangeRateProvider):
    """
    Free ExchangeRate API provider (open access, no key).
    Uses /latest/{base} which returns every rate for the base, updated daily.
    """

    def get_rate_table(self, base_currency: str) -> dict[str, Decimal] | None:
        """
        Fetch the latest rate table for a base currency.

        Args:
            base_currency: Base currency code (e.g. SAR)

        Returns:
            Mapping of currency code to Decimal rate, or None if error occurs
        """
        # Format: https://open.er-api.com/v6/latest/SAR
        url = f"{OPEN_ER_API_URL}/latest/{base_currency}"

        try:
            response = requests.get(url, timeout=10)
            response.raise_for_status()
            data = response.json()

            # Response format: {"result": "success", "base_code": "SAR", "rates": {"USD": 0.2666}}
            if data.get("result") != "success":
                logger.warning("Open ExchangeRate API error for %s: %s", base_currency, data.get("error-type", data.get("result")))
                return None

            return {code.upper(): Decimal(str(rate)) for code, rate in data["rates"].items()}

        except requests.exceptions.Timeout:
            logger.warning("Timeout calling Open ExchangeRate API for %s", base_currency)
            return None
        except requests.exceptions.HTTPError as e:
            logger.warning("HTTP error from Open ExchangeRate API: %s", e)
            return None
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Invalid response from Open ExchangeRate API: %s", e)
            return None
        except requests.exceptions.RequestException as e:
            logger.warning("Unexpected error calling Open ExchangeRate API: %s", e)
            return None
