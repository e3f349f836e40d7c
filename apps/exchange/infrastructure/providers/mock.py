"""
Mock provider for testing and fallback.
Generates random but realistic exchange rates.
"""

import logging
import random
from decimal import Decimal
from datetime import date

from apps.exchange.domain.interfaces import BaseExchangeRateProvider

logger = logging.getLogger(__name__)


class MockProvider(BaseExchangeRateProvider):
    """
    Mock provider that generates random exchange rates.
    Useful for:
    - Testing without external API calls
    - Fallback when all real providers fail
    - Development without API keys
    """

    # Base rates relative to USD (approximate real-world values)
    BASE_RATES = {
        "USD": Decimal("1.0"),
        "SAR": Decimal("3.75"),
        "AED": Decimal("3.6725"),
        "KWD": Decimal("0.307"),
        "QAR": Decimal("3.64"),
        "EGP": Decimal("48.5"),
        "EUR": Decimal("0.92"),
        "GBP": Decimal("0.79"),
    }

    def get_rate_table(self, base_currency: str, valuation_date: date | None = None) -> dict[str, Decimal] | None:
        """
        Generate a mock rate table with small random variation.

        Args:
            base_currency: Base currency code
            valuation_date: Date used for seeding randomness (defaults to today)

        Returns:
            Mapping of currency code to mock Decimal rate, or None for unknown bases
        """
        source_rate = self.BASE_RATES.get(base_currency)
        if source_rate is None:
            logger.warning("MockProvider: Unsupported base currency %s", base_currency)
            return None

        if valuation_date is None:
            valuation_date = date.today()

        # Use base and date as seed for reproducibility
        rng = random.Random(f"{base_currency}{valuation_date}")

        table = {}
        for code, target_rate in self.BASE_RATES.items():
            if code == base_currency:
                table[code] = Decimal("1")
                continue
            # Cross rate with small random variation (±2%)
            variation = Decimal(str(rng.uniform(0.98, 1.02)))
            table[code] = (target_rate / source_rate * variation).quantize(Decimal("0.000001"))

        return table
