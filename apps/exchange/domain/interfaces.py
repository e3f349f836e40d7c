from abc import ABC, abstractmethod
from decimal import Decimal


class BaseExchangeRateProvider(ABC):
    @abstractmethod
    def get_rate_table(self, base_currency: str) -> dict[str, Decimal] | None:
        """Return multipliers from base_currency to every currency the source knows, or None on failure."""
        pass
