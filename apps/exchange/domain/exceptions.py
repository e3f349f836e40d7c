"""
Domain errors for the exchange bounded context.
"""


class ExchangeError(Exception):
    """Base class for exchange errors."""


class UnknownCurrencyError(ExchangeError):
    """The currency code is not in the catalog, or no rate exists for it."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Currency {code} is not supported")


class RateSourceUnavailable(ExchangeError):
    """No provider answered and no stored snapshot exists for the base."""

    def __init__(self, base: str):
        self.base = base
        super().__init__(f"Exchange rates for {base} are unavailable")
