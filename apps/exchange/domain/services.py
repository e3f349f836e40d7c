"""
Domain services - Core business logic.
Implements the fallback chain pattern for exchange rate providers.
"""

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Iterable

from django.core.cache import cache
from django.db import DatabaseError

from core.settings import EXCHANGE_RATE_CACHE_TTL
from apps.exchange.domain.exceptions import RateSourceUnavailable, UnknownCurrencyError
from apps.exchange.domain.models import ExchangeRateTable, LookupStatus, RateLookup
from apps.exchange.infrastructure.persistence.repositories import (
    CurrencyExchangeRateRepository,
    CurrencyRepository,
)
from apps.exchange.infrastructure.providers.registry import get_active_providers_ordered

logger = logging.getLogger(__name__)


def _normalize(code: str) -> str:
    return (code or "").strip().upper()


def _as_decimal(amount) -> Decimal:
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


class ExchangeRateService:
    """
    Domain service that handles rate tables and conversions with a fallback mechanism.

    Fallback strategy for a base currency:
    1. Serve the cached table if it has not expired
    2. Otherwise query providers in priority order
    3. If a provider fails, try the next one
    4. Cache and persist the first successful table
    5. If all providers fail, serve the last stored snapshot marked stale
    6. Raise RateSourceUnavailable if there is no snapshot either
    """

    @staticmethod
    def cache_key(base_currency_code: str) -> str:
        return f"exchange:rates:{_normalize(base_currency_code)}"

    @staticmethod
    def get_rates(base_currency_code: str, use_cache: bool = True) -> ExchangeRateTable:
        """
        Get the rate table for a base currency.

        Args:
            base_currency_code: Base currency (e.g. "SAR")
            use_cache: Set to False to force a provider round-trip

        Returns:
            ExchangeRateTable restricted to catalog currencies, base included at 1

        Raises:
            UnknownCurrencyError: base is not in the currency catalog
            RateSourceUnavailable: no provider answered and nothing is stored

        Example:
            >>> table = ExchangeRateService.get_rates("SAR")
            >>> table.rate_for("USD")
            Decimal('0.266667')
        """
        base = _normalize(base_currency_code)
        base_currency = CurrencyRepository.get_by_code(base)
        if base_currency is None:
            raise UnknownCurrencyError(base)

        key = ExchangeRateService.cache_key(base)
        if use_cache:
            cached = cache.get(key)
            if cached is not None:
                logger.debug("Rate table for %s served from cache", base)
                return cached

        supported = CurrencyRepository.get_codes()
        providers = get_active_providers_ordered()
        if not providers:
            logger.warning("No active providers configured")

        for provider in providers:
            provider_name = provider.__class__.__name__
            raw_rates = provider.get_rate_table(base)

            if not raw_rates:
                logger.warning("%s failed for %s, trying next...", provider_name, base)
                continue

            rates = {
                code: rate
                for code, rate in raw_rates.items()
                if code in supported and rate > 0
            }
            rates[base] = Decimal("1")
            table = ExchangeRateTable(base=base, rates=rates)
            logger.info("%s returned %d rates for %s", provider_name, len(rates), base)

            cache.set(key, table, EXCHANGE_RATE_CACHE_TTL)
            try:
                CurrencyExchangeRateRepository.save_table(base_currency, rates, date.today())
            except DatabaseError:
                logger.exception("Failed to save rate table for %s (from %s)", base, provider_name)

            return table

        stored = CurrencyExchangeRateRepository.get_latest_table(base_currency)
        if stored is None:
            logger.error("All providers failed for %s and no stored rates exist", base)
            raise RateSourceUnavailable(base)

        valuation_date, rates = stored
        rates[base] = Decimal("1")
        logger.warning("All providers failed for %s, serving stored rates from %s", base, valuation_date)
        return ExchangeRateTable(
            base=base,
            rates=rates,
            fetched_at=datetime.combine(valuation_date, time.min, tzinfo=timezone.utc),
            stale=True,
        )

    @staticmethod
    def lookup_rates(base_currency_code: str) -> RateLookup:
        """
        Same as get_rates, but reports unknown bases and upstream outages as a
        RateLookup status instead of raising.
        """
        base = _normalize(base_currency_code)
        try:
            table = ExchangeRateService.get_rates(base)
        except UnknownCurrencyError as e:
            return RateLookup(status=LookupStatus.NOT_FOUND, base=base, reason=str(e))
        except RateSourceUnavailable as e:
            return RateLookup(status=LookupStatus.DEGRADED, base=base, reason=str(e))

        if table.stale:
            return RateLookup(
                status=LookupStatus.DEGRADED,
                base=base,
                table=table,
                reason=f"Rate providers unavailable, serving rates stored on {table.fetched_at.date()}",
            )
        return RateLookup(status=LookupStatus.OK, base=base, table=table)

    @staticmethod
    def convert(amount, source_currency_code: str, exchanged_currency_code: str) -> Decimal:
        """
        Convert an amount from one currency to another.

        No rounding is applied; formatting is up to the caller.

        Raises:
            UnknownCurrencyError: either code is unknown, or the table has no rate for the target
            RateSourceUnavailable: see get_rates
        """
        source = _normalize(source_currency_code)
        target = _normalize(exchanged_currency_code)

        known = CurrencyRepository.get_codes()
        for code in (source, target):
            if code not in known:
                raise UnknownCurrencyError(code)

        if source == target:
            return amount

        rate = ExchangeRateService.get_rates(source).rate_for(target)
        if rate is None:
            raise UnknownCurrencyError(target)

        return _as_decimal(amount) * rate

    @staticmethod
    def convert_to_many(amount, base_currency_code: str, target_codes: Iterable[str]) -> dict[str, Decimal]:
        """
        Convert one amount into several currencies with a single table lookup.
        Targets without a rate are left out of the result.
        """
        base = _normalize(base_currency_code)
        table = ExchangeRateService.get_rates(base)
        amount = _as_decimal(amount)

        converted = {}
        for target_code in target_codes:
            code = _normalize(target_code)
            if not code:
                continue
            if code == base:
                converted[code] = amount
                continue
            rate = table.rate_for(code)
            if rate is not None:
                converted[code] = amount * rate

        return converted
