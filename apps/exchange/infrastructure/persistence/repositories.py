"""
Repository pattern implementation.
Abstracts database access to decouple domain logic from persistence.
"""

from typing import Dict, List, Optional, Tuple
from datetime import date
from decimal import Decimal

from django.db import transaction

from apps.exchange.infrastructure.persistence.models import (
    Currency,
    CurrencyExchangeRate,
    Provider,
)


def _trim_zeros(value: Decimal) -> Decimal:
    """Drop the padding zeros a fixed-scale column adds, keeping integers integral."""
    value = value.normalize()
    if value.as_tuple().exponent > 0:
        return value.quantize(Decimal(1))
    return value


class CurrencyRepository:
    """Repository for Currency aggregate."""

    @staticmethod
    def get_by_code(code: str) -> Optional[Currency]:
        """Get currency by code."""
        try:
            return Currency.objects.get(code=code.upper())
        except Currency.DoesNotExist:
            return None

    @staticmethod
    def get_all_active() -> List[Currency]:
        """Get all currencies."""
        return list(Currency.objects.all())

    @staticmethod
    def get_codes() -> set[str]:
        """Get the set of recognized currency codes."""
        return set(Currency.objects.values_list("code", flat=True))

    @staticmethod
    def exists(code: str) -> bool:
        """Check if currency exists."""
        return Currency.objects.filter(code=code.upper()).exists()

    @staticmethod
    def bulk_create(currencies: List[dict]) -> List[Currency]:
        """Bulk create currencies."""
        currency_objects = [
            Currency(
                code=c["code"].upper(),
                name=c["name"],
                symbol=c["symbol"]
            )
            for c in currencies
        ]
        return Currency.objects.bulk_create(
            currency_objects,
            ignore_conflicts=True
        )


class CurrencyExchangeRateRepository:
    """Repository for CurrencyExchangeRate aggregate."""

    @staticmethod
    def get_latest_table(source_currency: Currency) -> Optional[Tuple[date, Dict[str, Decimal]]]:
        """
        Get the most recent stored rates for a currency as (date, {code: rate}).
        Rows that were stored as zero are left out.
        """
        latest_date = CurrencyExchangeRateRepository.get_latest_rate_date(source_currency)
        if latest_date is None:
            return None

        rows = (
            CurrencyExchangeRate.objects
            .filter(source_currency=source_currency, valuation_date=latest_date, rate_value__gt=0)
            .select_related("exchanged_currency")
        )
        return latest_date, {row.exchanged_currency.code: _trim_zeros(row.rate_value) for row in rows}

    @staticmethod
    def save_table(
        source_currency: Currency,
        rates: Dict[str, Decimal],
        valuation_date: date
    ) -> int:
        """Upsert the rates of one base currency for a day. Returns the number of rows written."""
        targets = {
            c.code: c
            for c in Currency.objects.filter(code__in=list(rates.keys())).exclude(pk=source_currency.pk)
        }
        with transaction.atomic():
            for code, currency in targets.items():
                CurrencyExchangeRate.objects.update_or_create(
                    source_currency=source_currency,
                    exchanged_currency=currency,
                    valuation_date=valuation_date,
                    defaults={"rate_value": rates[code]},
                )
        return len(targets)

    @staticmethod
    def delete_older_than(days: int) -> int:
        """Delete rates older than specified days."""
        from django.utils import timezone
        cutoff_date = timezone.now().date() - timezone.timedelta(days=days)
        deleted, _ = CurrencyExchangeRate.objects.filter(
            valuation_date__lt=cutoff_date
        ).delete()
        return deleted

    @staticmethod
    def get_latest_rate_date(source_currency: Currency) -> Optional[date]:
        """Get the most recent date with rates for a currency."""
        latest = CurrencyExchangeRate.objects.filter(
            source_currency=source_currency
        ).order_by('-valuation_date').first()
        return latest.valuation_date if latest else None


class ProviderRepository:
    """Repository for Provider aggregate."""

    @staticmethod
    def get_active_ordered() -> List[Provider]:
        """Get all active providers ordered by priority."""
        return list(
            Provider.objects
            .filter(is_active=True)
            .order_by('priority')
        )
