"""
Celery tasks for background processing.
"""

import logging
from dataclasses import asdict
from typing import Dict

from celery import shared_task

from core.settings import EXCHANGE_RATE_RETENTION_DAYS
from apps.exchange.application.dto import RateSyncResultDTO
from apps.exchange.domain.exceptions import ExchangeError
from apps.exchange.domain.services import ExchangeRateService
from apps.exchange.infrastructure.persistence.repositories import (
    CurrencyExchangeRateRepository,
    CurrencyRepository,
    ProviderRepository,
)

logger = logging.getLogger(__name__)


@shared_task(name="refresh_exchange_rates")
def refresh_exchange_rates() -> Dict:
    """
    Fetch a fresh rate table for every catalog currency, bypassing the cache.

    Each base goes through the provider fallback chain. A base whose providers
    all fail keeps its stored snapshot and is reported in errors.

    Returns:
        Dict with operation results
    """
    currencies = CurrencyRepository.get_all_active()
    if not currencies:
        return asdict(RateSyncResultDTO(success=False, message="No currencies found in database"))

    if not ProviderRepository.get_active_ordered():
        return asdict(RateSyncResultDTO(
            success=False,
            message="No active providers found. Check that at least one provider is active in the database.",
        ))

    result = RateSyncResultDTO(success=False)
    for currency in currencies:
        try:
            table = ExchangeRateService.get_rates(currency.code, use_cache=False)
        except ExchangeError as e:
            logger.warning("Refreshing %s failed: %s", currency.code, e)
            result.errors.append(str(e))
            continue

        if table.stale:
            result.errors.append(f"{currency.code}: providers unavailable, kept stored rates")
        else:
            result.bases_refreshed.append(currency.code)

    result.success = bool(result.bases_refreshed)
    logger.info(
        "Refreshed rates for %d of %d currencies",
        len(result.bases_refreshed),
        len(currencies),
    )
    return asdict(result)


@shared_task(name="cleanup_old_exchange_rates")
def cleanup_old_exchange_rates(days: int = EXCHANGE_RATE_RETENTION_DAYS) -> Dict:
    """Delete stored rate snapshots older than the retention window."""
    deleted = CurrencyExchangeRateRepository.delete_older_than(days)
    logger.info("Deleted %d exchange rates older than %d days", deleted, days)
    return {"success": True, "deleted": deleted, "days": days}
