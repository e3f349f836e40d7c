"""
Provider Registry - Maps ProviderName enum to adapter classes.
This is the glue between the database Provider model and the actual implementation.
"""

import logging

from apps.exchange.domain.interfaces import BaseExchangeRateProvider
from apps.exchange.infrastructure.persistence.models import ProviderName
from apps.exchange.infrastructure.persistence.repositories import ProviderRepository
from apps.exchange.infrastructure.providers.currency_beacon import CurrencyBeaconProvider
from apps.exchange.infrastructure.providers.mock import MockProvider
from apps.exchange.infrastructure.providers.open_er_api import OpenExchangeRateProvider

logger = logging.getLogger(__name__)


# Registry: Maps ProviderName enum to the corresponding adapter class
PROVIDER_REGISTRY: dict[str, type[BaseExchangeRateProvider]] = {
    ProviderName.OPEN_ER_API: OpenExchangeRateProvider,
    ProviderName.CURRENCY_BEACON: CurrencyBeaconProvider,
    ProviderName.MOCK: MockProvider,
}


def get_provider_instance(provider_name: str) -> BaseExchangeRateProvider | None:
    """
    Get an instance of a provider by its name.

    Args:
        provider_name: The provider name from ProviderName enum

    Returns:
        Instance of the provider adapter, or None if not found
    """
    provider_class = PROVIDER_REGISTRY.get(provider_name)

    if provider_class is None:
        logger.warning("Provider '%s' not found in registry", provider_name)
        return None

    return provider_class()


def get_active_providers_ordered() -> list[BaseExchangeRateProvider]:
    """
    Get all active providers from the database, ordered by priority.

    Returns:
        List of provider instances, sorted by priority (lowest number = highest priority)
    """
    provider_instances = []
    for provider_model in ProviderRepository.get_active_ordered():
        instance = get_provider_instance(provider_model.name)
        if instance is not None:
            provider_instances.append(instance)

    return provider_instances
