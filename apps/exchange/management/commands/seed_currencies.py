from django.core.management.base import BaseCommand

from apps.exchange.infrastructure.persistence.repositories import CurrencyRepository

# Currencies of the countries served by the storefront.
DEFAULT_CURRENCIES = [
    {"code": "SAR", "name": "Saudi Riyal", "symbol": "ر.س"},
    {"code": "AED", "name": "UAE Dirham", "symbol": "د.إ"},
    {"code": "KWD", "name": "Kuwaiti Dinar", "symbol": "د.ك"},
    {"code": "QAR", "name": "Qatari Riyal", "symbol": "ر.ق"},
    {"code": "EGP", "name": "Egyptian Pound", "symbol": "ج.م"},
    {"code": "USD", "name": "US Dollar", "symbol": "$"},
    {"code": "EUR", "name": "Euro", "symbol": "€"},
    {"code": "GBP", "name": "British Pound", "symbol": "£"},
]


class Command(BaseCommand):
    help = 'Create the default currency catalog (existing codes are left untouched)'

    def handle(self, **options):
        CurrencyRepository.bulk_create(DEFAULT_CURRENCIES)
        self.stdout.write(
            self.style.SUCCESS(
                f'Currency catalog now has {len(CurrencyRepository.get_codes())} currencies'
            )
        )
