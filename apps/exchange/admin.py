"""
Django Admin configuration for Exchange app.
Rate snapshots are written by the refresh job, so they are browse-only here.
"""

from django.contrib import admin, messages
from django.utils.safestring import mark_safe

from apps.exchange.domain.exceptions import ExchangeError
from apps.exchange.domain.services import ExchangeRateService
from apps.exchange.infrastructure.persistence.models import (
    Currency,
    CurrencyExchangeRate,
    Provider,
)
from apps.exchange.infrastructure.persistence.repositories import CurrencyExchangeRateRepository


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    """Currency catalog. Only codes listed here can be priced or converted."""

    list_display = ('code', 'name', 'symbol', 'get_last_snapshot')
    search_fields = ('code', 'name')
    readonly_fields = ('id', 'created_at', 'updated_at')
    ordering = ('code',)
    actions = ['refresh_rates']

    fieldsets = (
        (None, {
            'fields': ('code', 'name', 'symbol')
        }),
        ('Metadata', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Last stored rates')
    def get_last_snapshot(self, obj):
        return CurrencyExchangeRateRepository.get_latest_rate_date(obj) or '-'

    @admin.action(description='Refresh rate tables now')
    def refresh_rates(self, request, queryset):
        refreshed, failed = [], []
        for currency in queryset:
            try:
                table = ExchangeRateService.get_rates(currency.code, use_cache=False)
            except ExchangeError:
                failed.append(currency.code)
                continue
            (failed if table.stale else refreshed).append(currency.code)

        if refreshed:
            self.message_user(request, f"Refreshed: {', '.join(refreshed)}")
        if failed:
            self.message_user(
                request,
                f"No provider answered for: {', '.join(failed)}",
                level=messages.WARNING,
            )


@admin.register(CurrencyExchangeRate)
class CurrencyExchangeRateAdmin(admin.ModelAdmin):

    list_display = ('get_currency_pair', 'rate_value', 'valuation_date')
    list_filter = ('valuation_date', 'source_currency')
    search_fields = ('source_currency__code', 'exchanged_currency__code')
    list_select_related = ('source_currency', 'exchanged_currency')
    date_hierarchy = 'valuation_date'
    ordering = ('-valuation_date', 'source_currency__code', 'exchanged_currency__code')

    @admin.display(description='Pair', ordering='source_currency__code')
    def get_currency_pair(self, obj):
        return f"1 {obj.source_currency.code} → {obj.exchanged_currency.code}"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Provider)
class ProviderAdmin(admin.ModelAdmin):
    """Rate sources, tried in ascending priority until one answers."""

    list_display = ('get_name_display', 'priority', 'get_status')
    list_editable = ('priority',)
    list_display_links = ('get_name_display',)
    list_filter = ('is_active',)
    readonly_fields = ('id', 'created_at', 'updated_at')
    ordering = ('priority',)
    actions = ['activate_providers', 'deactivate_providers']

    @admin.display(description='Provider')
    def get_name_display(self, obj):
        return obj.get_name_display()

    @admin.display(description='In fallback chain', ordering='is_active')
    def get_status(self, obj):
        if obj.is_active:
            return mark_safe('<span style="color: green; font-weight: bold;">● Active</span>')
        return mark_safe('<span style="color: red;">○ Skipped</span>')

    @admin.action(description='Add to fallback chain')
    def activate_providers(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f'{updated} provider(s) activated.')

    @admin.action(description='Remove from fallback chain')
    def deactivate_providers(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f'{updated} provider(s) deactivated.')
