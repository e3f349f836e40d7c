"""
Django Admin configuration for Store app.
"""

from django.contrib import admin
from django.utils.safestring import mark_safe

from apps.store.infrastructure.persistence.models import (
    ActivityLog,
    Coupon,
    CouponRedemption,
    CouponStatus,
    Order,
    Referral,
)


class CouponRedemptionInline(admin.TabularInline):
    model = CouponRedemption
    extra = 0
    fields = ('user_ref', 'order_number', 'created_at')
    readonly_fields = fields
    can_delete = False


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    """Admin interface for Coupon model."""

    list_display = (
        'code',
        'type',
        'value',
        'currency',
        'get_usage',
        'valid_until',
        'get_status',
    )
    list_filter = ('status', 'type', 'currency')
    search_fields = ('code', 'description_en', 'description_ar')
    readonly_fields = ('id', 'used_count', 'created_by', 'created_at', 'updated_at')
    ordering = ('-created_at',)
    inlines = [CouponRedemptionInline]
    actions = ['enable_coupons', 'disable_coupons']

    fieldsets = (
        ('Coupon', {
            'fields': ('code', 'type', 'value', 'currency', 'status')
        }),
        ('Limits', {
            'fields': (
                'max_uses',
                'used_count',
                'max_uses_per_user',
                'min_order_amount',
                'max_discount_amount',
                'applicable_products',
            )
        }),
        ('Validity', {
            'fields': ('valid_from', 'valid_until')
        }),
        ('Description', {
            'fields': ('description_ar', 'description_en')
        }),
        ('Metadata', {
            'fields': ('id', 'created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Uses')
    def get_usage(self, obj):
        if obj.max_uses is None:
            return f"{obj.used_count} / ∞"
        return f"{obj.used_count} / {obj.max_uses}"

    @admin.display(description='Status', ordering='status')
    def get_status(self, obj):
        if obj.status == CouponStatus.ACTIVE:
            return mark_safe('<span style="color: green; font-weight: bold;">● Active</span>')
        return mark_safe(f'<span style="color: red;">○ {obj.get_status_display()}</span>')

    @admin.action(description='Enable selected coupons')
    def enable_coupons(self, request, queryset):
        updated = queryset.update(status=CouponStatus.ACTIVE)
        self.message_user(request, f'{updated} coupon(s) enabled successfully.')

    @admin.action(description='Disable selected coupons')
    def disable_coupons(self, request, queryset):
        updated = queryset.update(status=CouponStatus.DISABLED)
        self.message_user(request, f'{updated} coupon(s) disabled successfully.')


@admin.register(Referral)
class ReferralAdmin(admin.ModelAdmin):

    list_display = ('name', 'referral_id', 'phone', 'created_at')
    search_fields = ('name', 'referral_id', 'phone')
    readonly_fields = ('id', 'created_at', 'updated_at')
    ordering = ('-created_at',)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Orders are written by the payment flow and only browsed here."""

    list_display = (
        'order_number',
        'total_amount',
        'currency',
        'status',
        'referral_id',
        'coupon_code',
        'created_at',
    )
    list_filter = ('status', 'currency', 'created_at')
    search_fields = ('order_number', 'paymob_order_id', 'referral_id', 'coupon_code')
    ordering = ('-created_at',)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):

    list_display = ('created_at', 'user_name', 'action', 'resource', 'resource_id', 'details')
    list_filter = ('action', 'resource', 'created_at')
    search_fields = ('user_name', 'user_email', 'details')
    date_hierarchy = 'created_at'
    ordering = ('-created_at',)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
