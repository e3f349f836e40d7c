"""
Serializers for the store bounded context.
Handles validation and transformation between API and ORM layers.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.exchange.infrastructure.persistence.repositories import CurrencyRepository
from apps.store.infrastructure.persistence.models import (
    ActivityLog,
    Coupon,
    CouponType,
    Order,
    Referral,
)


class CouponValidationRequestSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
    order_amount = serializers.DecimalField(max_digits=None, decimal_places=None)
    currency = serializers.CharField(max_length=3)
    product_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    user_ref = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)

    def validate_order_amount(self, value: Decimal) -> Decimal:
        if value <= 0:
            raise serializers.ValidationError("Order amount must be positive.")
        return value

    def validate_currency(self, value: str) -> str:
        value = value.strip().upper()
        if not CurrencyRepository.exists(value):
            raise serializers.ValidationError(f"Currency {value} is not supported.")
        return value


class CouponRedeemSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
    user_ref = serializers.CharField(required=False, allow_blank=True, max_length=255)
    order_number = serializers.CharField(required=False, allow_blank=True, max_length=32)


class CouponSerializer(serializers.ModelSerializer):
    class Meta:
        model = Coupon
        fields = [
            "id",
            "code",
            "type",
            "value",
            "currency",
            "max_uses",
            "used_count",
            "max_uses_per_user",
            "valid_from",
            "valid_until",
            "status",
            "min_order_amount",
            "max_discount_amount",
            "applicable_products",
            "description_ar",
            "description_en",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "used_count", "created_by", "created_at", "updated_at"]
        # Uniqueness is checked case-insensitively in validate_code
        extra_kwargs = {"code": {"validators": []}}

    def validate_code(self, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("Coupon code is required.")

        existing = Coupon.objects.filter(code__iexact=value)
        if self.instance:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Coupon code already exists")
        return value

    def validate_currency(self, value):
        if not value:
            return None
        value = value.strip().upper()
        if not CurrencyRepository.exists(value):
            raise serializers.ValidationError(f"Currency {value} is not supported.")
        return value

    def validate_applicable_products(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Expected a list of product ids.")
        return [str(product_id) for product_id in value]

    def validate(self, attrs):
        def current(name):
            if name in attrs:
                return attrs[name]
            return getattr(self.instance, name, None)

        if current("type") == CouponType.PERCENTAGE and (current("value") or 0) > 100:
            raise serializers.ValidationError({"value": "Percentage discount cannot exceed 100."})

        valid_from = current("valid_from")
        valid_until = current("valid_until")
        if valid_from and valid_until and valid_until <= valid_from:
            raise serializers.ValidationError({"valid_until": "Must be after valid_from."})

        return attrs


class ReferralSerializer(serializers.ModelSerializer):
    class Meta:
        model = Referral
        fields = ["id", "name", "referral_id", "phone", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {"referral_id": {"validators": []}}

    def validate_referral_id(self, value: str) -> str:
        value = value.strip()
        existing = Referral.objects.filter(referral_id=value)
        if self.instance:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Referral ID already exists")
        return value


class OrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "total_amount",
            "currency",
            "status",
            "paymob_order_id",
            "referral_id",
            "coupon_code",
            "coupon_discount",
            "locale",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ActivityLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActivityLog
        fields = [
            "id",
            "user_id",
            "user_name",
            "user_email",
            "action",
            "resource",
            "resource_id",
            "details",
            "metadata",
            "created_at",
        ]
        read_only_fields = fields
