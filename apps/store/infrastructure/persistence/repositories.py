"""
Repository pattern implementation.
Abstracts database access to decouple domain logic from persistence.
"""

from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from apps.store.domain.exceptions import MalformedCouponRecord
from apps.store.domain.models import CouponSnapshot, CouponStatus, CouponType
from apps.store.infrastructure.persistence.models import (
    ActivityLog,
    Coupon,
    CouponRedemption,
    Order,
    Referral,
)


def _normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class CouponRepository:
    """Repository for Coupon aggregate."""

    @staticmethod
    def get_by_code(code: str) -> Optional[Coupon]:
        """Get coupon by code, ignoring case and surrounding spaces."""
        try:
            return Coupon.objects.get(code=_normalize_code(code))
        except Coupon.DoesNotExist:
            return None

    @staticmethod
    def to_snapshot(coupon: Coupon) -> CouponSnapshot:
        """Convert a stored coupon into a domain snapshot."""
        products = coupon.applicable_products
        if products is None:
            products = []
        if not isinstance(products, list):
            raise MalformedCouponRecord(
                coupon.code, f"applicable_products must be a list, got {type(products).__name__}"
            )
        try:
            return CouponSnapshot(
                code=coupon.code,
                type=CouponType(coupon.type),
                value=Decimal(coupon.value),
                status=CouponStatus(coupon.status),
                valid_from=coupon.valid_from,
                valid_until=coupon.valid_until,
                used_count=coupon.used_count,
                currency=coupon.currency or None,
                max_uses=coupon.max_uses,
                max_uses_per_user=coupon.max_uses_per_user,
                min_order_amount=coupon.min_order_amount,
                max_discount_amount=coupon.max_discount_amount,
                applicable_products=tuple(str(p) for p in products),
                description_ar=coupon.description_ar,
                description_en=coupon.description_en,
            )
        except (ValueError, TypeError, ArithmeticError) as e:
            raise MalformedCouponRecord(coupon.code, str(e)) from e

    @staticmethod
    def get_snapshot(code: str) -> Optional[CouponSnapshot]:
        coupon = CouponRepository.get_by_code(code)
        if coupon is None:
            return None
        return CouponRepository.to_snapshot(coupon)

    @staticmethod
    def count_user_redemptions(code: str, user_ref: str) -> int:
        return CouponRedemption.objects.filter(
            coupon__code=_normalize_code(code),
            user_ref__iexact=user_ref.strip(),
        ).count()

    @staticmethod
    def redeem(code: str, user_ref: Optional[str] = None, order_number: Optional[str] = None) -> bool:
        """
        Increment used_count unless the coupon is unknown or its cap is reached.

        The cap check and the increment are a single UPDATE, so concurrent
        redemptions can never push used_count past max_uses.
        """
        code = _normalize_code(code)
        with transaction.atomic():
            updated = (
                Coupon.objects
                .filter(code=code)
                .filter(Q(max_uses__isnull=True) | Q(used_count__lt=F("max_uses")))
                .update(used_count=F("used_count") + 1, updated_at=timezone.now())
            )
            if not updated:
                return False

            CouponRedemption.objects.create(
                coupon=Coupon.objects.get(code=code),
                user_ref=(user_ref or "").strip(),
                order_number=(order_number or "").strip(),
            )
        return True


class ReferralRepository:
    """Repository for Referral aggregate."""

    @staticmethod
    def get_by_referral_id(referral_id: str) -> Optional[Referral]:
        return Referral.objects.filter(referral_id=referral_id.strip()).first()


class OrderRepository:
    """Repository for Order aggregate."""

    @staticmethod
    def get_by_paymob_order_id(paymob_order_id: int) -> Optional[Order]:
        return Order.objects.filter(paymob_order_id=paymob_order_id).first()


class ActivityLogRepository:

    @staticmethod
    def create(**fields) -> ActivityLog:
        return ActivityLog.objects.create(**fields)
