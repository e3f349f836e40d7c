"""
Domain services - Core business logic.
Coupon validation and referral lookup for the storefront.
"""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.db import DatabaseError
from django.utils import timezone

from apps.store.domain.exceptions import InvalidCouponRequest
from apps.store.domain.models import (
    CouponError,
    CouponSnapshot,
    CouponStatus,
    CouponType,
    CouponValidation,
    ReferralContact,
    ReferralLookup,
    ReferralLookupStatus,
)
from apps.store.infrastructure.persistence.repositories import (
    CouponRepository,
    OrderRepository,
    ReferralRepository,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def calculate_discount(coupon: CouponSnapshot, order_amount: Decimal) -> Decimal:
    """
    Discount granted by a coupon on an order amount.

    Percentage coupons take value% of the order, fixed coupons take value.
    The result never exceeds the order amount nor max_discount_amount.
    """
    if coupon.type == CouponType.PERCENTAGE:
        discount = order_amount * coupon.value / HUNDRED
    else:
        discount = coupon.value

    discount = min(discount, order_amount)
    if coupon.max_discount_amount is not None:
        discount = min(discount, coupon.max_discount_amount)
    return discount


def _parse_order_amount(order_amount) -> Decimal:
    if isinstance(order_amount, bool):
        raise InvalidCouponRequest("order_amount", "order_amount must be a number")
    try:
        amount = order_amount if isinstance(order_amount, Decimal) else Decimal(str(order_amount))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidCouponRequest("order_amount", "order_amount must be a number")
    if not amount.is_finite() or amount <= 0:
        raise InvalidCouponRequest("order_amount", "order_amount must be positive")
    return amount


class CouponService:
    """
    Decides whether a coupon can be used on an order.

    Checks run in a fixed order and stop at the first failure:
    1. The code exists
    2. The coupon is active
    3. Now is inside [valid_from, valid_until]
    4. Global and per-user usage caps
    5. Currency restriction
    6. Minimum order amount
    7. Product restriction
    """

    @staticmethod
    def validate(
        code: str,
        order_amount,
        currency: str,
        product_id: Optional[str] = None,
        user_ref: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CouponValidation:
        """
        Validate a coupon code against an order.

        Args:
            code: Coupon code as typed by the customer
            order_amount: Order total, must be positive
            currency: Order currency code
            product_id: Product being bought, needed for restricted coupons
            user_ref: Customer identity, enables the per-user cap
            now: Reference time, defaults to the current time

        Returns:
            CouponValidation, valid with the discount or rejected with a CouponError

        Raises:
            InvalidCouponRequest: code, amount or currency are malformed
            MalformedCouponRecord: the stored coupon is corrupt
        """
        code = (code or "").strip().upper()
        if not code:
            raise InvalidCouponRequest("code", "code is required")
        amount = _parse_order_amount(order_amount)
        currency = (currency or "").strip().upper()
        if not currency:
            raise InvalidCouponRequest("currency", "currency is required")
        now = now or timezone.now()

        coupon = CouponRepository.get_snapshot(code)
        if coupon is None:
            return CouponValidation.rejected(CouponError.NOT_FOUND)

        if coupon.status == CouponStatus.DISABLED:
            return CouponValidation.rejected(CouponError.DISABLED)
        if coupon.status == CouponStatus.EXPIRED:
            return CouponValidation.rejected(CouponError.EXPIRED)

        if coupon.valid_from and now < coupon.valid_from:
            return CouponValidation.rejected(CouponError.NOT_STARTED)
        if coupon.valid_until and now > coupon.valid_until:
            return CouponValidation.rejected(CouponError.ENDED)

        if coupon.max_uses is not None and coupon.used_count >= coupon.max_uses:
            return CouponValidation.rejected(CouponError.MAX_USES)

        # Per-user cap needs an identity; anonymous callers skip it.
        if coupon.max_uses_per_user is not None and user_ref and user_ref.strip():
            used_by_user = CouponRepository.count_user_redemptions(code, user_ref)
            if used_by_user >= coupon.max_uses_per_user:
                return CouponValidation.rejected(CouponError.USER_LIMIT)

        if coupon.currency and coupon.currency.upper() != currency:
            return CouponValidation.rejected(CouponError.CURRENCY_MISMATCH)

        if coupon.min_order_amount is not None and amount < coupon.min_order_amount:
            return CouponValidation.rejected(CouponError.MIN_AMOUNT)

        if not coupon.applies_to(product_id):
            return CouponValidation.rejected(CouponError.NOT_APPLICABLE)

        return CouponValidation.ok(coupon, calculate_discount(coupon, amount))

    @staticmethod
    def redeem(code: str, user_ref: Optional[str] = None, order_number: Optional[str] = None) -> bool:
        """Count one use of the coupon. Returns False if it is unknown or used up."""
        redeemed = CouponRepository.redeem(code, user_ref=user_ref, order_number=order_number)
        if redeemed:
            logger.info("Coupon %s redeemed (order=%s)", code.strip().upper(), order_number or "-")
        else:
            logger.warning("Coupon %s could not be redeemed", code.strip().upper())
        return redeemed


class ReferralService:

    @staticmethod
    def find_referral_for_order(paymob_order_id: int) -> Optional[ReferralContact]:
        """Contact of the person credited for a Paymob order, if any."""
        order = OrderRepository.get_by_paymob_order_id(paymob_order_id)
        if order is None or not order.referral_id:
            return None

        referral = ReferralRepository.get_by_referral_id(order.referral_id)
        if referral is None:
            return None

        return ReferralContact(name=referral.name, phone=referral.phone)

    @staticmethod
    def lookup_referral_for_order(paymob_order_id: int) -> ReferralLookup:
        try:
            contact = ReferralService.find_referral_for_order(paymob_order_id)
        except DatabaseError as e:
            logger.exception("Referral lookup failed for order %s", paymob_order_id)
            return ReferralLookup(status=ReferralLookupStatus.DEGRADED, reason=str(e))

        if contact is None:
            return ReferralLookup(status=ReferralLookupStatus.NOT_FOUND)
        return ReferralLookup(status=ReferralLookupStatus.FOUND, contact=contact)
