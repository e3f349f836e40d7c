# Django discovers models through this module; the definitions live in the
# persistence layer.
from apps.store.infrastructure.persistence.models import (  # noqa: F401
    ActivityLog,
    Coupon,
    CouponRedemption,
    Order,
    Referral,
)
