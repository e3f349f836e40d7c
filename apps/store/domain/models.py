"""
Pure domain entities (POPOs).
No dependency on Django or the ORM.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


class CouponType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    DISABLED = "disabled"


class CouponError(str, enum.Enum):
    NOT_FOUND = "COUPON_NOT_FOUND"
    DISABLED = "COUPON_DISABLED"
    EXPIRED = "COUPON_EXPIRED"
    NOT_STARTED = "COUPON_NOT_STARTED"
    ENDED = "COUPON_ENDED"
    MAX_USES = "COUPON_MAX_USES"
    USER_LIMIT = "COUPON_USER_LIMIT"
    CURRENCY_MISMATCH = "COUPON_CURRENCY_MISMATCH"
    MIN_AMOUNT = "COUPON_MIN_AMOUNT"
    NOT_APPLICABLE = "COUPON_NOT_APPLICABLE"


@dataclass(frozen=True)
class CouponSnapshot:
    """Read-only view of a stored coupon, checked when it is built."""

    code: str
    type: CouponType
    value: Decimal
    status: CouponStatus
    valid_from: datetime
    used_count: int = 0
    valid_until: datetime | None = None
    currency: str | None = None
    max_uses: int | None = None
    max_uses_per_user: int | None = None
    min_order_amount: Decimal | None = None
    max_discount_amount: Decimal | None = None
    applicable_products: tuple[str, ...] = ()
    description_ar: str = ""
    description_en: str = ""

    def __post_init__(self):
        if not self.code:
            raise ValueError("code must not be empty")
        if self.value < 0:
            raise ValueError(f"value must not be negative, got {self.value}")
        if self.used_count < 0:
            raise ValueError(f"used_count must not be negative, got {self.used_count}")
        if self.max_uses is not None and self.max_uses < 1:
            raise ValueError(f"max_uses must be at least 1, got {self.max_uses}")
        if self.max_uses_per_user is not None and self.max_uses_per_user < 1:
            raise ValueError(f"max_uses_per_user must be at least 1, got {self.max_uses_per_user}")
        for name in ("min_order_amount", "max_discount_amount"):
            amount = getattr(self, name)
            if amount is not None and amount < 0:
                raise ValueError(f"{name} must not be negative, got {amount}")

    @property
    def description(self) -> dict[str, str]:
        return {"ar": self.description_ar, "en": self.description_en}

    def applies_to(self, product_id: str | None) -> bool:
        if not self.applicable_products:
            return True
        return product_id is not None and str(product_id) in self.applicable_products


@dataclass(frozen=True)
class CouponValidation:
    """Either a redeemable coupon with its discount, or the reason it was rejected."""

    valid: bool
    coupon: CouponSnapshot | None = None
    discount_amount: Decimal | None = None
    error: CouponError | None = None

    @classmethod
    def ok(cls, coupon: CouponSnapshot, discount_amount: Decimal) -> "CouponValidation":
        return cls(valid=True, coupon=coupon, discount_amount=discount_amount)

    @classmethod
    def rejected(cls, error: CouponError) -> "CouponValidation":
        return cls(valid=False, error=error)


@dataclass(frozen=True)
class ReferralContact:
    name: str
    phone: str


class ReferralLookupStatus(str, enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class ReferralLookup:
    status: ReferralLookupStatus
    contact: ReferralContact | None = None
    reason: str | None = None

    @property
    def is_degraded(self) -> bool:
        return self.status == ReferralLookupStatus.DEGRADED
