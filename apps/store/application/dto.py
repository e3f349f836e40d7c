"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from apps.store.domain.models import CouponValidation, ReferralLookup


@dataclass
class ValidatedCouponDTO:
    code: str
    type: str
    value: str
    description: Dict[str, str]


@dataclass
class CouponValidationDTO:
    """Coupon validation result. Amounts are decimal strings."""
    valid: bool
    coupon: Optional[ValidatedCouponDTO] = None
    discount_amount: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_validation(cls, result: CouponValidation) -> "CouponValidationDTO":
        if not result.valid:
            return cls(valid=False, error=result.error.value)

        coupon = result.coupon
        return cls(
            valid=True,
            coupon=ValidatedCouponDTO(
                code=coupon.code,
                type=coupon.type.value,
                value=str(coupon.value),
                description=coupon.description,
            ),
            discount_amount=str(result.discount_amount),
        )

    def as_response(self) -> dict:
        if not self.valid:
            return {"valid": False, "error": self.error}
        return {
            "valid": True,
            "coupon": {
                "code": self.coupon.code,
                "type": self.coupon.type,
                "value": self.coupon.value,
                "description": self.coupon.description,
            },
            "discount_amount": self.discount_amount,
        }


@dataclass
class ReferralInfoDTO:
    data: Optional[Dict[str, str]] = None
    degraded: bool = False

    @classmethod
    def from_lookup(cls, lookup: ReferralLookup) -> "ReferralInfoDTO":
        data = None
        if lookup.contact is not None:
            data = {"name": lookup.contact.name, "phone": lookup.contact.phone}
        return cls(data=data, degraded=lookup.is_degraded)

    def as_response(self) -> dict:
        response = {"data": self.data}
        if self.degraded:
            response["degraded"] = True
        return response
