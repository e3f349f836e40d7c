"""
Django ORM models for persistence.
Infrastructure layer, the storage side of the repositories.
"""

import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class BaseModel(models.Model):

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class CouponType(models.TextChoices):
    PERCENTAGE = "percentage", "Percentage"
    FIXED = "fixed", "Fixed amount"


class CouponStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    EXPIRED = "expired", "Expired"
    DISABLED = "disabled", "Disabled"


class Coupon(BaseModel):

    code = models.CharField(max_length=64, unique=True)
    type = models.CharField(max_length=16, choices=CouponType.choices)
    value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    currency = models.CharField(
        max_length=3,
        null=True,
        blank=True,
        help_text="Leave empty to accept orders in any currency.",
    )
    max_uses = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        help_text="Global redemption cap. Empty = unlimited.",
    )
    used_count = models.PositiveIntegerField(default=0)
    max_uses_per_user = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
    )
    valid_from = models.DateTimeField(default=timezone.now)
    valid_until = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=16,
        choices=CouponStatus.choices,
        default=CouponStatus.ACTIVE,
    )
    min_order_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    max_discount_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    applicable_products = models.JSONField(
        default=list,
        blank=True,
        help_text="Product ids the coupon is restricted to. Empty = all products.",
    )
    description_ar = models.TextField(blank=True, default="")
    description_en = models.TextField(blank=True, default="")
    created_by = models.CharField(max_length=64, blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["code", "status"], name="coupon_code_status_idx"),
            models.Index(fields=["valid_until", "status"], name="coupon_until_status_idx"),
        ]

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        if self.currency:
            self.currency = self.currency.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.code} ({self.type}: {self.value}) [{self.status}]"


class CouponRedemption(BaseModel):
    """A committed use of a coupon, written after a successful payment."""

    coupon = models.ForeignKey(
        Coupon,
        related_name="redemptions",
        on_delete=models.CASCADE,
    )
    user_ref = models.CharField(max_length=255, blank=True, default="", db_index=True)
    order_number = models.CharField(max_length=32, blank=True, default="")

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.coupon.code} by {self.user_ref or 'anonymous'}"


class Referral(BaseModel):

    name = models.CharField(max_length=120)
    referral_id = models.CharField(max_length=64, unique=True)
    phone = models.CharField(max_length=32)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.referral_id = (self.referral_id or "").strip()
        self.phone = (self.phone or "").strip()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.referral_id})"


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"
    CANCELLED = "cancelled", "Cancelled"


class Order(BaseModel):
    """Checkout order. Written by the payment flow, read-only here."""

    order_number = models.CharField(max_length=32, unique=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3)
    status = models.CharField(
        max_length=16,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )
    paymob_order_id = models.BigIntegerField(null=True, blank=True, db_index=True)
    referral_id = models.CharField(max_length=64, blank=True, default="", db_index=True)
    coupon_code = models.CharField(max_length=64, blank=True, default="")
    coupon_discount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    locale = models.CharField(max_length=5, default="ar")

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.order_number} | {self.total_amount} {self.currency} | {self.status}"


class ActivityAction(models.TextChoices):
    CREATE = "create", "Create"
    UPDATE = "update", "Update"
    DELETE = "delete", "Delete"
    LOGIN = "login", "Login"
    LOGOUT = "logout", "Logout"


class ActivityResource(models.TextChoices):
    PRODUCT = "product", "Product"
    USER = "user", "User"
    AUTH = "auth", "Auth"
    COUNTRY = "country", "Country"
    ORDER = "order", "Order"
    COUPON = "coupon", "Coupon"
    REFERRAL = "referral", "Referral"
    PAYMENT_SETTINGS = "paymentSettings", "Payment settings"


class ActivityLog(models.Model):

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=64, db_index=True)
    user_name = models.CharField(max_length=150)
    user_email = models.CharField(max_length=254)
    action = models.CharField(max_length=16, choices=ActivityAction.choices, db_index=True)
    resource = models.CharField(max_length=32, choices=ActivityResource.choices, db_index=True)
    resource_id = models.CharField(max_length=64, blank=True, default="")
    details = models.TextField()
    metadata = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.user_name} {self.action} {self.resource} {self.resource_id}".strip()
