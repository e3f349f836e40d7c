import pytest
from decimal import Decimal
from datetime import timedelta
from unittest.mock import patch

from django.db import DatabaseError
from django.utils import timezone
from rest_framework import status

from apps.exchange.infrastructure.persistence.models import Currency
from apps.store.infrastructure.persistence.models import (
    ActivityLog,
    Coupon,
    CouponRedemption,
    Order,
    Referral,
)

VALIDATE_URL = "/api/v1/store/coupons/validate/"
REFERRAL_INFO_URL = "/api/v1/store/payment/referral-info/"


@pytest.fixture
def currencies(db):
    """Create test currencies."""
    Currency.objects.all().delete()
    return [
        Currency.objects.create(code="SAR", name="Saudi Riyal", symbol="﷼"),
        Currency.objects.create(code="USD", name="US Dollar", symbol="$"),
    ]


def make_coupon(**overrides):
    fields = {
        "code": "SAVE10",
        "type": "percentage",
        "value": Decimal("10"),
        "valid_from": timezone.now() - timedelta(days=1),
        "description_ar": "خصم",
        "description_en": "Discount",
    }
    fields.update(overrides)
    return Coupon.objects.create(**fields)


@pytest.mark.django_db(transaction=True)
class TestCouponValidateEndpoint:
    """Tests for POST /api/v1/store/coupons/validate/."""

    def setup_method(self):
        """Clean up before each test."""
        CouponRedemption.objects.all().delete()
        Coupon.objects.all().delete()

    def test_valid_coupon(self, api_client, currencies):
        make_coupon()

        response = api_client.post(
            VALIDATE_URL,
            {"code": "save10", "order_amount": "100", "currency": "SAR"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["valid"] is True
        assert Decimal(response.data["discount_amount"]) == Decimal("10")
        assert response.data["coupon"]["code"] == "SAVE10"
        assert response.data["coupon"]["type"] == "percentage"
        assert response.data["coupon"]["description"] == {"ar": "خصم", "en": "Discount"}

    def test_fractional_order_amount(self, api_client, currencies):
        make_coupon()

        response = api_client.post(
            VALIDATE_URL,
            {"code": "SAVE10", "order_amount": 26.666667, "currency": "SAR"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["valid"] is True
        assert Decimal(response.data["discount_amount"]) == Decimal("2.6666667")

    def test_fixed_coupon_capped(self, api_client, currencies):
        make_coupon(code="FLAT20", type="fixed", value=Decimal("20"), max_discount_amount=Decimal("15"))

        response = api_client.post(
            VALIDATE_URL,
            {"code": "FLAT20", "order_amount": 100, "currency": "SAR"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data["discount_amount"]) == Decimal("15")

    def test_rejected_coupon(self, api_client, currencies):
        make_coupon(code="OLD", valid_until=timezone.now() - timedelta(days=1), valid_from=timezone.now() - timedelta(days=10))

        response = api_client.post(
            VALIDATE_URL,
            {"code": "OLD", "order_amount": "100", "currency": "SAR"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {"valid": False, "error": "COUPON_ENDED"}

    def test_unknown_coupon(self, api_client, currencies):
        response = api_client.post(
            VALIDATE_URL,
            {"code": "NOPE", "order_amount": "100", "currency": "SAR"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "COUPON_NOT_FOUND"

    def test_product_and_user_ref_are_forwarded(self, api_client, currencies):
        coupon = make_coupon(applicable_products=["p-1"], max_uses_per_user=1)
        CouponRedemption.objects.create(coupon=coupon, user_ref="buyer@example.com")

        response = api_client.post(
            VALIDATE_URL,
            {
                "code": "SAVE10",
                "order_amount": "100",
                "currency": "SAR",
                "product_id": "p-1",
                "user_ref": "buyer@example.com",
            },
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "COUPON_USER_LIMIT"

    def test_missing_fields(self, api_client, currencies):
        response = api_client.post(VALIDATE_URL, {"code": "SAVE10"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "Invalid request"
        assert "order_amount" in response.data["details"]
        assert "currency" in response.data["details"]

    def test_non_positive_amount(self, api_client, currencies):
        response = api_client.post(
            VALIDATE_URL,
            {"code": "SAVE10", "order_amount": "0", "currency": "SAR"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "order_amount" in response.data["details"]

    def test_unrecognized_currency(self, api_client, currencies):
        make_coupon()

        response = api_client.post(
            VALIDATE_URL,
            {"code": "SAVE10", "order_amount": "100", "currency": "XXX"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "currency" in response.data["details"]

    def test_malformed_record_is_server_error(self, api_client, currencies):
        make_coupon(type="bogus")

        response = api_client.post(
            VALIDATE_URL,
            {"code": "SAVE10", "order_amount": "100", "currency": "SAR"},
            format="json",
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {"error": "Failed to validate coupon"}

    def test_validation_does_not_consume_coupon(self, api_client, currencies):
        coupon = make_coupon(max_uses=1)

        for _ in range(2):
            response = api_client.post(
                VALIDATE_URL,
                {"code": "SAVE10", "order_amount": "100", "currency": "SAR"},
                format="json",
            )
            assert response.status_code == status.HTTP_200_OK

        coupon.refresh_from_db()
        assert coupon.used_count == 0


@pytest.mark.django_db(transaction=True)
class TestCouponAdmin:
    """Tests for coupon CRUD and redemption."""

    def setup_method(self):
        ActivityLog.objects.all().delete()
        CouponRedemption.objects.all().delete()
        Coupon.objects.all().delete()

    def test_requires_staff(self, api_client):
        response = api_client.get("/api/v1/store/coupons/")

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    def test_create_coupon_logs_activity(self, admin_client, admin_user, currencies):
        response = admin_client.post(
            "/api/v1/store/coupons/",
            {"code": " welcome ", "type": "fixed", "value": "25.00", "currency": "sar", "max_uses": 100},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["code"] == "WELCOME"
        assert response.data["currency"] == "SAR"
        assert response.data["used_count"] == 0
        assert response.data["created_by"] == str(admin_user.pk)

        entry = ActivityLog.objects.get()
        assert entry.action == "create"
        assert entry.resource == "coupon"
        assert entry.details == "Created coupon: WELCOME"

    def test_create_duplicate_code_case_insensitive(self, admin_client):
        make_coupon(code="SAVE10")

        response = admin_client.post(
            "/api/v1/store/coupons/",
            {"code": "save10", "type": "percentage", "value": "5"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "already exists" in str(response.data["code"][0])

    def test_list_filtered_by_status(self, admin_client):
        make_coupon(code="A")
        make_coupon(code="B", status="disabled")

        response = admin_client.get("/api/v1/store/coupons/", {"status": "disabled"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        assert response.data["results"][0]["code"] == "B"

    def test_update_coupon_logs_activity(self, admin_client):
        coupon = make_coupon()

        response = admin_client.patch(f"/api/v1/store/coupons/{coupon.id}/", {"status": "disabled"}, format="json")

        assert response.status_code == status.HTTP_200_OK
        coupon.refresh_from_db()
        assert coupon.status == "disabled"
        assert ActivityLog.objects.get().action == "update"

    def test_delete_coupon_logs_activity(self, admin_client):
        coupon = make_coupon()

        response = admin_client.delete(f"/api/v1/store/coupons/{coupon.id}/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Coupon.objects.exists()
        entry = ActivityLog.objects.get()
        assert entry.action == "delete"
        assert entry.resource_id == str(coupon.id)

    def test_redeem(self, admin_client):
        coupon = make_coupon(max_uses=1)

        first = admin_client.post(
            "/api/v1/store/coupons/redeem/",
            {"code": "save10", "user_ref": "buyer@example.com", "order_number": "ORD-1"},
            format="json",
        )
        second = admin_client.post("/api/v1/store/coupons/redeem/", {"code": "SAVE10"}, format="json")

        assert first.status_code == status.HTTP_200_OK
        assert first.data == {"redeemed": True}
        assert second.status_code == status.HTTP_409_CONFLICT
        assert second.data["redeemed"] is False
        coupon.refresh_from_db()
        assert coupon.used_count == 1

    def test_redeem_requires_staff(self, api_client):
        make_coupon()

        response = api_client.post("/api/v1/store/coupons/redeem/", {"code": "SAVE10"}, format="json")

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


@pytest.mark.django_db(transaction=True)
class TestReferralAdmin:

    def setup_method(self):
        ActivityLog.objects.all().delete()
        Referral.objects.all().delete()

    def test_create_referral(self, admin_client):
        response = admin_client.post(
            "/api/v1/store/referrals/",
            {"name": "Ahmed", "referral_id": "ahmed", "phone": "+966500000000"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Referral.objects.filter(referral_id="ahmed").exists()
        assert ActivityLog.objects.get().resource == "referral"

    def test_duplicate_referral_id(self, admin_client):
        Referral.objects.create(name="Ahmed", referral_id="ahmed", phone="+966500000000")

        response = admin_client.post(
            "/api/v1/store/referrals/",
            {"name": "Other", "referral_id": "ahmed", "phone": "+966511111111"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Referral ID already exists" in str(response.data["referral_id"][0])

    def test_search(self, admin_client):
        Referral.objects.create(name="Ahmed", referral_id="ahmed", phone="+966500000000")
        Referral.objects.create(name="Sara", referral_id="sara", phone="+201000000000")

        response = admin_client.get("/api/v1/store/referrals/", {"search": "+2010"})

        assert response.status_code == status.HTTP_200_OK
        assert [r["name"] for r in response.data["results"]] == ["Sara"]

    def test_update_and_delete_are_logged(self, admin_client):
        referral = Referral.objects.create(name="Ahmed", referral_id="ahmed", phone="+966500000000")

        admin_client.patch(f"/api/v1/store/referrals/{referral.id}/", {"phone": "+966522222222"}, format="json")
        admin_client.delete(f"/api/v1/store/referrals/{referral.id}/")

        assert sorted(ActivityLog.objects.values_list("action", flat=True)) == ["delete", "update"]


@pytest.mark.django_db(transaction=True)
class TestOrderAndActivityLogViews:

    def setup_method(self):
        Order.objects.all().delete()
        ActivityLog.objects.all().delete()

    def test_orders_are_read_only(self, admin_client):
        Order.objects.create(order_number="ORD-1", total_amount=Decimal("100.00"), currency="SAR", status="paid")

        list_response = admin_client.get("/api/v1/store/orders/", {"status": "paid"})
        create_response = admin_client.post(
            "/api/v1/store/orders/",
            {"order_number": "ORD-2", "total_amount": "1", "currency": "SAR"},
            format="json",
        )

        assert list_response.status_code == status.HTTP_200_OK
        assert list_response.data["count"] == 1
        assert list_response.data["results"][0]["total_amount"] == "100.00"
        assert create_response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_activity_logs_filters(self, admin_client):
        common = {"user_name": "Store Admin", "user_email": "admin@example.com", "details": "x"}
        ActivityLog.objects.create(user_id="1", action="create", resource="coupon", **common)
        ActivityLog.objects.create(user_id="1", action="delete", resource="coupon", **common)
        ActivityLog.objects.create(user_id="2", action="create", resource="referral", **common)

        response = admin_client.get("/api/v1/store/activity-logs/", {"action": "create", "user_id": "1"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        assert response.data["results"][0]["resource"] == "coupon"

    def test_activity_logs_newest_first(self, admin_client):
        common = {"user_id": "1", "user_name": "Store Admin", "user_email": "admin@example.com", "action": "update", "resource": "coupon"}
        first = ActivityLog.objects.create(details="first", **common)
        ActivityLog.objects.create(details="second", **common)
        ActivityLog.objects.filter(pk=first.pk).update(created_at=timezone.now() - timedelta(hours=1))

        response = admin_client.get("/api/v1/store/activity-logs/")

        assert [entry["details"] for entry in response.data["results"]] == ["second", "first"]

    def test_activity_logs_require_staff(self, api_client):
        response = api_client.get("/api/v1/store/activity-logs/")

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


@pytest.mark.django_db(transaction=True)
class TestReferralInfoEndpoint:
    """Tests for GET /api/v1/store/payment/referral-info/."""

    def setup_method(self):
        Order.objects.all().delete()
        Referral.objects.all().delete()

    def test_found(self, api_client):
        Referral.objects.create(name="Ahmed", referral_id="ahmed", phone="+966500000000")
        Order.objects.create(
            order_number="ORD-1",
            total_amount=Decimal("100.00"),
            currency="SAR",
            paymob_order_id=12345,
            referral_id="ahmed",
        )

        response = api_client.get(REFERRAL_INFO_URL, {"order_id": "12345"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"data": {"name": "Ahmed", "phone": "+966500000000"}}

    def test_unknown_order(self, api_client):
        response = api_client.get(REFERRAL_INFO_URL, {"order_id": "999"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"data": None}

    @pytest.mark.parametrize("params", [{}, {"order_id": ""}, {"order_id": "abc"}])
    def test_missing_or_bad_order_id(self, api_client, params):
        response = api_client.get(REFERRAL_INFO_URL, params)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"data": None}

    @patch('apps.store.domain.services.OrderRepository.get_by_paymob_order_id')
    def test_degraded(self, mock_get_order, api_client):
        mock_get_order.side_effect = DatabaseError("connection lost")

        response = api_client.get(REFERRAL_INFO_URL, {"order_id": "12345"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"data": None, "degraded": True}
