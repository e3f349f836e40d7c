from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.store.api.v1.views import (
    ActivityLogViewSet,
    CouponViewSet,
    OrderViewSet,
    PaymentViewSet,
    ReferralViewSet,
)

router = DefaultRouter()
router.register(r'coupons', CouponViewSet, basename='coupon')
router.register(r'referrals', ReferralViewSet, basename='referral')
router.register(r'orders', OrderViewSet, basename='order')
router.register(r'activity-logs', ActivityLogViewSet, basename='activity-log')
router.register(r'payment', PaymentViewSet, basename='payment')

urlpatterns = [
    path('', include(router.urls)),
]
