"""
ViewSets for the store API v1.
Admin CRUD for coupons and referrals, read-only orders and activity logs,
plus the public coupon validation and referral lookup endpoints.
"""

import logging

from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.store.api.v1.serializers import (
    ActivityLogSerializer,
    CouponRedeemSerializer,
    CouponSerializer,
    CouponValidationRequestSerializer,
    OrderSerializer,
    ReferralSerializer,
)
from apps.store.application.activity_log import log_activity
from apps.store.application.dto import CouponValidationDTO, ReferralInfoDTO
from apps.store.domain.exceptions import InvalidCouponRequest, MalformedCouponRecord
from apps.store.domain.services import CouponService, ReferralService
from apps.store.infrastructure.persistence.models import (
    ActivityAction,
    ActivityLog,
    ActivityResource,
    Coupon,
    Order,
    Referral,
)

logger = logging.getLogger(__name__)


@extend_schema(tags=['Coupons'])
class CouponViewSet(viewsets.ModelViewSet):
    """Coupon administration. Validation is public."""

    serializer_class = CouponSerializer
    permission_classes = [IsAdminUser]

    def get_queryset(self):
        queryset = Coupon.objects.all()
        coupon_status = self.request.query_params.get('status')
        if coupon_status:
            queryset = queryset.filter(status=coupon_status)
        return queryset

    def perform_create(self, serializer):
        coupon = serializer.save(created_by=str(self.request.user.pk))
        log_activity(
            self.request.user,
            ActivityAction.CREATE,
            ActivityResource.COUPON,
            f"Created coupon: {coupon.code}",
            resource_id=coupon.pk,
        )

    def perform_update(self, serializer):
        coupon = serializer.save()
        log_activity(
            self.request.user,
            ActivityAction.UPDATE,
            ActivityResource.COUPON,
            f"Updated coupon: {coupon.code}",
            resource_id=coupon.pk,
        )

    def perform_destroy(self, instance):
        code, pk = instance.code, instance.pk
        instance.delete()
        log_activity(
            self.request.user,
            ActivityAction.DELETE,
            ActivityResource.COUPON,
            f"Deleted coupon: {code}",
            resource_id=pk,
        )

    @extend_schema(
        request=CouponValidationRequestSerializer,
        responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT},
        description="Check whether a coupon can be used on an order and compute the discount"
    )
    @action(detail=False, methods=['post'], url_path='validate', permission_classes=[AllowAny])
    def validate(self, request):
        serializer = CouponValidationRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Invalid request", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        try:
            result = CouponService.validate(
                code=data['code'],
                order_amount=data['order_amount'],
                currency=data['currency'],
                product_id=data.get('product_id') or None,
                user_ref=data.get('user_ref') or None,
            )
        except InvalidCouponRequest as e:
            return Response(
                {"error": "Invalid request", "details": {e.field: [str(e)]}},
                status=status.HTTP_400_BAD_REQUEST
            )
        except MalformedCouponRecord:
            logger.exception("Error validating coupon %s", data['code'])
            return Response(
                {"error": "Failed to validate coupon"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        body = CouponValidationDTO.from_validation(result).as_response()
        if not result.valid:
            return Response(body, status=status.HTTP_400_BAD_REQUEST)
        return Response(body)

    @extend_schema(
        request=CouponRedeemSerializer,
        responses={200: OpenApiTypes.OBJECT, 409: OpenApiTypes.OBJECT},
        description="Count one use of a coupon after a successful payment"
    )
    @action(detail=False, methods=['post'], url_path='redeem')
    def redeem(self, request):
        serializer = CouponRedeemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        redeemed = CouponService.redeem(
            data['code'],
            user_ref=data.get('user_ref'),
            order_number=data.get('order_number'),
        )
        if not redeemed:
            return Response(
                {"redeemed": False, "error": "Coupon not found or usage limit reached"},
                status=status.HTTP_409_CONFLICT
            )
        return Response({"redeemed": True})


@extend_schema(tags=['Referrals'])
class ReferralViewSet(viewsets.ModelViewSet):

    queryset = Referral.objects.all()
    serializer_class = ReferralSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [filters.SearchFilter]
    search_fields = ['name', 'referral_id', 'phone']

    def perform_create(self, serializer):
        referral = serializer.save()
        log_activity(
            self.request.user,
            ActivityAction.CREATE,
            ActivityResource.REFERRAL,
            f"Created referral: {referral.name} ({referral.referral_id})",
            resource_id=referral.pk,
        )

    def perform_update(self, serializer):
        referral = serializer.save()
        log_activity(
            self.request.user,
            ActivityAction.UPDATE,
            ActivityResource.REFERRAL,
            f"Updated referral: {referral.name} ({referral.referral_id})",
            resource_id=referral.pk,
        )

    def perform_destroy(self, instance):
        label, pk = f"{instance.name} ({instance.referral_id})", instance.pk
        instance.delete()
        log_activity(
            self.request.user,
            ActivityAction.DELETE,
            ActivityResource.REFERRAL,
            f"Deleted referral: {label}",
            resource_id=pk,
        )


@extend_schema(tags=['Orders'])
class OrderViewSet(viewsets.ReadOnlyModelViewSet):

    serializer_class = OrderSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [filters.SearchFilter]
    search_fields = ['order_number', 'referral_id', 'coupon_code']

    def get_queryset(self):
        queryset = Order.objects.all()
        order_status = self.request.query_params.get('status')
        if order_status:
            queryset = queryset.filter(status=order_status)
        return queryset


@extend_schema(
    tags=['Activity logs'],
    parameters=[
        OpenApiParameter("action", OpenApiTypes.STR, description="Filter by action (create, update, ...)"),
        OpenApiParameter("resource", OpenApiTypes.STR, description="Filter by resource (coupon, referral, ...)"),
        OpenApiParameter("user_id", OpenApiTypes.STR, description="Filter by acting user"),
    ],
)
class ActivityLogViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Newest entries first."""

    serializer_class = ActivityLogSerializer
    permission_classes = [IsAdminUser]

    def get_queryset(self):
        queryset = ActivityLog.objects.order_by('-created_at')
        for param in ('action', 'resource', 'user_id'):
            value = self.request.query_params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})
        return queryset


@extend_schema(tags=['Payment'])
class PaymentViewSet(viewsets.ViewSet):

    @extend_schema(
        parameters=[
            OpenApiParameter("order_id", OpenApiTypes.INT, description="Paymob order id"),
        ],
        responses={200: OpenApiTypes.OBJECT},
        description="Name and phone of the referral credited for a paid order, or null"
    )
    @action(detail=False, methods=['get'], url_path='referral-info', permission_classes=[AllowAny])
    def referral_info(self, request):
        order_id = (request.query_params.get('order_id') or '').strip()
        try:
            paymob_order_id = int(order_id)
        except ValueError:
            return Response(ReferralInfoDTO().as_response())

        lookup = ReferralService.lookup_referral_for_order(paymob_order_id)
        return Response(ReferralInfoDTO.from_lookup(lookup).as_response())
