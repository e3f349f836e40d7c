"""
ViewSets for the exchange API v1.
Each ViewSet exposes standard CRUD operations via DRF router.
"""

import logging
from dataclasses import asdict
from decimal import Decimal, InvalidOperation

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from core.settings import DEFAULT_BASE_CURRENCY
from apps.exchange.api.v1.serializers import (
    CurrencyExchangeRateSerializer,
    CurrencySerializer,
    ProviderSerializer,
)
from apps.exchange.application.dto import RateTableDTO
from apps.exchange.domain.exceptions import RateSourceUnavailable, UnknownCurrencyError
from apps.exchange.domain.models import LookupStatus
from apps.exchange.domain.services import ExchangeRateService
from apps.exchange.infrastructure.persistence.models import (
    Currency,
    CurrencyExchangeRate,
    Provider,
)

logger = logging.getLogger(__name__)


def _parse_amount(amount_str):
    """Return (amount, error_response)."""
    try:
        amount = Decimal(amount_str)
    except (InvalidOperation, TypeError, ValueError):
        return None, Response(
            {"error": "Invalid amount. Must be a number"},
            status=status.HTTP_400_BAD_REQUEST
        )

    if not amount.is_finite() or amount <= 0:
        return None, Response(
            {"error": "Amount must be positive"},
            status=status.HTTP_400_BAD_REQUEST
        )

    return amount, None


@extend_schema(tags=['Currencies'])
class CurrencyViewSet(viewsets.ModelViewSet):
    """Currency catalog. Anyone can read it, only staff can change it."""

    queryset = Currency.objects.all()
    serializer_class = CurrencySerializer
    pagination_class = None

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAdminUser()]


@extend_schema(tags=['Rates'])
class CurrencyExchangeRateViewSet(viewsets.ReadOnlyModelViewSet):

    queryset = CurrencyExchangeRate.objects.select_related(
        "source_currency",
        "exchanged_currency",
    ).all()
    serializer_class = CurrencyExchangeRateSerializer
    permission_classes = [IsAdminUser]

    @extend_schema(
        parameters=[
            OpenApiParameter("base", OpenApiTypes.STR, description="Base currency code (defaults to the store currency)"),
        ],
        description="Get the rate table for a base currency. Degrades to an empty table when providers are down."
    )
    @action(detail=False, methods=['get'], url_path='latest', permission_classes=[AllowAny])
    def latest(self, request):
        base = (request.query_params.get('base') or DEFAULT_BASE_CURRENCY).strip().upper()

        lookup = ExchangeRateService.lookup_rates(base)

        if lookup.status == LookupStatus.NOT_FOUND:
            return Response(
                {"error": lookup.reason},
                status=status.HTTP_404_NOT_FOUND
            )

        if lookup.is_degraded:
            logger.warning("Serving degraded rates for %s: %s", base, lookup.reason)

        return Response(asdict(RateTableDTO.from_lookup(lookup)))

    @extend_schema(
        parameters=[
            OpenApiParameter("base", OpenApiTypes.STR, required=True, description="Source currency code (e.g. SAR)"),
            OpenApiParameter("target", OpenApiTypes.STR, required=True, description="Target currency code (e.g. USD)"),
            OpenApiParameter("amount", OpenApiTypes.DECIMAL, required=True, description="Amount to convert"),
        ],
        description="Convert amount from one currency to another"
    )
    @action(detail=False, methods=['get'], url_path='convert', permission_classes=[AllowAny])
    def convert(self, request):
        """
        Convert an amount from one currency to another.
        """
        base = request.query_params.get('base')
        target = request.query_params.get('target')
        amount_str = request.query_params.get('amount')

        # Validation
        if not all([base, target, amount_str]):
            return Response(
                {"error": "base, target, and amount are required"},
                status=status.HTTP_400_BAD_REQUEST
            )

        amount, error_response = _parse_amount(amount_str)
        if error_response is not None:
            return error_response

        try:
            converted = ExchangeRateService.convert(amount, base, target)
        except UnknownCurrencyError as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)
        except RateSourceUnavailable as e:
            return Response({"error": str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({
            "from": base.strip().upper(),
            "to": target.strip().upper(),
            "amount": str(amount),
            "converted": str(converted),
        })

    @extend_schema(
        parameters=[
            OpenApiParameter("base", OpenApiTypes.STR, required=True, description="Source currency code (e.g. SAR)"),
            OpenApiParameter("targets", OpenApiTypes.STR, required=True, description="Comma separated target codes (e.g. USD,EGP)"),
            OpenApiParameter("amount", OpenApiTypes.DECIMAL, required=True, description="Amount to convert"),
        ],
        description="Convert one amount into several currencies at once"
    )
    @action(detail=False, methods=['get'], url_path='convert-many', permission_classes=[AllowAny])
    def convert_many(self, request):
        base = request.query_params.get('base')
        targets_str = request.query_params.get('targets')
        amount_str = request.query_params.get('amount')

        if not all([base, targets_str, amount_str]):
            return Response(
                {"error": "base, targets, and amount are required"},
                status=status.HTTP_400_BAD_REQUEST
            )

        amount, error_response = _parse_amount(amount_str)
        if error_response is not None:
            return error_response

        try:
            converted = ExchangeRateService.convert_to_many(amount, base, targets_str.split(","))
        except UnknownCurrencyError as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)
        except RateSourceUnavailable as e:
            return Response({"error": str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({
            "base": base.strip().upper(),
            "amount": str(amount),
            "converted": {code: str(value) for code, value in converted.items()},
        })


@extend_schema(tags=['Providers'])
class ProviderViewSet(viewsets.ModelViewSet):

    queryset = Provider.objects.all()
    serializer_class = ProviderSerializer
    permission_classes = [IsAdminUser]
    pagination_class = None
