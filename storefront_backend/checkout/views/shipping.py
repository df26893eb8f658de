# checkout/views/shipping.py
"""
SHIPPING OPTIONS (PUBLIC CHECKOUT)

POST /api/checkout/shipping-options/

Called by the storefront whenever the destination country or the cart
changes. Returns the selectable shipping methods, one per carrier.

Empty "options" is a valid answer: the frontend must block submission.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from checkout.models import ShippingRate
from checkout.serializers import (
    ShippingOptionsRequestSerializer,
    ShippingOptionsResponseSerializer,
    cart_items_from,
)
from checkout.services.exceptions import InvalidInput
from checkout.services.pallet_mode import cart_total_weight, is_pallet_mode
from checkout.services.shipping import select_shipping_options
from checkout.services.values import normalize_country_code
from checkout.throttles import PublicWriteThrottle

logger = logging.getLogger(__name__)


def candidate_records(country_code: str, total_weight_kg) -> list:
    return [rate.to_record() for rate in ShippingRate.objects.candidates(country_code, total_weight_kg)]


class ShippingOptionsView(APIView):
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        request=ShippingOptionsRequestSerializer,
        responses={
            200: ShippingOptionsResponseSerializer,
            400: OpenApiResponse(description="Bad request / validation error"),
            429: OpenApiResponse(description="Rate limited"),
        },
        tags=["Checkout"],
    )
    def post(self, request):
        s = ShippingOptionsRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            country_code = normalize_country_code(data["country_code"])
            items = cart_items_from(data.get("items"))
            total_weight = cart_total_weight(items)
            pallet = is_pallet_mode(items)
            options = select_shipping_options(
                country_code,
                total_weight,
                pallet,
                candidate_records(country_code, total_weight),
            )
        except InvalidInput as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if not options:
            logger.warning(
                "No shipping methods available",
                extra={"country_code": country_code, "total_weight_kg": str(total_weight)},
            )

        payload = ShippingOptionsResponseSerializer(
            {
                "country_code": country_code,
                "total_weight_kg": total_weight,
                "is_pallet_mode": pallet,
                "options": options,
            }
        ).data
        return Response(payload, status=status.HTTP_200_OK)
