# checkout/views/quote.py
"""
CHECKOUT QUOTE (PUBLIC)

POST /api/checkout/quote/

Server-side pricing of the current checkout snapshot:
- shipping methods + the selected one
- VAT treatment for the buyer
- totals (2dp strings)

VAT id handling:
- vat_number present -> VIES check (cached)
- VIES down or malformed id -> buyer stays unverified (taxed); reported
  under "vat_validation", never turned into a 0% rate.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from checkout.markets import MARKETS, get_market, resolve_market
from checkout.serializers import (
    QuoteRequestSerializer,
    QuoteResponseSerializer,
    VatValidationSerializer,
    cart_items_from,
)
from checkout.services.exceptions import InvalidInput, VatValidationUnavailable
from checkout.services.pallet_mode import cart_total_weight
from checkout.services.quote import build_checkout_quote
from checkout.services.values import normalize_country_code
from checkout.services.vies import classify_buyer, validate_vat_number
from checkout.throttles import PublicWriteThrottle
from checkout.views.shipping import candidate_records

logger = logging.getLogger(__name__)


def _check_vat_number(vat_number: str) -> tuple[object | None, dict]:
    if not vat_number:
        return None, {"checked": False, "result": None, "error": None}

    try:
        result = validate_vat_number(vat_number)
    except InvalidInput as exc:
        return None, {"checked": True, "result": None, "error": str(exc)}
    except VatValidationUnavailable as exc:
        logger.warning("VIES unavailable during quote; buyer treated as unverified", extra={"error": str(exc)})
        return None, {"checked": True, "result": None, "error": "VIES service temporarily unavailable"}

    return result, {"checked": True, "result": VatValidationSerializer(result).data, "error": None}


class CheckoutQuoteView(APIView):
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        request=QuoteRequestSerializer,
        responses={
            200: QuoteResponseSerializer,
            400: OpenApiResponse(description="Bad request / validation error"),
            429: OpenApiResponse(description="Rate limited"),
        },
        description=(
            "Price the current checkout: shipping methods, VAT treatment and totals. "
            "Recompute on every change of destination, cart or VAT id."
        ),
        tags=["Checkout"],
    )
    def post(self, request):
        s = QuoteRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        market_key = (data.get("market_key") or "").strip().upper()
        market = get_market(market_key) if market_key in MARKETS else resolve_market(request)

        validation, vat_validation = _check_vat_number((data.get("vat_number") or "").strip())

        try:
            country_code = normalize_country_code(data["country_code"])
            items = cart_items_from(data.get("items"))
            classification = classify_buyer(
                declared_b2b=data.get("is_b2b", False),
                validation=validation,
                buyer_country_code=country_code,
                seller_country_code=market.supplier_country,
            )
            quote = build_checkout_quote(
                items=items,
                country_code=country_code,
                market=market,
                classification=classification,
                candidate_rates=candidate_records(country_code, cart_total_weight(items)),
                selected_rate_id=data.get("shipping_rate_id"),
            )
        except InvalidInput as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        payload = QuoteResponseSerializer(replace(quote, pricing=quote.pricing.rounded())).data
        payload["is_b2b"] = classification.is_b2b
        payload["vat_validation"] = vat_validation
        return Response(payload, status=status.HTTP_200_OK)
