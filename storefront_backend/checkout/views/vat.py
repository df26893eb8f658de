# checkout/views/vat.py

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from checkout.serializers import ValidateVatRequestSerializer, VatValidationSerializer
from checkout.services.exceptions import InvalidInput, VatValidationUnavailable
from checkout.services.vies import validate_vat_number
from checkout.throttles import PublicWriteThrottle

logger = logging.getLogger(__name__)


class ValidateVatView(APIView):
    """
    POST /api/checkout/validate-vat/

    Checks a buyer VAT id against VIES.
    - 400: malformed id
    - 503: VIES unreachable (the buyer stays unverified and is taxed)
    """

    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(
        request=ValidateVatRequestSerializer,
        responses={
            200: VatValidationSerializer,
            400: OpenApiResponse(description="Invalid VAT format"),
            503: OpenApiResponse(description="VIES service temporarily unavailable"),
        },
        tags=["Checkout"],
    )
    def post(self, request):
        s = ValidateVatRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = validate_vat_number(s.validated_data["vat_number"])
        except InvalidInput as exc:
            return Response({"valid": False, "detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except VatValidationUnavailable as exc:
            logger.warning("VIES unavailable", extra={"error": str(exc)})
            return Response(
                {
                    "valid": False,
                    "detail": "VIES service temporarily unavailable. Please try again later.",
                },
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        return Response(VatValidationSerializer(result).data, status=status.HTTP_200_OK)
