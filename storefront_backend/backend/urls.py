# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/

- /api/checkout/...   storefront checkout pricing (AllowAny, throttled)
- /api/health/        DB connectivity probe for the load balancer
- /api/schema/, /api/docs/  OpenAPI + Swagger

Django admin (shipping rate table) is mounted at settings.ADMIN_PATH.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, inline_serializer
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

HealthSerializer = inline_serializer(
    name="HealthStatus",
    fields={
        "status": serializers.CharField(),
        "db": serializers.CharField(),
        "error": serializers.CharField(required=False),
    },
)


@extend_schema(responses={200: OpenApiTypes.OBJECT})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(
        {
            "message": "Storefront Checkout API is running",
            "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
            "endpoints": {
                "shipping_options": "/api/checkout/shipping-options/",
                "quote": "/api/checkout/quote/",
                "validate_vat": "/api/checkout/validate-vat/",
                "shipping_rates": "/api/checkout/shipping-rates/",
            },
        }
    )


@extend_schema(responses={200: HealthSerializer, 503: HealthSerializer})
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """App is up and the rate table database answers a trivial query."""
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except OperationalError as e:
        return Response({"status": "degraded", "db": "down", "error": str(e)}, status=503)
    return Response({"status": "ok", "db": "ok"})


# keep the trailing slash; production uses a non-obvious path
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("checkout/", include("checkout.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
