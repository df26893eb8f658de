# checkout/urls.py

"""
CHECKOUT API URLS

Base path (mounted in backend/urls.py):
    /api/checkout/

- POST /api/checkout/shipping-options/
- POST /api/checkout/quote/
- POST /api/checkout/validate-vat/
- GET  /api/checkout/shipping-rates/
"""

from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from checkout.views import (
    CheckoutQuoteView,
    ShippingOptionsView,
    ShippingRateViewSet,
    ValidateVatView,
)

app_name = "checkout"

router = DefaultRouter()
router.register(r"shipping-rates", ShippingRateViewSet, basename="shipping-rates")

urlpatterns = [
    path("shipping-options/", ShippingOptionsView.as_view(), name="shipping-options"),
    path("quote/", CheckoutQuoteView.as_view(), name="quote"),
    path("validate-vat/", ValidateVatView.as_view(), name="validate-vat"),
    path("", include(router.urls)),
]
