# checkout/views/rates.py

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.permissions import AllowAny

from checkout.models import ShippingRate
from checkout.serializers import ShippingRateSerializer
from checkout.throttles import PublicCatalogThrottle


class ShippingRateViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Shipping rate table (read-only, public).

    Filters:
    - ?country_code=DE
    - ?carrier=GLS
    - ?service_type=pickup
    - ?active=true

    Rates are managed through Django admin / seed_shipping_rates.
    """

    queryset = ShippingRate.objects.all()
    serializer_class = ShippingRateSerializer
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["country_code", "carrier", "service_type", "active"]
