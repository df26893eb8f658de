# checkout/tests/test_api.py

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from checkout.models import ShippingRate
from checkout.serializers import MAX_CART_LINES, MAX_LINE_QUANTITY
from checkout.services.exceptions import VatValidationUnavailable
from checkout.services.vies import VatValidationResult


def make_rate(country_code, carrier, rate_eur, *, lo="0", hi="40", service_type="standard", active=True):
    return ShippingRate.objects.create(
        country_code=country_code,
        carrier=carrier,
        service_type=service_type,
        min_weight_kg=Decimal(lo),
        max_weight_kg=Decimal(hi),
        rate_eur=Decimal(rate_eur),
        active=active,
    )


def cart(quantity=2, unit_price="50.00", weight_kg="1.2", subcategory=None):
    return [
        {
            "sku": "TS4-A-O",
            "quantity": quantity,
            "unit_price": unit_price,
            "weight_kg": weight_kg,
            "subcategory": subcategory,
            "name": "TS4-A-O Optimizer",
        }
    ]


class ShippingOptionsApiTests(TestCase):
    """
    POST /api/checkout/shipping-options/

    GUARANTEES:
    - Public (AllowAny)
    - One option per carrier, cheapest first-seen bracket
    - Pallet carts only see freight
    - Empty options are a 200, not an error
    """

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("checkout:shipping-options")

        self.gls_small = make_rate("SI", "GLS", "4.50", lo="0", hi="2")
        self.gls_mid = make_rate("SI", "GLS", "5.50", lo="2", hi="5")
        self.pickup = make_rate("SI", "Personal Pick-up", "0.00", hi="999", service_type="pickup")
        self.freight = make_rate("SI", "InterEuropa", "65.00", hi="2000")

    def test_parcel_cart(self):
        res = self.client.post(self.url, {"country_code": "si", "items": cart()}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["country_code"], "SI")
        self.assertFalse(res.data["is_pallet_mode"])
        carriers = sorted(o["carrier"] for o in res.data["options"])
        self.assertEqual(carriers, ["GLS", "Personal Pick-up"])
        gls = next(o for o in res.data["options"] if o["carrier"] == "GLS")
        self.assertEqual(gls["id"], str(self.gls_mid.id))
        self.assertEqual(gls["rate_amount"], "5.50")

    def test_pallet_cart(self):
        items = cart(quantity=50, weight_kg="0.5", subcategory="GO Junction")
        res = self.client.post(self.url, {"country_code": "SI", "items": items}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertTrue(res.data["is_pallet_mode"])
        carriers = sorted(o["carrier"] for o in res.data["options"])
        self.assertEqual(carriers, ["InterEuropa", "Personal Pick-up"])

    def test_no_rates_is_empty_200(self):
        res = self.client.post(self.url, {"country_code": "PT", "items": cart()}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["options"], [])

    def test_inactive_rates_are_ignored(self):
        make_rate("HR", "GLS", "9.50", active=False)
        res = self.client.post(self.url, {"country_code": "HR", "items": cart()}, format="json")

        self.assertEqual(res.data["options"], [])

    def test_negative_price_rejected(self):
        res = self.client.post(self.url, {"country_code": "SI", "items": cart(unit_price="-1")}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bad_country_rejected(self):
        res = self.client.post(self.url, {"country_code": "1X", "items": cart()}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_heaviest_accepted_cart_is_answered(self):
        items = cart(quantity=MAX_LINE_QUANTITY, weight_kg="9999999.999")
        res = self.client.post(self.url, {"country_code": "SI", "items": items}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["total_weight_kg"], "999999999900.000")
        self.assertEqual(res.data["options"], [])

    def test_quantity_over_limit_rejected(self):
        items = cart(quantity=MAX_LINE_QUANTITY + 1, weight_kg="999999.999")
        res = self.client.post(self.url, {"country_code": "SI", "items": items}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_too_many_cart_lines_rejected(self):
        items = [dict(cart()[0], sku=f"SKU-{i}") for i in range(MAX_CART_LINES + 1)]
        res = self.client.post(self.url, {"country_code": "SI", "items": items}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


class QuoteApiTests(TestCase):
    """
    POST /api/checkout/quote/

    GUARANTEES:
    - Totals come back as 2dp strings
    - Valid VAT id for a cross-border buyer => reverse charge
    - VIES outage => buyer stays unverified and is taxed
    - No shipping options => can_submit is False
    """

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.url = reverse("checkout:quote")
        self.si_gls = make_rate("SI", "GLS", "10.00")
        self.de_gls = make_rate("DE", "GLS", "10.00")

    def test_domestic_b2c_quote(self):
        res = self.client.post(
            self.url,
            {"country_code": "SI", "items": cart(), "market_key": "SI"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["market_key"], "SI")
        self.assertEqual(res.data["pricing"]["subtotal_net"], "100.00")
        self.assertEqual(res.data["pricing"]["shipping_cost"], "10.00")
        self.assertEqual(res.data["pricing"]["vat_amount"], "24.20")
        self.assertEqual(res.data["pricing"]["total"], "134.20")
        self.assertEqual(res.data["selected_rate"]["id"], str(self.si_gls.id))
        self.assertTrue(res.data["can_submit"])
        self.assertFalse(res.data["is_b2b"])
        self.assertFalse(res.data["vat_validation"]["checked"])

    @mock.patch("checkout.views.quote.validate_vat_number")
    def test_reverse_charge_with_valid_vat_id(self, validate):
        validate.return_value = VatValidationResult(valid=True, country_code="DE", vat_number="DE123456789")

        res = self.client.post(
            self.url,
            {
                "country_code": "DE",
                "items": cart(),
                "is_b2b": True,
                "vat_number": "DE123456789",
                "market_key": "DE",
            },
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertFalse(res.data["vat_decision"]["applies_vat"])
        self.assertEqual(res.data["pricing"]["vat_amount"], "0.00")
        self.assertEqual(res.data["pricing"]["total"], "110.00")
        self.assertEqual(res.data["transaction_type"], "eu")
        self.assertTrue(res.data["vat_validation"]["result"]["valid"])

    @mock.patch("checkout.views.quote.validate_vat_number")
    def test_vies_outage_taxes_buyer(self, validate):
        validate.side_effect = VatValidationUnavailable("down")

        res = self.client.post(
            self.url,
            {
                "country_code": "DE",
                "items": cart(),
                "is_b2b": True,
                "vat_number": "DE123456789",
                "market_key": "DE",
            },
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertTrue(res.data["vat_decision"]["applies_vat"])
        self.assertEqual(res.data["vat_decision"]["effective_rate"], "0.1900")
        self.assertEqual(res.data["pricing"]["total"], "130.90")
        self.assertIsNotNone(res.data["vat_validation"]["error"])

    def test_malformed_vat_id_taxes_buyer(self):
        res = self.client.post(
            self.url,
            {"country_code": "DE", "items": cart(), "is_b2b": True, "vat_number": "12", "market_key": "DE"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertTrue(res.data["vat_decision"]["applies_vat"])
        self.assertEqual(res.data["vat_validation"]["error"], "Invalid VAT format")

    def test_market_from_header(self):
        res = self.client.post(
            self.url,
            {"country_code": "SI", "items": cart()},
            format="json",
            HTTP_X_MARKET_KEY="HU",
        )

        self.assertEqual(res.data["market_key"], "HU")
        self.assertEqual(res.data["currency"], "HUF")
        self.assertEqual(res.data["vat_decision"]["effective_rate"], "0.2700")

    def test_no_shipping_blocks_submission(self):
        res = self.client.post(self.url, {"country_code": "PT", "items": cart()}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertFalse(res.data["can_submit"])
        self.assertIsNone(res.data["selected_rate"])
        self.assertTrue(res.data["warnings"])

    def test_duplicate_sku_rejected(self):
        res = self.client.post(self.url, {"country_code": "SI", "items": cart() + cart()}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_largest_accepted_cart_is_priced(self):
        items = cart(quantity=MAX_LINE_QUANTITY, unit_price="99999999.9999", weight_kg="9999999.999")
        res = self.client.post(self.url, {"country_code": "SI", "items": items}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["pricing"]["subtotal_net"], "9999999999999.99")
        self.assertTrue(res.data["is_pallet_mode"])

    def test_quantity_over_limit_rejected(self):
        res = self.client.post(
            self.url,
            {"country_code": "SI", "items": cart(quantity=MAX_LINE_QUANTITY + 1, unit_price="99999.99")},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    @mock.patch("checkout.views.quote.validate_vat_number")
    def test_seller_country_vat_id_is_not_reverse_charged(self, validate):
        validate.return_value = VatValidationResult(valid=True, country_code="SI", vat_number="SI12345678")

        res = self.client.post(
            self.url,
            {
                "country_code": "DE",
                "items": cart(),
                "is_b2b": True,
                "vat_number": "SI12345678",
                "market_key": "DE",
            },
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertTrue(res.data["is_b2b"])
        self.assertTrue(res.data["vat_decision"]["applies_vat"])
        self.assertEqual(res.data["pricing"]["total"], "130.90")


class ValidateVatApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.url = reverse("checkout:validate-vat")

    @mock.patch("checkout.views.vat.validate_vat_number")
    def test_valid(self, validate):
        validate.return_value = VatValidationResult(
            valid=True, country_code="AT", vat_number="ATU12345678", name="Sonne GmbH"
        )
        res = self.client.post(self.url, {"vat_number": "ATU12345678"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["valid"])
        self.assertEqual(res.data["name"], "Sonne GmbH")

    def test_malformed_is_400(self):
        res = self.client.post(self.url, {"vat_number": "123"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(res.data["valid"])

    @mock.patch("checkout.views.vat.validate_vat_number", side_effect=VatValidationUnavailable("down"))
    def test_outage_is_503(self, _validate):
        res = self.client.post(self.url, {"vat_number": "ATU12345678"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertFalse(res.data["valid"])


class ShippingRatesApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        make_rate("DE", "GLS", "12.50")
        make_rate("AT", "GLS", "11.50")

    def test_list_is_public_and_filterable(self):
        res = self.client.get(reverse("checkout:shipping-rates-list"), {"country_code": "DE"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["rate_eur"], "12.50")

    def test_write_not_allowed(self):
        res = self.client.post(reverse("checkout:shipping-rates-list"), {}, format="json")
        self.assertEqual(res.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
