# checkout/tests/test_totals.py

from decimal import Decimal

from django.test import SimpleTestCase

from checkout.services.exceptions import InvalidInput
from checkout.services.totals import compute_order_total
from checkout.services.values import VatDecision

TAXED = VatDecision(applies_vat=True, effective_rate=Decimal("0.22"))
UNTAXED = VatDecision(applies_vat=False, effective_rate=Decimal("0"))


class OrderTotalTests(SimpleTestCase):
    """
    Order total tests.

    GUARANTEES:
    - Shipping is part of the VAT base
    - total = subtotal + shipping + vat
    - Negative amounts are rejected
    - Values are not rounded inside the calculator
    """

    def test_taxed_total(self):
        r = compute_order_total(Decimal("100"), Decimal("10"), TAXED)

        self.assertEqual(r.vat_amount, Decimal("24.20"))
        self.assertEqual(r.total, Decimal("134.20"))
        self.assertEqual(r.vat_rate, Decimal("0.22"))

    def test_reverse_charge_total(self):
        r = compute_order_total(Decimal("100"), Decimal("10"), UNTAXED)

        self.assertEqual(r.vat_amount, Decimal("0"))
        self.assertEqual(r.total, Decimal("110.00"))
        self.assertEqual(r.vat_rate, Decimal("0"))

    def test_total_is_sum_of_parts(self):
        r = compute_order_total(Decimal("19.99"), Decimal("4.50"), TAXED)
        self.assertEqual(r.total, r.subtotal_net + r.shipping_cost + r.vat_amount)

    def test_full_precision_then_rounded_for_display(self):
        r = compute_order_total(Decimal("0.05"), Decimal("0"), TAXED)

        self.assertEqual(r.vat_amount, Decimal("0.0110"))
        shown = r.rounded()
        self.assertEqual(shown.vat_amount, Decimal("0.01"))
        self.assertEqual(shown.total, Decimal("0.06"))
        self.assertEqual(shown.vat_rate, Decimal("0.22"))

    def test_rounding_is_half_up(self):
        r = compute_order_total(Decimal("0.125"), Decimal("0"), UNTAXED).rounded()
        self.assertEqual(r.subtotal_net, Decimal("0.13"))

    def test_zero_cart(self):
        r = compute_order_total(Decimal("0"), Decimal("0"), TAXED)
        self.assertEqual(r.total, Decimal("0"))

    def test_idempotent(self):
        a = compute_order_total(Decimal("123.45"), Decimal("6.78"), TAXED)
        b = compute_order_total(Decimal("123.45"), Decimal("6.78"), TAXED)
        self.assertEqual(a, b)

    def test_negative_subtotal_rejected(self):
        with self.assertRaises(InvalidInput):
            compute_order_total(Decimal("-1"), Decimal("0"), TAXED)

    def test_negative_shipping_rejected(self):
        with self.assertRaises(InvalidInput):
            compute_order_total(Decimal("1"), Decimal("-0.01"), TAXED)

    def test_missing_amount_rejected(self):
        with self.assertRaises(InvalidInput):
            compute_order_total(None, Decimal("0"), TAXED)
