# checkout/tests/test_vies.py

from unittest import mock
from urllib.error import URLError

from django.core.cache import cache
from django.test import SimpleTestCase

from checkout.services.exceptions import InvalidInput, VatValidationUnavailable
from checkout.services.vies import (
    VatValidationResult,
    classify_buyer,
    clean_vat_number,
    parse_vat_id,
    validate_vat_number,
)

VALID_RESPONSE = {
    "countryCode": "DE",
    "vatNumber": "123456789",
    "valid": True,
    "name": "Solar GmbH",
    "address": "Hauptstrasse 1, Berlin",
    "requestDate": "2024-05-01T10:00:00.000Z",
}


class VatIdParsingTests(SimpleTestCase):
    def test_clean_strips_separators(self):
        self.assertEqual(clean_vat_number(" de 123-456.789 "), "DE123456789")

    def test_parse_splits_country_prefix(self):
        self.assertEqual(parse_vat_id("SI12345678"), ("SI", "12345678"))

    def test_too_short_rejected(self):
        with self.assertRaises(InvalidInput):
            parse_vat_id("DE12")

    def test_numeric_prefix_rejected(self):
        with self.assertRaises(InvalidInput):
            parse_vat_id("123456789")


class ViesClientTests(SimpleTestCase):
    """
    VIES client tests.

    GUARANTEES:
    - A VIES answer is cached and reused
    - Transport failures raise VatValidationUnavailable (never "valid")
    - "---" placeholders come back as None
    """

    def setUp(self):
        cache.clear()

    def tearDown(self):
        cache.clear()

    @mock.patch("checkout.services.vies._post_json", return_value=dict(VALID_RESPONSE))
    def test_valid_number(self, post):
        result = validate_vat_number("DE 123456789")

        self.assertTrue(result.valid)
        self.assertEqual(result.country_code, "DE")
        self.assertEqual(result.vat_number, "DE123456789")
        self.assertEqual(result.name, "Solar GmbH")
        self.assertFalse(result.cached)
        post.assert_called_once()
        self.assertEqual(post.call_args.args[1], {"countryCode": "DE", "vatNumber": "123456789"})

    @mock.patch("checkout.services.vies._post_json", return_value=dict(VALID_RESPONSE))
    def test_second_lookup_is_cached(self, post):
        validate_vat_number("DE123456789")
        again = validate_vat_number("de-123-456-789")

        self.assertTrue(again.cached)
        self.assertTrue(again.valid)
        post.assert_called_once()

    @mock.patch(
        "checkout.services.vies._post_json",
        return_value={"countryCode": "FR", "vatNumber": "00000000000", "valid": False, "name": "---", "address": "---"},
    )
    def test_invalid_number(self, post):
        result = validate_vat_number("FR00000000000")

        self.assertFalse(result.valid)
        self.assertIsNone(result.name)
        self.assertIsNone(result.address)

    @mock.patch("checkout.services.vies._post_json", return_value={"valid": "true"})
    def test_only_boolean_true_is_valid(self, post):
        self.assertFalse(validate_vat_number("AT12345678").valid)

    @mock.patch("checkout.services.vies.urlopen", side_effect=URLError("connection refused"))
    def test_network_error_is_unavailable(self, _urlopen):
        with self.assertRaises(VatValidationUnavailable):
            validate_vat_number("DE123456789")

    @mock.patch("checkout.services.vies.urlopen")
    def test_non_json_is_unavailable(self, urlopen):
        resp = urlopen.return_value.__enter__.return_value
        resp.read.return_value = b"<html>maintenance</html>"

        with self.assertRaises(VatValidationUnavailable):
            validate_vat_number("DE123456789")

    @mock.patch("checkout.services.vies.urlopen", side_effect=URLError("down"))
    def test_failures_are_not_cached(self, _urlopen):
        with self.assertRaises(VatValidationUnavailable):
            validate_vat_number("DE123456789")
        self.assertIsNone(cache.get("vies:DE123456789"))

    def test_malformed_id_never_calls_vies(self):
        with mock.patch("checkout.services.vies._post_json") as post:
            with self.assertRaises(InvalidInput):
                validate_vat_number("xx")
            post.assert_not_called()


class ClassifyBuyerTests(SimpleTestCase):
    def _result(self, valid):
        return VatValidationResult(valid=valid, country_code="DE", vat_number="DE123456789")

    def test_valid_vat_id_makes_validated_b2b(self):
        buyer = classify_buyer(
            declared_b2b=False,
            validation=self._result(True),
            buyer_country_code="DE",
            seller_country_code="SI",
        )
        self.assertTrue(buyer.is_b2b)
        self.assertTrue(buyer.vat_number_validated)

    def test_declared_b2b_without_validation_is_unverified(self):
        buyer = classify_buyer(
            declared_b2b=True,
            validation=None,
            buyer_country_code="DE",
            seller_country_code="SI",
        )
        self.assertTrue(buyer.is_b2b)
        self.assertFalse(buyer.vat_number_validated)

    def test_invalid_answer_is_unverified(self):
        buyer = classify_buyer(
            declared_b2b=True,
            validation=self._result(False),
            buyer_country_code="DE",
            seller_country_code="SI",
        )
        self.assertFalse(buyer.vat_number_validated)

    def test_seller_country_vat_id_is_not_validated_for_reverse_charge(self):
        result = VatValidationResult(valid=True, country_code="SI", vat_number="SI12345678")
        buyer = classify_buyer(
            declared_b2b=False,
            validation=result,
            buyer_country_code="DE",
            seller_country_code="si",
        )
        self.assertTrue(buyer.is_b2b)
        self.assertFalse(buyer.vat_number_validated)
