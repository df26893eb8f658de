# checkout/services/vies.py

"""
VIES VAT NUMBER VALIDATION (EC REST API)

External collaborator for the VAT engine:
- clean + split a buyer-supplied VAT id ("DE 123 456 789" -> "DE", "123456789")
- ask VIES whether it is valid
- cache answers for 24h (VIES rate-limits aggressively)

Failure model:
- Malformed ids raise InvalidInput (caller can detect before calling).
- Transport / non-JSON failures raise VatValidationUnavailable.
  Callers must treat that as "not validated", never as "valid".
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, replace
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings
from django.core.cache import cache

from checkout.services.exceptions import InvalidInput, VatValidationUnavailable
from checkout.services.values import BuyerClassification, normalize_country_code

logger = logging.getLogger(__name__)

VIES_API_URL = "https://ec.europa.eu/taxation_customs/vies/rest-api/check-vat-number"
DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_CACHE_SECONDS = 24 * 60 * 60
CACHE_PREFIX = "vies:"
MIN_VAT_ID_LENGTH = 5

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


@dataclass(frozen=True)
class VatValidationResult:
    valid: bool
    country_code: str
    vat_number: str
    name: str | None = None
    address: str | None = None
    request_date: str | None = None
    cached: bool = False


def _vies_cfg() -> dict:
    cfg = (getattr(settings, "STOREFRONT", {}) or {}).get("VIES") or {}
    return cfg if isinstance(cfg, dict) else {}


def clean_vat_number(raw: str | None) -> str:
    return _NON_ALNUM.sub("", str(raw or "")).upper()


def parse_vat_id(raw: str | None) -> tuple[str, str]:
    cleaned = clean_vat_number(raw)
    if len(cleaned) < MIN_VAT_ID_LENGTH or not cleaned[:2].isalpha():
        raise InvalidInput("Invalid VAT format")
    return cleaned[:2], cleaned[2:]


def _blank_to_none(value) -> str | None:
    text = str(value or "").strip()
    if not text or text == "---":
        return None
    return text


def _post_json(url: str, body: dict, *, timeout: int) -> dict:
    req = Request(
        url,
        data=json.dumps(body).encode("utf-8"),
        headers={
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
        method="POST",
    )
    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        raise VatValidationUnavailable(f"VIES HTTPError: {e.code}") from e
    except URLError as e:
        raise VatValidationUnavailable(f"VIES URLError: {e.reason}") from e
    except (TimeoutError, OSError) as e:
        raise VatValidationUnavailable(f"VIES request failed: {e}") from e

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise VatValidationUnavailable("VIES returned non-JSON") from e
    if not isinstance(parsed, dict):
        raise VatValidationUnavailable("VIES returned an unexpected payload")
    return parsed


def validate_vat_number(raw: str | None) -> VatValidationResult:
    country_code, number = parse_vat_id(raw)
    cache_key = f"{CACHE_PREFIX}{country_code}{number}"

    hit = cache.get(cache_key)
    if hit:
        return replace(VatValidationResult(**hit), cached=True)

    cfg = _vies_cfg()
    data = _post_json(
        cfg.get("API_URL") or VIES_API_URL,
        {"countryCode": country_code, "vatNumber": number},
        timeout=int(cfg.get("TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS),
    )

    resp_country = str(data.get("countryCode") or country_code).strip().upper()
    result = VatValidationResult(
        valid=data.get("valid") is True,
        country_code=resp_country,
        vat_number=f"{resp_country}{str(data.get('vatNumber') or number).strip()}",
        name=_blank_to_none(data.get("name")),
        address=_blank_to_none(data.get("address")),
        request_date=_blank_to_none(data.get("requestDate")),
    )

    cache.set(cache_key, asdict(result), int(cfg.get("CACHE_SECONDS") or DEFAULT_CACHE_SECONDS))
    logger.info(
        "VIES validation completed",
        extra={"vat_country": country_code, "valid": result.valid},
    )
    return result


def classify_buyer(
    *,
    declared_b2b: bool,
    validation: VatValidationResult | None,
    buyer_country_code: str,
    seller_country_code: str,
) -> BuyerClassification:
    """
    A valid VIES answer makes the buyer a B2B customer.
    Without one, the declared B2B flag stays but the VAT id is unverified.

    Only a VAT id registered outside the seller country counts as validated
    for reverse charge; a seller-country id is a domestic registration.
    """
    seller = normalize_country_code(seller_country_code, "seller_country_code")
    valid = bool(validation and validation.valid)
    return BuyerClassification(
        is_b2b=bool(declared_b2b) or valid,
        vat_number_validated=valid and validation.country_code.strip().upper() != seller,
        buyer_country_code=buyer_country_code,
        seller_country_code=seller_country_code,
    )
