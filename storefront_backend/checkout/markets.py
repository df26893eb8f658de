# checkout/markets.py

"""
MARKETS (STOREFRONT DEPLOYMENTS)

One market per storefront domain: currency, standard VAT rate, EU
membership and the country we ship/invoice from.

Resolution:
- X-Market-Key request header wins (set by the edge proxy).
- Otherwise the request host is mapped through DOMAIN_TO_MARKET.
- Unknown keys/hosts (localhost, previews) fall back to SHOP.

Seller country:
- Every market is supplied from Slovenia.
- settings.STOREFRONT["SELLER_COUNTRY_CODE"] overrides it globally.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from django.conf import settings

DEFAULT_MARKET_KEY = "SHOP"
DEFAULT_SUPPLIER_COUNTRY = "SI"

TRANSACTION_DOMESTIC = "domestic"
TRANSACTION_EU = "eu"
TRANSACTION_EXPORT = "export"

EU_COUNTRY_CODES = frozenset(
    {
        "AT", "BE", "BG", "CY", "CZ", "DE", "DK", "EE", "ES", "FI", "FR", "GR", "HR", "HU",
        "IE", "IT", "LT", "LU", "LV", "MT", "NL", "PL", "PT", "RO", "SE", "SI", "SK",
    }
)


@dataclass(frozen=True)
class Market:
    key: str
    country: str
    country_name: str
    currency: str
    vat_rate: Decimal
    is_eu: bool = True
    supplier_country: str = DEFAULT_SUPPLIER_COUNTRY


def _m(key, country, name, currency, rate, is_eu=True) -> Market:
    return Market(
        key=key,
        country=country,
        country_name=name,
        currency=currency,
        vat_rate=Decimal(rate),
        is_eu=is_eu,
    )


MARKETS: dict[str, Market] = {
    m.key: m
    for m in (
        _m("SI", "SI", "Slovenia", "EUR", "0.22"),
        _m("DE", "DE", "Germany", "EUR", "0.19"),
        _m("FR", "FR", "France", "EUR", "0.20"),
        _m("IT", "IT", "Italy", "EUR", "0.22"),
        _m("ES", "ES", "Spain", "EUR", "0.21"),
        _m("AT", "AT", "Austria", "EUR", "0.20"),
        _m("CH", "CH", "Switzerland", "CHF", "0.081", is_eu=False),
        _m("BE", "BE", "Belgium", "EUR", "0.21"),
        _m("PL", "PL", "Poland", "PLN", "0.23"),
        _m("CZ", "CZ", "Czech Republic", "CZK", "0.21"),
        _m("SK", "SK", "Slovakia", "EUR", "0.23"),
        _m("HR", "HR", "Croatia", "EUR", "0.25"),
        _m("SE", "SE", "Sweden", "SEK", "0.25"),
        _m("DK", "DK", "Denmark", "DKK", "0.25"),
        _m("RO", "RO", "Romania", "RON", "0.19"),
        _m("HU", "HU", "Hungary", "HUF", "0.27"),
        _m("PT", "PT", "Portugal", "EUR", "0.23"),
        _m("GB", "GB", "United Kingdom", "GBP", "0.20", is_eu=False),
        _m("EU", "EU", "European Union", "EUR", "0.22"),
        _m("SHOP", "EU", "Tigo Energy Shop", "EUR", "0.22"),
    )
}

DOMAIN_TO_MARKET: dict[str, str] = {
    "tigoenergy.si": "SI",
    "tigoenergy.de": "DE",
    "tigoenergy.fr": "FR",
    "tigoenergy.it": "IT",
    "tigoenergy.es": "ES",
    "tigoenergy.at": "AT",
    "tigoenergy.ch": "CH",
    "tigoenergy.be": "BE",
    "tigoenergy.pl": "PL",
    "tigoenergy.cz": "CZ",
    "tigoenergy.sk": "SK",
    "tigoenergy.hr": "HR",
    "tigoenergy.se": "SE",
    "tigoenergy.dk": "DK",
    "tigoenergy.ro": "RO",
    "tigoenergy.hu": "HU",
    "tigoenergy.pt": "PT",
    "tigoenergy.co.uk": "GB",
    "tigoenergy.uk": "GB",
    "tigoenergy.shop": "SHOP",
    "tigoenergy.net": "SHOP",
    "tigo-energy.si": "SI",
    "tigo-energy.de": "DE",
    "tigo-energy.at": "AT",
    "tigo-energy.ch": "CH",
    "tigo-energy.it": "IT",
    "tigo-energy.pl": "PL",
    "tigo-energy.se": "SE",
    "tigo-energy.eu": "EU",
    "tigo-energy.com": "SHOP",
}


def _storefront_cfg() -> dict:
    cfg = getattr(settings, "STOREFRONT", {}) or {}
    return cfg if isinstance(cfg, dict) else {}


def seller_country_code() -> str:
    code = (_storefront_cfg().get("SELLER_COUNTRY_CODE") or DEFAULT_SUPPLIER_COUNTRY).strip().upper()
    return code or DEFAULT_SUPPLIER_COUNTRY


def default_market_key() -> str:
    key = (_storefront_cfg().get("DEFAULT_MARKET_KEY") or DEFAULT_MARKET_KEY).strip().upper()
    return key if key in MARKETS else DEFAULT_MARKET_KEY


def get_market(key: str | None) -> Market:
    market = MARKETS.get((key or "").strip().upper()) or MARKETS[default_market_key()]
    seller = seller_country_code()
    if market.supplier_country != seller:
        market = replace(market, supplier_country=seller)
    return market


def market_key_from_hostname(hostname: str | None) -> str:
    host = (hostname or "").split(":")[0].strip().lower()
    if host.startswith("www."):
        host = host[4:]
    return DOMAIN_TO_MARKET.get(host, default_market_key())


def resolve_market(request) -> Market:
    header_key = (request.headers.get("X-Market-Key") or "").strip().upper()
    if header_key in MARKETS:
        return get_market(header_key)
    # raw Host header; ALLOWED_HOSTS is enforced by CommonMiddleware
    meta = request.META
    host = meta.get("HTTP_X_FORWARDED_HOST") or meta.get("HTTP_HOST") or meta.get("SERVER_NAME") or ""
    return get_market(market_key_from_hostname(host))


def is_valid_vat_rate_for_market(key: str, vat_rate) -> bool:
    market = MARKETS.get((key or "").strip().upper())
    if market is None:
        return False
    try:
        return abs(market.vat_rate - Decimal(str(vat_rate))) < Decimal("0.001")
    except ArithmeticError:
        return False


def transaction_type(delivery_country: str, supplier_country: str) -> str:
    delivery = (delivery_country or "").strip().upper()
    if delivery == (supplier_country or "").strip().upper():
        return TRANSACTION_DOMESTIC
    if delivery in EU_COUNTRY_CODES:
        return TRANSACTION_EU
    return TRANSACTION_EXPORT
