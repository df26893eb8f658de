# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS (pytest-django / CI)

- Throttles relaxed (every request comes from the same test client IP)
- Isolated in-memory cache per run
- VIES endpoint pointed at a dead local URL; tests patch the transport
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK, STOREFRONT  # explicit for Ruff (F405)

DEBUG = False

REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    scope: "10000/min" for scope in REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "storefront-tests",
    }
}

STOREFRONT["VIES"]["API_URL"] = "http://127.0.0.1:9/vies-disabled-in-tests"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
