"""
PATH: checkout/models/__init__.py

Checkout models export surface.
"""

from .shipping_rate import ShippingRate

__all__ = [
    "ShippingRate",
]
