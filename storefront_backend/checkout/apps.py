# checkout/apps.py

"""
CHECKOUT APP CONFIG

Checkout pricing for the public storefront:
- Shipping method eligibility (pallet mode, carrier selection)
- VAT treatment (B2C / domestic B2B / reverse charge)
- Order totals
"""

from django.apps import AppConfig


class CheckoutConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "checkout"
    verbose_name = "Checkout Pricing"
