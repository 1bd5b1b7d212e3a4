"""
Checkout Module
===============

WhatsApp order handoff for the public storefront. Customers don't place
orders through the API; the cart is turned into a pre-filled WhatsApp
message to the shop, and the admin records the order afterwards.
"""

from flask import Blueprint

checkout_bp = Blueprint(
    'checkout',
    __name__,
    url_prefix='/api/checkout'
)

from . import routes

__all__ = ['checkout_bp']
