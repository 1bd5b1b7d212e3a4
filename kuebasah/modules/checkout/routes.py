"""
Checkout routes.
"""

from flask import current_app, jsonify

from ...core import json_body, services
from ...core.errors import ValidationError
from . import checkout_bp
from .handoff import build_cart, build_message, is_free_shipping, whatsapp_url


@checkout_bp.route('/whatsapp', methods=['POST'])
def whatsapp_handoff():
    """
    Price a cart and build the WhatsApp order link.

    Body: {"items": [{"cake_id": 1, "quantity": 2}], "address": "...", "notes": "..."}
    Nothing is persisted and stock is untouched.
    """
    data = json_body()
    address = (data.get('address') or '').strip()
    notes = (data.get('notes') or '').strip()
    if not address:
        raise ValidationError('Address is required')

    config = current_app.config
    cart = build_cart(services().catalog, data.get('items'))
    total_qty = sum(line['quantity'] for line in cart)
    total_price = sum(line['subtotal'] for line in cart)

    min_qty = config['FREE_SHIPPING_MIN_QTY']
    areas = config['FREE_SHIPPING_AREAS']
    free_shipping = is_free_shipping(total_qty, address, min_qty, areas)

    message = build_message(config['SHOP_NAME'], cart, address, notes,
                            free_shipping=free_shipping, min_qty=min_qty, areas=areas)

    return jsonify({
        'success': True,
        'items': cart,
        'total_qty': total_qty,
        'total_price': total_price,
        'free_shipping': free_shipping,
        'message': message,
        'url': whatsapp_url(config['WHATSAPP_NUMBER'], message)
    })
