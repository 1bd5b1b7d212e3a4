"""
WhatsApp handoff formatting.

Builds the order message a customer sends to the shop, priced from the
current catalog.
"""

from urllib.parse import quote

from ...core.errors import NotFoundError, ValidationError
from ..orders.engine import normalize_items

WHATSAPP_BASE_URL = 'https://wa.me'
# Same set encodeURIComponent leaves alone
URL_SAFE_CHARS = "-_.!~*'()"


def format_rupiah(amount):
    """12500 -> "Rp 12.500" """
    whole = int(round(amount))
    return f"Rp {whole:,}".replace(',', '.')


def build_cart(catalog, items):
    """
    Resolve raw cart items against available cakes.

    Returns a list of ``{cake_id, name, price, quantity, subtotal}`` with
    repeated cakes merged into one line, in first-seen order.
    """
    if not isinstance(items, (list, tuple)) or not items:
        raise ValidationError('Cart is empty')

    quantities = {}
    for cake_id, quantity in normalize_items(items):
        quantities[cake_id] = quantities.get(cake_id, 0) + quantity
    if not quantities:
        raise ValidationError('Cart is empty')

    cakes = catalog.get_many(quantities.keys(), available_only=True)
    if len(cakes) < len(quantities):
        raise NotFoundError('One or more cakes are not available')

    return [{
        'cake_id': cake_id,
        'name': cakes[cake_id]['name'],
        'price': cakes[cake_id]['price'],
        'quantity': quantity,
        'subtotal': cakes[cake_id]['price'] * quantity,
    } for cake_id, quantity in quantities.items()]


def is_free_shipping(total_qty, address, min_qty, areas):
    address = (address or '').lower()
    return total_qty >= min_qty and any(area in address for area in areas)


def build_message(shop_name, cart, address, notes=None, free_shipping=False,
                  min_qty=0, areas=()):
    total_qty = sum(line['quantity'] for line in cart)
    total_price = sum(line['subtotal'] for line in cart)

    parts = [f'Halo Admin {shop_name}, saya mau order:', '']
    parts.extend(
        f"- {line['name']} x{line['quantity']} ({format_rupiah(line['price'])})"
        for line in cart
    )
    parts.extend([
        '',
        f'Total Item: {total_qty}',
        f'Total Harga: {format_rupiah(total_price)}',
        '',
        f'Alamat: {address}',
    ])
    if notes:
        parts.append(f'Catatan: {notes}')

    if free_shipping:
        area_names = '/'.join(area.title() for area in areas)
        parts.append(f'Gratis ongkir: YA ({area_names}, min {min_qty} pcs)')
    else:
        parts.append('Gratis ongkir: TIDAK')

    return '\n'.join(parts)


def whatsapp_url(number, message):
    return f"{WHATSAPP_BASE_URL}/{number}?text={quote(message, safe=URL_SAFE_CHARS)}"
