"""
WhatsApp handoff tests: message formatting, shipping rule and the endpoint.
"""

from urllib.parse import parse_qs, urlparse

import pytest

from kuebasah.core.errors import NotFoundError, ValidationError
from kuebasah.modules.checkout.handoff import (
    build_cart, build_message, format_rupiah, is_free_shipping, whatsapp_url,
)

AREAS = ['pasir jambu', 'ciwidey']


@pytest.mark.parametrize('amount, expected', [
    (0, 'Rp 0'),
    (500, 'Rp 500'),
    (20000, 'Rp 20.000'),
    (1250000, 'Rp 1.250.000'),
])
def test_format_rupiah(amount, expected):
    assert format_rupiah(amount) == expected


def test_build_cart_merges_repeated_cakes(catalog, make_cake):
    klepon = make_cake(catalog, name='Klepon', price=2500, stock=10)
    lemper = make_cake(catalog, name='Lemper', price=4000, stock=10)

    cart = build_cart(catalog, [
        {'cake_id': klepon['id'], 'quantity': 2},
        {'cake_id': lemper['id'], 'quantity': '1'},
        {'cake_id': klepon['id'], 'quantity': 3},
    ])

    assert [(line['name'], line['quantity'], line['subtotal']) for line in cart] == [
        ('Klepon', 5, 12500),
        ('Lemper', 1, 4000),
    ]


@pytest.mark.parametrize('items', [None, [], [{'cake_id': 'x', 'quantity': 1}]])
def test_build_cart_rejects_empty_cart(catalog, items):
    with pytest.raises(ValidationError):
        build_cart(catalog, items)


def test_build_cart_rejects_unavailable_cakes(catalog, make_cake):
    sold_out = make_cake(catalog, stock=0)
    with pytest.raises(NotFoundError):
        build_cart(catalog, [{'cake_id': sold_out['id'], 'quantity': 1}])


@pytest.mark.parametrize('qty, address, expected', [
    (100, 'Jl. Raya Ciwidey No. 5', True),
    (150, 'Kp. Cibodas, PASIR JAMBU', True),
    (99, 'Jl. Raya Ciwidey No. 5', False),
    (200, 'Bandung kota', False),
])
def test_free_shipping_rule(qty, address, expected):
    assert is_free_shipping(qty, address, 100, AREAS) is expected


def test_message_layout():
    cart = [
        {'name': 'Klepon', 'price': 2500, 'quantity': 4, 'subtotal': 10000},
        {'name': 'Lemper', 'price': 4000, 'quantity': 1, 'subtotal': 4000},
    ]
    message = build_message('Waroeng Sultan', cart, 'Jl. Melati 3', notes='Tanpa daun')

    assert message.splitlines() == [
        'Halo Admin Waroeng Sultan, saya mau order:',
        '',
        '- Klepon x4 (Rp 2.500)',
        '- Lemper x1 (Rp 4.000)',
        '',
        'Total Item: 5',
        'Total Harga: Rp 14.000',
        '',
        'Alamat: Jl. Melati 3',
        'Catatan: Tanpa daun',
        'Gratis ongkir: TIDAK',
    ]


def test_message_mentions_free_shipping_areas():
    cart = [{'name': 'Klepon', 'price': 2500, 'quantity': 100, 'subtotal': 250000}]
    message = build_message('Waroeng Sultan', cart, 'Ciwidey', free_shipping=True,
                            min_qty=100, areas=AREAS)
    assert message.splitlines()[-1] == 'Gratis ongkir: YA (Pasir Jambu/Ciwidey, min 100 pcs)'
    assert 'Catatan' not in message


def test_whatsapp_url_encodes_message():
    url = whatsapp_url('6283130580669', 'Halo & selamat\npagi')
    parsed = urlparse(url)

    assert parsed.netloc == 'wa.me'
    assert parsed.path == '/6283130580669'
    assert '%20' in url and '%0A' in url and '%26' in url
    assert parse_qs(parsed.query)['text'] == ['Halo & selamat\npagi']


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

def test_whatsapp_endpoint(client, ext, make_cake):
    cake = make_cake(ext.catalog, name='Klepon', price=2500, stock=3)

    response = client.post('/api/checkout/whatsapp', json={
        'items': [{'cake_id': cake['id'], 'quantity': 2}],
        'address': 'Jl. Melati 3, Bandung',
    })

    assert response.status_code == 200
    body = response.get_json()
    assert body['success'] is True
    assert body['total_qty'] == 2
    assert body['total_price'] == 5000
    assert body['free_shipping'] is False
    assert body['url'].startswith('https://wa.me/6283130580669?text=')
    assert '- Klepon x2 (Rp 2.500)' in body['message']

    # Nothing is persisted
    assert ext.catalog.get(cake['id'])['stock'] == 3
    assert ext.orders.count() == 0


def test_whatsapp_endpoint_free_shipping(client, ext, make_cake):
    cake = make_cake(ext.catalog, name='Klepon', price=2500, stock=5)

    body = client.post('/api/checkout/whatsapp', json={
        'items': [{'cake_id': cake['id'], 'quantity': 120}],
        'address': 'Desa Lebakmuncang, Ciwidey',
    }).get_json()

    assert body['free_shipping'] is True
    assert 'Gratis ongkir: YA' in body['message']


def test_whatsapp_endpoint_requires_address(client, ext, make_cake):
    cake = make_cake(ext.catalog)
    response = client.post('/api/checkout/whatsapp', json={
        'items': [{'cake_id': cake['id'], 'quantity': 1}],
        'address': '  ',
    })
    assert response.status_code == 400
    assert response.get_json() == {'success': False, 'error': 'Address is required'}


def test_whatsapp_endpoint_unavailable_cake(client):
    response = client.post('/api/checkout/whatsapp', json={
        'items': [{'cake_id': 31337, 'quantity': 1}],
        'address': 'Ciwidey',
    })
    assert response.status_code == 404
    assert response.get_json()['success'] is False
