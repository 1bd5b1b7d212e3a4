"""
Orders Admin Routes
===================

Thin HTTP layer over ``OrderEngine``; all validation and transactional
behaviour lives in the engine.
"""

from flask import current_app, jsonify

from ...core import json_body, services
from ...core.logging_service import logger as db_logger
from ..dashboard.guard import admin_required, current_admin
from . import orders_bp


@orders_bp.route('', methods=['GET'])
@admin_required
def list_orders():
    """All orders, newest first"""
    return jsonify(services().orders.list_orders())


@orders_bp.route('/recent', methods=['GET'])
@admin_required
def recent_orders():
    """Most recent orders for the dashboard"""
    limit = current_app.config.get('RECENT_ORDERS_LIMIT', 5)
    return jsonify(services().orders.list_orders(limit=limit))


@orders_bp.route('/<int:order_id>', methods=['GET'])
@admin_required
def get_order(order_id):
    return jsonify(services().orders.get_order(order_id))


@orders_bp.route('', methods=['POST'])
@admin_required
def create_order():
    """Create an order and decrement stock atomically"""
    data = json_body()
    order = services().orders.create_order(
        data.get('customer_name'),
        data.get('customer_phone'),
        data.get('items')
    )

    db_logger.log_user_action('orders', f"created order {order['id']}",
                              user_id=current_admin()['id'],
                              details={'total_price': order['total_price'],
                                       'items': len(order['items'])})
    return jsonify(order), 201


@orders_bp.route('/<int:order_id>/status', methods=['PUT'])
@admin_required
def update_order_status(order_id):
    status = json_body().get('status')
    order = services().orders.update_status(order_id, status)
    return jsonify(order)


@orders_bp.route('/<int:order_id>', methods=['DELETE'])
@admin_required
def delete_order(order_id):
    """Delete an order and its items"""
    deleted_items = services().orders.delete_order(order_id)

    db_logger.log_user_action('orders', f'deleted order {order_id}',
                              user_id=current_admin()['id'],
                              details={'deleted_items': deleted_items})
    return jsonify({
        'success': True,
        'message': f'Order {order_id} deleted successfully (removed {deleted_items} items)'
    })
