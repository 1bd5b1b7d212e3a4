"""
Orders Admin Module
===================

Admin interface for order management.
Plugs into the dashboard module's session guard.

Provides:
- Order listing (all / most recent) with item summaries
- Order detail view
- Order creation through the transactional engine
- Order status management and deletion
"""

from flask import Blueprint

orders_bp = Blueprint(
    'orders_admin',
    __name__,
    url_prefix='/api/admin/orders'
)

from . import routes
from .engine import ORDER_STATUSES, OrderEngine

__all__ = ['orders_bp', 'OrderEngine', 'ORDER_STATUSES']
