"""
Cakes Admin Module
==================

Admin interface for cake listings.
Plugs into the dashboard module's session guard.

Provides:
- Cake creation with image upload
- Partial cake updates (fields, stock, availability, image)
- Cake deletion
"""

from flask import Blueprint

cakes_admin_bp = Blueprint(
    'cakes_admin',
    __name__,
    url_prefix='/api/admin/cakes'
)

from . import routes

__all__ = ['cakes_admin_bp']
