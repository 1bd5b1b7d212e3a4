"""
Dashboard Module
================

Admin authentication and the admin landing data.

Provides:
- Admin login/logout and session check
- Catalog and order statistics
- Recent application log feed

This is the foundation module that the other admin modules plug into:
they gate their views with ``admin_required`` from ``guard``.
"""

from flask import Blueprint

dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/api/admin'
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp']
