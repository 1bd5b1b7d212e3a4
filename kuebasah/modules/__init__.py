"""
Kue Basah Modules
=================

Flask blueprint modules for the public storefront and the admin API.
"""

__all__ = ['catalog', 'checkout', 'dashboard', 'cakes_admin', 'orders']
