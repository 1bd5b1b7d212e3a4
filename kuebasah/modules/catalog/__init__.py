"""
Catalog Module
==============

Public, read-only cake catalog.

Provides:
- /api/cakes                      available cakes, newest first
- /api/cakes/<id>                 a single available cake
- /api/cakes/category/<category>  available cakes in a category
- /api/cakes/search/<query>       case-insensitive name/description search
- /uploads/<filename>             uploaded cake images
"""

from flask import Blueprint

catalog_bp = Blueprint(
    'catalog',
    __name__,
    url_prefix='/api/cakes'
)

uploads_bp = Blueprint(
    'uploads',
    __name__,
    url_prefix='/uploads'
)

from . import routes
from .store import CatalogStore

__all__ = ['catalog_bp', 'uploads_bp', 'CatalogStore']
