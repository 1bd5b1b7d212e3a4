"""
Kue Basah - Home Bakery Storefront
==================================

A Flask backend for a small home bakery:
- Public cake catalog and search
- WhatsApp order handoff for customers
- Session-protected admin API for cakes and orders
- Transactional order creation with stock control

Usage:
    from flask import Flask
    from kuebasah import KueBasah

    app = Flask(__name__)
    KueBasah(app)
"""

import logging
import os
from datetime import timedelta

from flask_cors import CORS

from .core.config import Config
from .core.database import Database
from .core.errors import register_error_handlers
from .modules.catalog import CatalogStore, catalog_bp, uploads_bp
from .modules.cakes_admin import cakes_admin_bp
from .modules.checkout import checkout_bp
from .modules.dashboard import dashboard_bp
from .modules.dashboard.guard import AdminStore
from .modules.orders import OrderEngine, orders_bp

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

MODULES = [
    ('catalog', catalog_bp),
    ('uploads', uploads_bp),
    ('checkout', checkout_bp),
    ('dashboard', dashboard_bp),
    ('cakes_admin', cakes_admin_bp),
    ('orders', orders_bp),
]


class KueBasah:
    """
    Flask extension wiring the storefront onto an app.

    Owns the datastore handle and the stores built on it; views reach them
    through ``app.extensions['kuebasah']``.
    """

    def __init__(self, app=None):
        self.db = None
        self.catalog = None
        self.orders = None
        self.admins = None
        self._registered_modules = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_config(app)
        self._setup_database_dir(app)

        self.db = Database(app.config['BAKERY_DB'])
        self.db.init_schema()
        self.catalog = CatalogStore(self.db)
        self.orders = OrderEngine(self.db)
        self.admins = AdminStore(self.db)
        self._seed_admin(app)

        register_error_handlers(app)
        self._setup_cors(app)
        self._register_modules(app)

        app.extensions['kuebasah'] = self

    def get_registered_modules(self):
        return list(self._registered_modules)

    @staticmethod
    def _apply_config(app):
        """Fill app.config from Config wherever the host app left a key unset"""
        for key in dir(Config):
            if key.isupper() and app.config.get(key) is None:
                app.config[key] = getattr(Config, key)

        # DB paths follow a host-provided DB_DIR unless set explicitly
        db_dir = app.config['DB_DIR']
        if db_dir != Config.DB_DIR:
            if app.config['BAKERY_DB'] == Config.BAKERY_DB:
                app.config['BAKERY_DB'] = os.path.join(db_dir, 'toko_kue.db')
            if app.config['LOGS_DB'] == Config.LOGS_DB:
                app.config['LOGS_DB'] = os.path.join(db_dir, 'app_logs.db')

        app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(
            hours=app.config['SESSION_LIFETIME_HOURS']
        )

    @staticmethod
    def _setup_database_dir(app):
        for key in ('DB_DIR', 'UPLOAD_FOLDER'):
            os.makedirs(app.config[key], exist_ok=True)

    def _seed_admin(self, app):
        username = app.config.get('DEFAULT_ADMIN_USERNAME')
        password = app.config.get('DEFAULT_ADMIN_PASSWORD')
        if username and password:
            if self.admins.ensure_admin(username, password):
                logger.info(f"Default admin created: username={username}")
            return

        if self.db.query('SELECT COUNT(*) AS total FROM admins', one=True)['total'] == 0:
            logger.warning("No admin users found. Set DEFAULT_ADMIN_PASSWORD to create one.")

    @staticmethod
    def _setup_cors(app):
        origins = app.config['CORS_ORIGINS']
        if isinstance(origins, str) and origins != '*':
            origins = [origin.strip() for origin in origins.split(',') if origin.strip()]
        CORS(app, resources={r'/api/*': {'origins': origins}}, supports_credentials=origins != '*')

    def _register_modules(self, app):
        for name, blueprint in MODULES:
            app.register_blueprint(blueprint)
            self._registered_modules.append(name)


__all__ = ['KueBasah', 'Config']
