"""
Shared fixtures: a fully initialised app on a throwaway database directory,
plus helpers for logged-in admin requests and seeding cakes.
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from kuebasah import KueBasah
from kuebasah.core.database import Database
from kuebasah.modules.catalog.store import CatalogStore
from kuebasah.modules.orders.engine import OrderEngine

ADMIN_USERNAME = 'admin'
ADMIN_PASSWORD = 'kue-rahasia-123'


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="kuebasah-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


def build_app(db_dir):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = db_dir
    app.config["BAKERY_DB"] = os.path.join(db_dir, "toko_kue.db")
    app.config["LOGS_DB"] = os.path.join(db_dir, "app_logs.db")
    app.config["UPLOAD_FOLDER"] = os.path.join(db_dir, "uploads")
    app.config["DEFAULT_ADMIN_USERNAME"] = ADMIN_USERNAME
    app.config["DEFAULT_ADMIN_PASSWORD"] = ADMIN_PASSWORD
    app.config["CORS_ORIGINS"] = "*"
    KueBasah(app)
    return app


@pytest.fixture
def app(tmp_db_dir):
    """Flask app with every storefront module registered."""
    return build_app(tmp_db_dir)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client holding a live admin session."""
    client = app.test_client()
    response = client.post('/api/admin/login', json={
        'username': ADMIN_USERNAME,
        'password': ADMIN_PASSWORD,
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def ext(app):
    return app.extensions['kuebasah']


@pytest.fixture
def db(tmp_db_dir):
    """Bare datastore handle, no Flask app involved."""
    database = Database(os.path.join(tmp_db_dir, "engine.db"))
    database.init_schema()
    return database


@pytest.fixture
def catalog(db):
    return CatalogStore(db)


@pytest.fixture
def engine(db):
    return OrderEngine(db)


@pytest.fixture
def make_cake():
    """Factory inserting a cake through a CatalogStore."""
    def _make(store, name='Kue Lapis', price=10000, stock=3, category='basah',
              description='Kue lapis legit', **extra):
        return store.create(name=name, description=description, price=price,
                            category=category, image=f"{name.lower().replace(' ', '-')}.png",
                            stock=stock, **extra)
    return _make
