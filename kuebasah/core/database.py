"""
Datastore Handle
================

One ``Database`` instance per app, passed to every store at construction.
Connections are opened per unit of work and always closed; write
transactions are serialized through a process-wide lock plus sqlite's
``BEGIN IMMEDIATE`` reserved lock, so a transaction's reads and writes are
never interleaved with another writer.
"""

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS cakes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT NOT NULL,
        price REAL NOT NULL CHECK (price >= 0),
        category TEXT NOT NULL,
        image TEXT NOT NULL,
        stock INTEGER NOT NULL DEFAULT 1 CHECK (stock >= 0),
        is_available BOOLEAN NOT NULL DEFAULT 1,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS admins (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS orders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        customer_name TEXT NOT NULL,
        customer_phone TEXT NOT NULL,
        total_price REAL NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS order_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        order_id INTEGER NOT NULL REFERENCES orders(id),
        cake_id INTEGER NOT NULL,
        cake_name TEXT NOT NULL,
        quantity INTEGER NOT NULL CHECK (quantity > 0),
        price REAL NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_cakes_category ON cakes(category);
    CREATE INDEX IF NOT EXISTS idx_orders_created ON orders(created_at DESC);
    CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items(order_id);
"""


def row_to_dict(row):
    return dict(row) if row is not None else None


class Database:
    """sqlite datastore handle shared by the catalog, orders and admin stores"""

    def __init__(self, path, timeout=30.0):
        self.path = path
        self.timeout = timeout
        self._write_lock = threading.Lock()

    def connect(self):
        conn = sqlite3.connect(self.path, timeout=self.timeout,
                               isolation_level=None, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def connection(self):
        """Yield a connection for reads, closed on every exit path"""
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self):
        """
        Yield a connection inside one write transaction.

        Commits when the block exits normally. Any exception rolls back
        every write made in the block and is re-raised unchanged.
        """
        with self._write_lock:
            with self.connection() as conn:
                conn.execute('BEGIN IMMEDIATE')
                try:
                    yield conn
                except BaseException:
                    conn.rollback()
                    raise
                else:
                    conn.commit()

    def query(self, sql, params=(), one=False):
        """Run a SELECT and return rows as dicts"""
        with self.connection() as conn:
            rows = [dict(r) for r in conn.execute(sql, params).fetchall()]
        if one:
            return rows[0] if rows else None
        return rows

    def init_schema(self):
        """Create the storefront tables if they don't exist yet"""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with self._write_lock:
            with self.connection() as conn:
                conn.executescript(SCHEMA)
        logger.info(f"Bakery database ready at {self.path}")
