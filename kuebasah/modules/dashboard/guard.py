"""
Admin Session Guard
===================

Credential check and the session gate in front of every admin endpoint.
A live session carries ``admin_id``, ``admin_username`` and
``admin_login_at``; markers older than ``SESSION_LIFETIME_HOURS`` are
treated as absent.
"""

import sqlite3
import time
from functools import wraps

from flask import current_app, session
from werkzeug.security import check_password_hash, generate_password_hash

from ...core.errors import AuthError, ValidationError


class AdminStore:
    """Admin accounts in the ``admins`` table"""

    def __init__(self, db):
        self.db = db

    def create_admin(self, username, password):
        username = (username or '').strip()
        if not username or not password:
            raise ValidationError('Username and password are required')

        try:
            with self.db.transaction() as conn:
                cursor = conn.execute(
                    'INSERT INTO admins (username, password_hash) VALUES (?, ?)',
                    (username, generate_password_hash(password))
                )
        except sqlite3.IntegrityError:
            raise ValidationError('Admin already exists')
        return {'id': cursor.lastrowid, 'username': username}

    def ensure_admin(self, username, password):
        """Create the admin unless one with that username exists. Returns True if created."""
        existing = self.db.query('SELECT id FROM admins WHERE username = ?', (username,), one=True)
        if existing:
            return False
        self.create_admin(username, password)
        return True

    def verify(self, username, password):
        """Admin dict for valid credentials, None otherwise"""
        if not username or not password:
            return None

        admin = self.db.query(
            'SELECT id, username, password_hash FROM admins WHERE username = ?',
            (username,), one=True
        )
        if admin is None or not check_password_hash(admin['password_hash'], password):
            return None
        return {'id': admin['id'], 'username': admin['username']}


def _ttl_seconds():
    return current_app.config.get('SESSION_LIFETIME_HOURS', 24) * 3600


def start_admin_session(admin):
    session.clear()
    session.permanent = True
    session['admin_id'] = admin['id']
    session['admin_username'] = admin['username']
    session['admin_login_at'] = time.time()


def end_admin_session():
    session.clear()


def current_admin():
    """The logged-in admin, or None when there is no live session"""
    if 'admin_id' not in session:
        return None

    login_at = session.get('admin_login_at', 0)
    if time.time() - login_at > _ttl_seconds():
        session.clear()
        return None

    return {'id': session['admin_id'], 'username': session.get('admin_username')}


def admin_required(f):
    """Decorator to require a live admin session"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_admin() is None:
            raise AuthError('Unauthorized')
        return f(*args, **kwargs)
    return decorated_function
