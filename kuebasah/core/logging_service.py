"""
Centralized logging service for the storefront.
Provides structured logging with database storage and easy integration.
"""

import json
import logging
import os
import sqlite3
import traceback
from contextlib import closing
from datetime import datetime

from flask import current_app, has_app_context, request, has_request_context

from .config import Config

console = logging.getLogger('kuebasah')


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _get_db_path():
        """LOGS_DB from the Flask app config first, then Config"""
        if has_app_context():
            val = current_app.config.get('LOGS_DB')
            if val:
                return val
        return Config.LOGS_DB

    @staticmethod
    def _ensure_logs_table(db_path):
        """Ensure the app_logs table exists"""
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with closing(sqlite3.connect(db_path)) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS app_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    ip_address TEXT,
                    user_agent TEXT,
                    request_path TEXT,
                    user_id TEXT
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                ON app_logs(timestamp DESC)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_level
                ON app_logs(level)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_source
                ON app_logs(source)
            """)
            conn.commit()

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')
        return ip_address, user_agent, request.path

    @staticmethod
    def log(level, source, message, details=None, user_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (INFO, WARNING, ERROR)
            source (str): Source component (orders, catalog, security, ...)
            message (str): Main log message
            details (str/dict): Additional details (will be JSON-encoded if dict)
            user_id (str): Optional user identifier
        """
        level = level.upper()
        console.log(getattr(logging, level, logging.INFO), f"[{source}] {message}")

        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        try:
            db_path = LoggingService._get_db_path()
            LoggingService._ensure_logs_table(db_path)
            ip_address, user_agent, request_path = LoggingService._get_request_context()

            with closing(sqlite3.connect(db_path)) as conn:
                conn.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, ip_address, user_agent, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level, source, message, details,
                    ip_address, user_agent, request_path,
                    str(user_id) if user_id is not None else None
                ))
                conn.commit()

        except sqlite3.Error as e:
            # The console line above already carries the message
            console.warning(f"Logging service error: {e}")
            if details:
                console.warning(f"Details: {details}")

    @staticmethod
    def info(source, message, details=None, user_id=None):
        """Log info message"""
        LoggingService.log('INFO', source, message, details, user_id)

    @staticmethod
    def warning(source, message, details=None, user_id=None):
        """Log warning message"""
        LoggingService.log('WARNING', source, message, details, user_id)

    @staticmethod
    def error(source, message, details=None, user_id=None):
        """Log error message"""
        LoggingService.log('ERROR', source, message, details, user_id)

    @staticmethod
    def log_user_action(source, action, user_id=None, details=None):
        """Log admin actions (login, order created, order deleted, ...)"""
        LoggingService.info(source, f"User action: {action}", details, user_id)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def log_security_event(message, details=None):
        """Log security-related events"""
        LoggingService.warning('security', message, details)

    @staticmethod
    def recent(limit=50, level=None):
        """Most recent log entries, newest first"""
        db_path = LoggingService._get_db_path()
        if not os.path.exists(db_path):
            return []

        with closing(sqlite3.connect(db_path)) as conn:
            conn.row_factory = sqlite3.Row
            if level:
                rows = conn.execute(
                    "SELECT * FROM app_logs WHERE level = ? ORDER BY id DESC LIMIT ?",
                    (level.upper(), limit)
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM app_logs ORDER BY id DESC LIMIT ?", (limit,)
                ).fetchall()
        return [dict(r) for r in rows]


# Convenience instance for easy importing
logger = LoggingService()
