"""
Error Taxonomy
==============

Every failure a view can report is one of these. Views and services raise,
the handler registered by ``register_error_handlers`` renders the JSON body.
Clients tell categories apart by status code, the message is for humans.
"""

import sqlite3

from flask import jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from .logging_service import logger as db_logger


class BakeryError(Exception):
    """Base class for errors that map onto an HTTP response"""
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self):
        return {'success': False, 'error': self.message}


class ValidationError(BakeryError):
    """Invalid request"""
    status_code = 400


class AuthError(BakeryError):
    """Authentication required"""
    status_code = 401


class NotFoundError(BakeryError):
    """Not found"""
    status_code = 404


class ConflictError(BakeryError):
    """Conflict with current state"""
    status_code = 409


class InternalError(BakeryError):
    """Internal server error"""
    status_code = 500


def register_error_handlers(app):
    """Render BakeryError subclasses, oversized uploads and unexpected failures as JSON"""

    @app.errorhandler(BakeryError)
    def handle_bakery_error(error):
        if error.status_code >= 500:
            db_logger.log_error_with_traceback('api', error)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(sqlite3.Error)
    def handle_database_error(error):
        db_logger.log_error_with_traceback('database', error)
        return jsonify(InternalError('Internal server error').to_dict()), 500

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        limit_mb = app.config.get('MAX_IMAGE_SIZE', 0) // (1024 * 1024)
        return jsonify({
            'success': False,
            'error': f'File too large (max {limit_mb}MB)'
        }), 413

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        # Routing and method errors keep their own status
        if isinstance(error, HTTPException):
            return error
        db_logger.log_error_with_traceback('api', error)
        return jsonify(InternalError('Internal server error').to_dict()), 500
