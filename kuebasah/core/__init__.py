"""
Kue Basah Core
==============

Core utilities shared by the storefront modules.
"""

from flask import current_app, request

from .config import Config
from .database import Database
from .errors import ValidationError
from .logging_service import LoggingService, logger


def services():
    """The ``KueBasah`` extension registered on the current app"""
    return current_app.extensions['kuebasah']


def json_body():
    """The request's JSON object, {} when there is none"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Invalid request body')
    return data


__all__ = ['Config', 'Database', 'LoggingService', 'logger', 'services', 'json_body']
