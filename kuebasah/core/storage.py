"""
Storage Utility
===============

Local image storage for cake photos uploaded from the admin panel.
Files land in ``UPLOAD_FOLDER`` and are referenced by generated filename.
"""

import os
import random
import time

from flask import current_app
from werkzeug.utils import secure_filename

from .errors import ValidationError

ALLOWED_EXTENSIONS = {'jpeg', 'jpg', 'png', 'webp'}
ALLOWED_MIMETYPES = {'image/jpeg', 'image/jpg', 'image/png', 'image/webp'}


def get_upload_folder():
    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    return folder


def _extension(filename):
    return filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''


def _file_size(file_storage):
    stream = file_storage.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def save_image(file_storage):
    """Validate and store an uploaded image.

    Args:
        file_storage: werkzeug ``FileStorage`` from ``request.files``.

    Returns:
        The generated filename (e.g. "cake-1718000000000-123456789.png").

    Raises:
        ValidationError: empty upload, disallowed type, or file too large.
    """
    if file_storage is None or not file_storage.filename:
        raise ValidationError('Image is required')

    original = secure_filename(file_storage.filename)
    ext = _extension(original)
    mimetype = (file_storage.mimetype or '').lower()
    if ext not in ALLOWED_EXTENSIONS or mimetype not in ALLOWED_MIMETYPES:
        raise ValidationError('Only jpeg, jpg, png or webp images are allowed')

    max_size = current_app.config.get('MAX_IMAGE_SIZE', 5 * 1024 * 1024)
    if _file_size(file_storage) > max_size:
        raise ValidationError(f'Image too large (max {max_size // (1024 * 1024)}MB)')

    filename = f"cake-{int(time.time() * 1000)}-{random.randint(0, 10**9)}.{ext}"
    file_storage.save(os.path.join(get_upload_folder(), filename))
    return filename


def delete_image(filename):
    """Remove a stored image. Returns True if a file was deleted."""
    if not filename:
        return False

    path = os.path.join(current_app.config['UPLOAD_FOLDER'], secure_filename(filename))
    if os.path.isfile(path):
        os.unlink(path)
        return True
    return False
