"""
Cakes Admin Routes
==================

Complete cake management for admin. Create and update take multipart
form data so an image can travel with the fields.
"""

import logging

from flask import jsonify, request

from ...core import json_body, services
from ...core.errors import NotFoundError, ValidationError
from ...core.storage import delete_image, save_image
from ..dashboard.guard import admin_required
from . import cakes_admin_bp

logger = logging.getLogger(__name__)

CAKE_FIELDS = ('name', 'description', 'price', 'category', 'stock', 'is_available')


def _form_fields():
    """Cake fields from a multipart form, or from a JSON body"""
    data = request.form.to_dict() if request.form else json_body()
    return {field: data.get(field) for field in CAKE_FIELDS if field in data}


@cakes_admin_bp.route('', methods=['GET'])
@admin_required
def list_cakes():
    """All cakes, including unavailable ones"""
    return jsonify(services().catalog.list_all())


@cakes_admin_bp.route('/<int:cake_id>', methods=['GET'])
@admin_required
def get_cake(cake_id):
    cake = services().catalog.get(cake_id)
    if cake is None:
        raise NotFoundError('Cake not found')
    return jsonify(cake)


@cakes_admin_bp.route('', methods=['POST'])
@admin_required
def create_cake():
    """Create new cake"""
    fields = _form_fields()
    if 'image' not in request.files:
        raise ValidationError('Image is required')

    image = save_image(request.files['image'])
    try:
        cake = services().catalog.create(image=image, **fields)
    except Exception:
        delete_image(image)
        raise

    return jsonify(cake), 201


@cakes_admin_bp.route('/<int:cake_id>', methods=['PUT'])
@admin_required
def update_cake(cake_id):
    """Update cake; fields left out keep their current value"""
    catalog = services().catalog
    existing = catalog.get(cake_id)
    if existing is None:
        raise NotFoundError('Cake not found')

    fields = _form_fields()
    upload = request.files.get('image')
    new_image = save_image(upload) if upload and upload.filename else None

    try:
        cake = catalog.update(cake_id, image=new_image, **fields)
    except Exception:
        delete_image(new_image)
        raise

    if new_image and existing['image'] != new_image:
        delete_image(existing['image'])

    return jsonify(cake)


@cakes_admin_bp.route('/<int:cake_id>', methods=['DELETE'])
@admin_required
def delete_cake(cake_id):
    """Delete cake"""
    cake = services().catalog.delete(cake_id)
    if not delete_image(cake['image']):
        logger.warning(f"Image for deleted cake {cake_id} was already missing: {cake['image']}")

    return jsonify({'success': True, 'message': 'Cake deleted'})
