"""
Public catalog routes.
"""

from flask import current_app, jsonify, send_from_directory

from ...core import services
from ...core.errors import NotFoundError
from . import catalog_bp, uploads_bp


@catalog_bp.route('')
@catalog_bp.route('/')
def list_cakes():
    return jsonify(services().catalog.list_available())


@catalog_bp.route('/<int:cake_id>')
def get_cake(cake_id):
    cake = services().catalog.get(cake_id, available_only=True)
    if cake is None:
        raise NotFoundError('Cake not found')
    return jsonify(cake)


@catalog_bp.route('/category/<category>')
def cakes_by_category(category):
    return jsonify(services().catalog.by_category(category))


@catalog_bp.route('/search/<path:query>')
def search_cakes(query):
    return jsonify(services().catalog.search(query))


@uploads_bp.route('/<path:filename>')
def uploaded_image(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
