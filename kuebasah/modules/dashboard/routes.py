"""
Admin Dashboard Routes
======================

Admin authentication endpoints and dashboard data.
"""

from flask import jsonify, request

from ...core import json_body, services
from ...core.errors import AuthError
from ...core.logging_service import logger as db_logger
from . import dashboard_bp
from .guard import admin_required, current_admin, end_admin_session, start_admin_session


@dashboard_bp.route('/login', methods=['POST'])
def login():
    """Admin login route"""
    data = json_body() if request.is_json else request.form.to_dict()
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''

    admin = services().admins.verify(username, password)
    if admin is None:
        db_logger.log_security_event('Failed admin login', {'username': username})
        raise AuthError('Invalid username or password')

    start_admin_session(admin)
    db_logger.log_user_action('admin', 'login', user_id=admin['id'])

    return jsonify({
        'success': True,
        'message': 'Login successful',
        'user': {'username': admin['username']}
    })


@dashboard_bp.route('/logout', methods=['POST'])
def logout():
    """Admin logout route"""
    admin = current_admin()
    end_admin_session()
    if admin:
        db_logger.log_user_action('admin', 'logout', user_id=admin['id'])
    return jsonify({'success': True, 'message': 'Logged out'})


@dashboard_bp.route('/check-session')
def check_session():
    admin = current_admin()
    if admin is None:
        return jsonify({'authenticated': False})
    return jsonify({'authenticated': True, 'user': {'username': admin['username']}})


@dashboard_bp.route('/stats')
@admin_required
def stats():
    """Counts shown on the admin dashboard"""
    ext = services()
    catalog = ext.catalog.stats()
    return jsonify({
        'totalCakes': catalog['total_cakes'],
        'availableCakes': catalog['available_cakes'],
        'totalStock': catalog['total_stock'],
        'totalOrders': ext.orders.count()
    })


@dashboard_bp.route('/logs')
@admin_required
def logs():
    """Recent application log entries, newest first"""
    limit = min(request.args.get('limit', 50, type=int), 500)
    level = request.args.get('level')
    return jsonify({'success': True, 'logs': db_logger.recent(limit=limit, level=level)})
