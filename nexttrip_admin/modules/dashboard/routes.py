"""
Admin Dashboard Routes
======================

Overview, log feed, token hand-off and the public health check.
"""

import os
from datetime import datetime

from flask import current_app, jsonify, request, session

from . import dashboard_bp, health_bp
from ...core.api_client import SessionAuth
from ...core.config import get_config_value
from ...core.logging_service import LoggingService, db_log
from ...core.resources import RESOURCES
from ...core.views import admin_required, json_body


def _resource_summary():
    return [{
        'key': spec.key,
        'label': spec.label,
        'endpoint': spec.endpoint,
        'operations': list(spec.ops),
        'reorderable': spec.reorderable,
        'singleton': spec.singleton,
    } for spec in RESOURCES.values()]


@dashboard_bp.route('/')
@admin_required
def index():
    """Enabled modules and the resources they manage"""
    ext = current_app.extensions['nexttrip_admin']
    return jsonify({
        'success': True,
        'modules': ext.get_registered_modules(),
        'resources': _resource_summary(),
        'api_url': get_config_value('NEXTTRIP_API_URL'),
    })


@dashboard_bp.route('/api/logs')
@admin_required
def recent_logs():
    try:
        limit = min(int(request.args.get('limit', 50)), 500)
    except ValueError:
        return jsonify({'success': False, 'error': 'limit must be a number'}), 400
    logs = LoggingService.recent(limit=limit, level=request.args.get('level'))
    return jsonify({'success': True, 'logs': logs, 'count': len(logs)})


@dashboard_bp.route('/api/logs', methods=['DELETE'])
@admin_required
def purge_logs():
    """Delete log rows older than ?days= (default 30)"""
    try:
        days = int(request.args.get('days', 30))
    except ValueError:
        return jsonify({'success': False, 'error': 'days must be a number'}), 400
    if days < 1:
        return jsonify({'success': False, 'error': 'days must be at least 1'}), 400
    deleted = LoggingService.cleanup_old_logs(days_to_keep=days)
    return jsonify({'success': True, 'deleted': deleted})


# ===== Token hand-off =====
# Sign-in happens in the NextTrip login app; it passes the issued token here.

@dashboard_bp.route('/api/session', methods=['POST'])
def store_token():
    data = json_body()
    token = (data.get('token') or '').strip()
    if not token:
        return jsonify({'success': False, 'error': 'Token is required'}), 400

    session[SessionAuth.SESSION_KEY] = token
    if data.get('user'):
        session['user'] = data['user']
    db_log('info', 'dashboard', 'Admin session token stored')
    return jsonify({'success': True})


@dashboard_bp.route('/api/session', methods=['DELETE'])
def clear_token():
    SessionAuth().clear()
    return jsonify({'success': True, 'login_url': get_config_value('NEXTTRIP_LOGIN_URL', '/login')})


# ===== Health =====

def _check_log_store():
    db_path = get_config_value('LOG_DB')
    if not db_path:
        return {'status': 'ok', 'detail': 'console only'}
    db_dir = os.path.dirname(db_path) or '.'
    if os.path.isdir(db_dir) and os.access(db_dir, os.W_OK):
        return {'status': 'ok', 'path': db_path}
    return {'status': 'warning', 'detail': f'{db_dir} is not writable'}


def _build_health_response():
    api_url = get_config_value('NEXTTRIP_API_URL')
    checks = {
        'api': {'status': 'ok' if api_url else 'critical', 'url': api_url},
        'log_store': _check_log_store(),
    }
    statuses = [check['status'] for check in checks.values()]
    if 'critical' in statuses:
        status = 'critical'
    elif 'warning' in statuses:
        status = 'warning'
    else:
        status = 'ok'
    return {
        'status': status,
        'timestamp': datetime.now().isoformat(),
        'checks': checks,
    }, status


@health_bp.route('/')
@health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    data, status = _build_health_response()
    code = 503 if status == 'critical' else 200
    return jsonify(data), code
