"""
OTP Routes
==========

GET/PUT /api/settings. The backend only returns masked credentials, so a
blank api_key or api_secret on save is left out and the stored value kept.
"""

from flask import jsonify

from . import otp_bp
from ...core.views import action_response, admin_required, json_body, register_resource_routes, screen_for

register_resource_routes(otp_bp, 'otp_settings', slug='settings')


@otp_bp.route('/api/test', methods=['POST'])
@admin_required
def send_test_sms():
    """Send a test SMS; the backend answers with the remaining credit when it knows it"""
    phone = str(json_body().get('phone') or '').strip()
    if not phone:
        return jsonify({'success': False, 'error': 'Phone number is required',
                        'errors': {'phone': ['Phone number is required']}}), 400

    screen = screen_for('otp_settings')
    return action_response(screen, screen.run_action('POST', 'test', body={'phone': phone}))
