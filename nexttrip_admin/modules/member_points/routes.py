"""
Member Points Routes
====================

Levels and rules use the standard routes (a level still held by members
cannot be deleted; the backend's message is passed through). Rules have
no toggle endpoint, so toggling updates is_active.
"""

from flask import jsonify, request

from . import member_points_bp
from ...core.views import action_response, admin_required, json_body, register_resource_routes, screen_for

register_resource_routes(member_points_bp, 'member_levels', slug='levels')
register_resource_routes(member_points_bp, 'member_rules', slug='rules')
register_resource_routes(member_points_bp, 'members')


def validate_adjustment(data):
    """Manual adjustment needs a non-zero whole number of points and a reason"""
    errors = {}
    try:
        points = int(data.get('points') or 0)
    except (TypeError, ValueError):
        points = 0
    if points == 0:
        errors['points'] = ['Points must be a non-zero number']
    if not str(data.get('description') or '').strip():
        errors['description'] = ['Description is required']
    return points, errors


@member_points_bp.route('/api/stats')
@admin_required
def stats():
    """Programme totals: members, points issued/spent, members per level"""
    screen = screen_for('member_points')
    return action_response(screen, screen.run_action('GET', 'stats'))


@member_points_bp.route('/api/members/<int:item_id>/transactions')
@admin_required
def member_transactions(item_id):
    params = {k: v for k, v in request.args.items() if k in ('type', 'page', 'per_page')}
    screen = screen_for('members')
    return action_response(screen, screen.run_action('GET', 'transactions', item_id=item_id, params=params))


@member_points_bp.route('/api/members/<int:item_id>/adjust', methods=['POST'])
@admin_required
def adjust_member_points(item_id):
    data = json_body()
    points, errors = validate_adjustment(data)
    if errors:
        return jsonify({
            'success': False,
            'error': next(iter(errors.values()))[0],
            'errors': errors,
        }), 400

    screen = screen_for('members', **request.args.to_dict())
    result = screen.run_action('POST', 'adjust', item_id=item_id, body={
        'points': points,
        'description': str(data['description']).strip(),
    }, reload=True)
    return action_response(screen, result)
