"""
Website Routes
==============

Standard CRUD for menus, SEO and site contacts, plus:
- POST /api/menus/drop   {location, dragged_id, target_id}
- GET  /api/menus/locations
- GET  /api/seo/pages
"""

from flask import jsonify, request

from . import website_bp
from ...core.views import (
    DEFAULT_MENU_LOCATION, action_response, admin_required, json_body,
    list_for, list_response, register_resource_routes, screen_for,
)

register_resource_routes(website_bp, 'menus')
register_resource_routes(website_bp, 'seo')
register_resource_routes(website_bp, 'site_contacts', slug='contacts')


# ===== Menus =====

@website_bp.route('/api/menus/locations')
@admin_required
def menu_locations():
    """Location key -> label"""
    screen = screen_for('menus')
    return action_response(screen, screen.run_action('GET', 'locations'))


@website_bp.route('/api/menus/drop', methods=['POST'])
@admin_required
def drop_menu():
    """
    Drop one menu row onto another within a location.

    The dragged menu takes the target's position and level. The whole
    location is sent to /menus/reorder, then reloaded from the backend.
    """
    data = json_body()
    dragged_id = data.get('dragged_id')
    target_id = data.get('target_id')
    if dragged_id is None or target_id is None:
        return jsonify({'success': False, 'error': 'dragged_id and target_id are required'}), 400
    if not all(isinstance(value, (int, str)) for value in (dragged_id, target_id)):
        return jsonify({'success': False, 'error': 'dragged_id and target_id must be ids'}), 400

    location = data.get('location') or request.args.get('location') or DEFAULT_MENU_LOCATION
    tree = list_for('menus', scope=location)

    # MenuTreeError is answered with 400 by the app-level handler
    changed = tree.drop(dragged_id, target_id, refresh_first=True)
    return list_response(tree, changed)


# ===== SEO =====

@website_bp.route('/api/seo/pages')
@admin_required
def seo_pages():
    """Page slug -> page name, for pages that have no SEO record yet"""
    screen = screen_for('seo')
    return action_response(screen, screen.run_action('GET', 'pages'))
