"""
Transport Routes
================
"""

from . import transports_bp
from ...core.views import action_response, admin_required, register_resource_routes, screen_for

register_resource_routes(transports_bp, 'transports', slug='items')


@transports_bp.route('/api/types')
@admin_required
def transport_types():
    """Type code -> label (airline, bus, ...)"""
    screen = screen_for('transports')
    return action_response(screen, screen.run_action('GET', 'types'))
