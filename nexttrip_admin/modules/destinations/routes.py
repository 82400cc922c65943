"""
Destination Routes
==================

Standard CRUD for countries and cities plus region lookup,
the popular-city flag and the grouped country -> cities listing.
"""

from flask import request

from . import destinations_bp
from ...core.views import action_response, admin_required, register_resource_routes, screen_for, screen_response

register_resource_routes(destinations_bp, 'countries')
register_resource_routes(destinations_bp, 'cities')


@destinations_bp.route('/api/countries/regions')
@admin_required
def country_regions():
    """Region code -> label, for the country form"""
    screen = screen_for('countries')
    return action_response(screen, screen.run_action('GET', 'regions'))


@destinations_bp.route('/api/cities/<int:item_id>/popular', methods=['PATCH'])
@admin_required
def toggle_popular_city(item_id):
    screen = screen_for('cities', **request.args.to_dict())
    result = screen.run_action('PATCH', 'toggle-popular', item_id=item_id, reload=True)
    return screen_response(screen, result is not None)


@destinations_bp.route('/api/cities/by-country')
@admin_required
def cities_by_country():
    """Countries with their cities nested"""
    params = {k: v for k, v in request.args.items() if k in ('search', 'region', 'has_cities')}
    screen = screen_for('cities')
    return action_response(screen, screen.run_action('GET', 'countries-with-cities', params=params))
