"""
About Us Routes
===============
"""

from . import about_bp
from ...core.views import register_resource_routes

register_resource_routes(about_bp, 'about_settings', slug='settings')
register_resource_routes(about_bp, 'about_associations', slug='associations')
register_resource_routes(about_bp, 'about_services', slug='services')
register_resource_routes(about_bp, 'about_customer_groups', slug='customer-groups')
register_resource_routes(about_bp, 'about_awards', slug='awards')
