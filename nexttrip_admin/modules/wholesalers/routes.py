"""
Wholesaler Routes
=================

CRUD and the active flag (PATCH /wholesalers/{id}/toggle-active).
"""

from . import wholesalers_bp
from ...core.views import register_resource_routes

register_resource_routes(wholesalers_bp, 'wholesalers', slug='items')
