"""
User Routes
===========

Staff CRUD. The password is required on create only; on update a blank
password is left out so the stored one is kept.
"""

from . import users_bp
from ...core.views import register_resource_routes

register_resource_routes(users_bp, 'users', slug='items')
