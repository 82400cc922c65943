"""
Destinations Module
===================

Countries and cities used by tours and the public site.
Two resources share one blueprint at /admin/destinations.
"""

from flask import Blueprint

destinations_bp = Blueprint(
    'destinations',
    __name__,
    url_prefix='/admin/destinations'
)

from . import routes

__all__ = ['destinations_bp']
