"""
Wholesalers Module
==================

Tour suppliers whose programmes are imported into NextTrip.
"""

from flask import Blueprint

wholesalers_bp = Blueprint(
    'wholesalers',
    __name__,
    url_prefix='/admin/wholesalers'
)

from . import routes

__all__ = ['wholesalers_bp']
