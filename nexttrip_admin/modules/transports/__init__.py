"""
Transports Module
=================

Airlines and other carriers referenced by tours.
"""

from flask import Blueprint

transports_bp = Blueprint(
    'transports',
    __name__,
    url_prefix='/admin/transports'
)

from . import routes

__all__ = ['transports_bp']
