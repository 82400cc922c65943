"""
About Us Module
===============

Building blocks of the About Us page. Associations, services, customer
groups and awards are ordered lists; the page settings are a single
record with hero and license images.
"""

from flask import Blueprint

about_bp = Blueprint(
    'about',
    __name__,
    url_prefix='/admin/about'
)

from . import routes

__all__ = ['about_bp']
