"""
Website Module
==============

Site-wide content of the public NextTrip website:
- Menus: a two-level tree per location (header, footer columns),
  reordered by drag & drop
- SEO: per-page meta tags and Open Graph image, keyed by page slug
- Site contacts: phone numbers, e-mail and social links
"""

from flask import Blueprint

website_bp = Blueprint(
    'website',
    __name__,
    url_prefix='/admin/website'
)

from . import routes

__all__ = ['website_bp']
