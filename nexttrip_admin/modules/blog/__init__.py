"""
Blog Module
===========

Blog categories (ordered), posts with cover images, and the blog
landing page settings.
"""

from flask import Blueprint

blog_bp = Blueprint(
    'blog',
    __name__,
    url_prefix='/admin/blog'
)

from . import routes

__all__ = ['blog_bp']
