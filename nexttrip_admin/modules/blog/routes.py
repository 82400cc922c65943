"""
Blog Routes
===========

- /api/categories  reorderable with arrows or drag & drop
- /api/posts       paginated, filtered by status/category/search
- /api/settings    landing page copy and hero image
"""

from . import blog_bp
from ...core.views import register_resource_routes

register_resource_routes(blog_bp, 'blog_categories', slug='categories')
register_resource_routes(blog_bp, 'blog_posts', slug='posts')
register_resource_routes(blog_bp, 'blog_settings', slug='settings')
