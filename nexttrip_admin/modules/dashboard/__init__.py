"""
Dashboard Module
================

Admin landing endpoint and public health check.

Provides:
- /admin/            overview of the enabled modules and their resources
- /admin/api/logs    recent entries from the persistent log store
- /admin/api/session hand-off of the backend token issued by the login app
- /health            unauthenticated check for uptime monitors
"""

from flask import Blueprint

# Note: Blueprint name is 'admin' so other modules can link to admin.index
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin'
)

# Public health endpoint (no auth, for uptime monitors)
health_bp = Blueprint(
    'health',
    __name__,
    url_prefix='/health'
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp', 'health_bp']
