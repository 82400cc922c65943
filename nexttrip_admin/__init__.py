"""
NextTrip Admin - Tour Operator Admin Dashboard
==============================================

A modular Flask admin for the NextTrip tour-operator platform. It keeps
no data of its own: every screen is a client of the NextTrip REST API.

- Destinations (countries, cities), transports, wholesalers, users
- Blog categories, posts and page settings
- About Us building blocks with drag & drop / arrow ordering
- Website menus (two-level tree), SEO and site contacts
- Member points and OTP/SMS settings

Usage:
    from flask import Flask
    from nexttrip_admin import NextTripAdmin

    app = Flask(__name__)
    NextTripAdmin(app, {'features': {'member_points': False}})
"""

import logging
import os

import requests
from flask_cors import CORS

from .core.api_client import ApiClient, AuthenticationRequired, SessionAuth
from .core.config import Config, get_config_value
from .core.ordering import MenuTreeError
from .core.views import auth_required_response, menu_tree_error_response

__version__ = '0.1.0'
__author__ = 'NextTrip'

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'dashboard': True,
    'destinations': True,
    'transports': True,
    'wholesalers': True,
    'users': True,
    'blog': True,
    'about': True,
    'website': True,
    'member_points': True,
    'otp': True,
}


class NextTripAdmin:
    """
    Flask extension registering the admin modules on an app.

    Args:
        app: Flask app (or call init_app later)
        config: optional dict, e.g.
            {'features': {'blog': False}, 'api_url': '...', 'api_token': '...'}
    """

    def __init__(self, app=None, config=None):
        self._config = config or {}
        self._registered_modules = []
        # Shared HTTP connection pool for the backend; tests swap in a mock
        self.http = requests.Session()
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._apply_config(app)
        self._setup_database_dir(app)
        self._setup_cors(app)
        self._register_modules(app)
        self._register_error_handlers(app)
        app.extensions['nexttrip_admin'] = self
        logger.info("NextTrip Admin initialised with modules: %s", ', '.join(self._registered_modules))

    # ===== Setup =====

    def _apply_config(self, app):
        overrides = {
            'NEXTTRIP_API_URL': self._config.get('api_url'),
            'NEXTTRIP_API_TOKEN': self._config.get('api_token'),
            'NEXTTRIP_API_TIMEOUT': self._config.get('api_timeout'),
            'NEXTTRIP_LOGIN_URL': self._config.get('login_url'),
        }
        for key, value in overrides.items():
            if value is not None:
                app.config[key] = value

        if not app.config.get('SECRET_KEY') and Config.SECRET_KEY:
            app.config['SECRET_KEY'] = Config.SECRET_KEY

        db_dir = app.config.get('DB_DIR')
        if db_dir and not app.config.get('LOG_DB'):
            app.config['LOG_DB'] = os.path.join(db_dir, 'admin_logs.db')

    def _setup_database_dir(self, app):
        """Create DB_DIR (home of the log database) if it does not exist."""
        db_dir = app.config.get('DB_DIR') or Config.DB_DIR
        try:
            os.makedirs(db_dir, exist_ok=True)
        except OSError as e:
            logger.warning("Could not create DB_DIR %s: %s", db_dir, e)

    def _setup_cors(self, app):
        origins = app.config.get('ADMIN_CORS_ORIGINS') or Config.ADMIN_CORS_ORIGINS
        CORS(app, resources={r"/admin/*": {"origins": origins}}, supports_credentials=True)

    def features(self):
        features = dict(DEFAULT_FEATURES)
        features.update(self._config.get('features', {}))
        return features

    def _register_modules(self, app):
        features = self.features()

        if features['dashboard']:
            from .modules.dashboard import dashboard_bp, health_bp
            app.register_blueprint(dashboard_bp)
            app.register_blueprint(health_bp)
            self._registered_modules.append('dashboard')

        if features['destinations']:
            from .modules.destinations import destinations_bp
            app.register_blueprint(destinations_bp)
            self._registered_modules.append('destinations')

        if features['transports']:
            from .modules.transports import transports_bp
            app.register_blueprint(transports_bp)
            self._registered_modules.append('transports')

        if features['wholesalers']:
            from .modules.wholesalers import wholesalers_bp
            app.register_blueprint(wholesalers_bp)
            self._registered_modules.append('wholesalers')

        if features['users']:
            from .modules.users import users_bp
            app.register_blueprint(users_bp)
            self._registered_modules.append('users')

        if features['blog']:
            from .modules.blog import blog_bp
            app.register_blueprint(blog_bp)
            self._registered_modules.append('blog')

        if features['about']:
            from .modules.about import about_bp
            app.register_blueprint(about_bp)
            self._registered_modules.append('about')

        if features['website']:
            from .modules.website import website_bp
            app.register_blueprint(website_bp)
            self._registered_modules.append('website')

        if features['member_points']:
            from .modules.member_points import member_points_bp
            app.register_blueprint(member_points_bp)
            self._registered_modules.append('member_points')

        if features['otp']:
            from .modules.otp import otp_bp
            app.register_blueprint(otp_bp)
            self._registered_modules.append('otp')

    def _register_error_handlers(self, app):
        @app.errorhandler(AuthenticationRequired)
        def handle_authentication_required(error):
            return auth_required_response()

        @app.errorhandler(MenuTreeError)
        def handle_menu_tree_error(error):
            return menu_tree_error_response(error)

    # ===== Runtime =====

    def get_registered_modules(self):
        return list(self._registered_modules)

    def make_client(self, auth=None):
        """ApiClient bound to the current session token (or the given AuthContext)."""
        return ApiClient(
            base_url=get_config_value('NEXTTRIP_API_URL'),
            auth=auth or SessionAuth(),
            http=self.http,
        )


__all__ = ['NextTripAdmin', '__version__']
