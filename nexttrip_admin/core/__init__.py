"""
NextTrip Admin Core
===================

Shared functionality for the admin modules: configuration, logging,
the NextTrip API client, the resource catalogue, ordering helpers and
the screen controllers the blueprints are built on.
"""

from .config import Config, get_config_value
from .database import Database
from .logging_service import LoggingService, logger, db_log
from .api_client import (
    ApiClient,
    ApiError,
    AuthContext,
    AuthenticationRequired,
    Failure,
    SessionAuth,
    StaticTokenAuth,
    Success,
    parse_envelope,
)
from .ordering import MenuTreeError
from .resources import RESOURCES, ResourceApi, ResourceSpec, get_resource
from .reorder import MenuTreeList, ReorderableList
from .screens import CrudScreen, ScreenStatus, SettingsScreen

__all__ = [
    'Config', 'get_config_value', 'Database', 'LoggingService', 'logger', 'db_log',
    'ApiClient', 'ApiError', 'AuthContext', 'AuthenticationRequired', 'Failure',
    'SessionAuth', 'StaticTokenAuth', 'Success', 'parse_envelope',
    'MenuTreeError', 'RESOURCES', 'ResourceApi', 'ResourceSpec', 'get_resource',
    'MenuTreeList', 'ReorderableList', 'CrudScreen', 'ScreenStatus', 'SettingsScreen',
]
