"""
Users Module
============

Back-office staff accounts.
"""

from flask import Blueprint

users_bp = Blueprint(
    'users',
    __name__,
    url_prefix='/admin/users'
)

from . import routes

__all__ = ['users_bp']
