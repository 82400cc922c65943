"""
Member Points Module
====================

Loyalty programme administration: levels, earning rules, members with
their point balances and transaction history, and manual adjustments.
"""

from flask import Blueprint

member_points_bp = Blueprint(
    'member_points',
    __name__,
    url_prefix='/admin/member-points'
)

from . import routes

__all__ = ['member_points_bp']
