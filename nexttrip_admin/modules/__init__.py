"""
NextTrip Admin Modules
======================

One Flask blueprint per admin area. Each module registers the standard
resource routes from core.views plus its own extra endpoints.
"""

__all__ = [
    'dashboard', 'destinations', 'transports', 'wholesalers', 'users',
    'blog', 'about', 'website', 'member_points', 'otp',
]
