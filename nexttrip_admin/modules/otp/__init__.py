"""
OTP Module
==========

SMS gateway settings used for member phone verification, and a test
send to check the credentials.
"""

from flask import Blueprint

otp_bp = Blueprint(
    'otp',
    __name__,
    url_prefix='/admin/otp'
)

from . import routes

__all__ = ['otp_bp']
