"""
BACKEND PACKAGE INITIALIZATION FILE

Flask HTTP layer for the TOTP API. Wraps totp_core.generate and turns its
errors into JSON responses.
"""

from .app import app, create_app

__all__ = ['app', 'create_app']
