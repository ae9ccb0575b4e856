"""
Authentication Routes
=====================

Routes for authentication and user verification
"""

from .auth_routes import router as auth_router
from .verification_routes import router as verification_router

__all__ = ['auth_router', 'verification_router']
