"""
ShipTrack Routes
================

Routers grouped by domain; mounted by setup_routes() in the app factory.
"""

from .auth import auth_router, verification_router
from .shipping import shipment_router, catalog_router, subscription_router
from .admin import admin_router

__all__ = [
    'auth_router', 'verification_router',
    'shipment_router', 'catalog_router', 'subscription_router',
    'admin_router',
]
