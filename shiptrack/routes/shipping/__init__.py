"""
Shipping Routes
===============
"""

from .shipment_routes import shipment_router
from .catalog_routes import catalog_router
from .subscription_routes import subscription_router

__all__ = ['shipment_router', 'catalog_router', 'subscription_router']
