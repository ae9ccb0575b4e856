"""
Shipping Domain Services
========================

Services for shipments, the service catalog and tracking subscriptions
"""

from .shipment_service import ShipmentService
from .catalog_service import CatalogService
from .subscription_service import SubscriptionService

__all__ = [
    'ShipmentService',
    'CatalogService',
    'SubscriptionService'
]
