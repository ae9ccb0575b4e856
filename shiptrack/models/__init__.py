"""
ShipTrack Models Package
========================

Database models for the shipping/tracking backend.

Domain Structure:
- Core: Base model and declarative base
- User: accounts and user-level verification codes
- Shipping: shipments, their event history, service catalog, subscriptions
"""

# ==================== CORE IMPORTS ====================

from .base import Base, BaseModel, utcnow

# ==================== USER DOMAIN ====================

from .user import User, VerificationCode, VERIFICATION_CHANNELS

# ==================== SHIPPING DOMAIN ====================

from .shipment import (
    Shipment,
    ShipmentEvent,
    ShippingService,
    Subscription,
    SHIPMENT_STATUSES,
    STATUS_CREATED,
    STATUS_IN_TRANSIT,
    STATUS_OUT_FOR_DELIVERY,
    STATUS_DELIVERED,
    STATUS_EXCEPTION,
    canonical_status,
)

__all__ = [
    'Base', 'BaseModel', 'utcnow',
    'User', 'VerificationCode', 'VERIFICATION_CHANNELS',
    'Shipment', 'ShipmentEvent', 'ShippingService', 'Subscription',
    'SHIPMENT_STATUSES', 'STATUS_CREATED', 'STATUS_IN_TRANSIT',
    'STATUS_OUT_FOR_DELIVERY', 'STATUS_DELIVERED', 'STATUS_EXCEPTION',
    'canonical_status',
]
