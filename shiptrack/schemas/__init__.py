"""
ShipTrack Schemas
=================

Pydantic request/response schemas.
"""

from .base import BaseSchema
from .validators import first_error
from .user import (
    UserSchema, RegisterSchema, LoginSchema, AdminUserUpdateSchema,
    VerificationGenerateSchema, VerificationVerifySchema
)
from .shipment import (
    ShipmentCreateSchema, ShipmentSchema, ShipmentEventCreateSchema,
    ShipmentEventSchema, ShipmentVerifySchema, ShippingServiceSchema,
    SubscriptionCreateSchema, SubscriptionSchema
)

__all__ = [
    'BaseSchema', 'first_error',
    'UserSchema', 'RegisterSchema', 'LoginSchema', 'AdminUserUpdateSchema',
    'VerificationGenerateSchema', 'VerificationVerifySchema',
    'ShipmentCreateSchema', 'ShipmentSchema', 'ShipmentEventCreateSchema',
    'ShipmentEventSchema', 'ShipmentVerifySchema', 'ShippingServiceSchema',
    'SubscriptionCreateSchema', 'SubscriptionSchema',
]
