"""
Shipping Domain Schemas
=======================

Schemas for shipments, shipment events, the service catalog and subscriptions.
"""

from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import Field, field_validator

from .base import BaseSchema
from .validators import (
    validate_optional_text, validate_phone_number, validate_positive_number,
    validate_required_text
)


# field -> (label, column size)
SHIPMENT_TEXT_FIELDS = {
    'sender_name': ('Sender name', 100),
    'recipient_name': ('Recipient name', 100),
    'origin': ('Origin', 200),
    'destination': ('Destination', 200),
}

class ShipmentCreateSchema(BaseSchema):
    sender_name: str = Field(None, validate_default=True)
    recipient_name: str = Field(None, validate_default=True)
    origin: str = Field(None, validate_default=True)
    destination: str = Field(None, validate_default=True)
    weight_kg: Optional[float] = None
    service_id: Optional[int] = None

    @field_validator('sender_name', 'recipient_name', 'origin', 'destination', mode='before')
    @classmethod
    def required_text(cls, v, info):
        label, max_length = SHIPMENT_TEXT_FIELDS[info.field_name]
        return validate_required_text(v, label, max_length)

    @field_validator('weight_kg')
    @classmethod
    def weight_positive(cls, v):
        return validate_positive_number(v)


class ShipmentSchema(BaseSchema):
    """Shipment as exposed to clients. The verification code itself is never included."""
    id: int
    tracking_id: str
    sender_name: str
    recipient_name: str
    origin: str
    destination: str
    weight_kg: Optional[float] = None
    status: str
    service_id: Optional[int] = None
    verification_code_used: bool = False
    created_by_id: int
    created_at: Optional[datetime] = None


class ShipmentEventCreateSchema(BaseSchema):
    status: str = Field(None, validate_default=True)
    location: str = Field(None, validate_default=True)
    note: Optional[str] = None

    @field_validator('status', mode='before')
    @classmethod
    def status_required(cls, v):
        return validate_required_text(v, 'Status', 50)

    @field_validator('location', mode='before')
    @classmethod
    def location_required(cls, v):
        return validate_required_text(v, 'Location', 200)

    @field_validator('note', mode='before')
    @classmethod
    def note_optional(cls, v):
        return validate_optional_text(v)


class ShipmentEventSchema(BaseSchema):
    id: int
    shipment_id: int
    status: str
    location: str
    note: Optional[str] = None
    timestamp: datetime


class ShipmentVerifySchema(BaseSchema):
    # Presence is checked by ShipmentService so direct callers get the same error.
    # The code must match exactly, surrounding whitespace included.
    unstripped_fields: ClassVar[Tuple[str, ...]] = ('code',)

    code: Optional[str] = None


class ShippingServiceSchema(BaseSchema):
    id: int
    name: str
    price: float
    description: Optional[str] = None


class SubscriptionCreateSchema(BaseSchema):
    tracking_number: str = Field(None, validate_default=True)
    phone_number: str = Field(None, validate_default=True)

    @field_validator('tracking_number', mode='before')
    @classmethod
    def tracking_number_required(cls, v):
        return validate_required_text(v, 'Tracking number', 32)

    @field_validator('phone_number', mode='before')
    @classmethod
    def phone_number_valid(cls, v):
        return validate_phone_number(validate_required_text(v, 'Phone number'))


class SubscriptionSchema(BaseSchema):
    id: int
    tracking_number: str
    phone_number: str
    created_at: Optional[datetime] = None
