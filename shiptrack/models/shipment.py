from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, Numeric, String, Text
)

from .base import Base, BaseModel, utcnow

# Canonical status labels. Status stays free text; these are the ones the
# tracking timeline knows how to place.
STATUS_CREATED = 'Created'
STATUS_IN_TRANSIT = 'In Transit'
STATUS_OUT_FOR_DELIVERY = 'Out for Delivery'
STATUS_DELIVERED = 'Delivered'
STATUS_EXCEPTION = 'Exception'

SHIPMENT_STATUSES = (
    STATUS_CREATED,
    STATUS_IN_TRANSIT,
    STATUS_OUT_FOR_DELIVERY,
    STATUS_DELIVERED,
    STATUS_EXCEPTION,
)


def canonical_status(label: str) -> str:
    """Map a status label onto its canonical spelling, comparing case-insensitively."""
    cleaned = ' '.join(label.split())
    for status in SHIPMENT_STATUSES:
        if status.lower() == cleaned.lower():
            return status
    return cleaned


class ShippingService(BaseModel):
    """Catalog entry, e.g. Express Delivery."""
    __tablename__ = 'shipping_services'

    name = Column(String(100), unique=True, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text)


class Shipment(BaseModel):
    __tablename__ = 'shipments'

    tracking_id = Column(String(32), unique=True, nullable=False, index=True)

    # Parties and route
    sender_name = Column(String(100), nullable=False)
    recipient_name = Column(String(100), nullable=False)
    origin = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=False)
    weight_kg = Column(Float)

    # Mirrors the status of the newest ShipmentEvent
    status = Column(String(50), nullable=False, default=STATUS_CREATED)

    service_id = Column(Integer, ForeignKey('shipping_services.id'), nullable=True)

    # Shipment-level one-time code, minted only on the admin path
    verification_code = Column(String(6))
    verification_code_used = Column(Boolean, default=False, nullable=False)

    created_by_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    def __repr__(self):
        return f"<Shipment {self.tracking_id} {self.status}>"


class ShipmentEvent(Base):
    """Append-only status history entry. Removed only together with its shipment."""
    __tablename__ = 'shipment_events'

    id = Column(Integer, primary_key=True)
    shipment_id = Column(Integer, ForeignKey('shipments.id'), nullable=False, index=True)
    status = Column(String(50), nullable=False)
    location = Column(String(200), nullable=False)
    note = Column(Text)
    timestamp = Column(DateTime, default=utcnow, nullable=False)


class Subscription(BaseModel):
    """SMS opt-in for tracking updates. Write-once."""
    __tablename__ = 'subscriptions'

    tracking_number = Column(String(32), nullable=False, index=True)
    phone_number = Column(String(20), nullable=False)
