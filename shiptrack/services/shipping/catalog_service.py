"""
Shipping Service Catalog
========================

Static reference data: the services a shipment can optionally point at.
"""

from decimal import Decimal
from typing import List

from ..base import BaseService, transactional
from ...models import ShippingService

DEFAULT_SERVICES = (
    ('Express Delivery', Decimal('49.99'),
     'Next-day delivery for urgent shipments. Available for domestic and select international destinations.'),
    ('Ground Shipping', Decimal('12.99'),
     'Cost-effective ground transportation for standard shipments with reliable delivery windows.'),
    ('International Air', Decimal('89.99'),
     'Fast international delivery via our global air freight network to 220+ countries.'),
    ('Freight Services', Decimal('249.00'),
     'Large shipment solutions for pallets and containers.'),
    ('Ocean Freight', Decimal('399.00'),
     'Cost-effective shipping for large international cargo.'),
)


class CatalogService(BaseService):
    """Service for the shipping-service catalog"""

    async def list_services(self) -> List[ShippingService]:
        return await self.storage.list_services()

    @transactional
    async def seed_defaults(self) -> int:
        """Insert the default catalog entries that are missing. Returns how many were added."""
        added = 0
        for name, price, description in DEFAULT_SERVICES:
            if await self.storage.get_service_by_name(name) is None:
                await self.storage.create_service(name=name, price=price, description=description)
                added += 1
        if added:
            self.logger.info(f"Seeded {added} shipping services")
        return added
