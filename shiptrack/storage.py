"""
Persistence Gateway
===================

Narrow repository over users, shipments, shipment events, verification codes,
subscriptions and the shipping-service catalog. Every method is a single-entity
CRUD call or a filtered/ordered list. Methods flush so generated ids are
available, but never commit: committing belongs to ``transaction()``.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List, Optional

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    Shipment, ShipmentEvent, ShippingService, Subscription, User,
    VerificationCode, utcnow
)


class Storage:
    """Repository bound to one AsyncSession (one request, one unit of work)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["Storage"]:
        """Commit everything written inside the block, or nothing at all."""
        try:
            yield self
            await self.session.commit()
        except BaseException:
            await self.session.rollback()
            raise

    async def _add(self, entity):
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def _first(self, query):
        result = await self.session.execute(query)
        return result.scalars().first()

    async def _all(self, query) -> List:
        result = await self.session.execute(query)
        return list(result.scalars().all())

    # --- Users ---

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(User).filter(User.email == email))

    async def create_user(self, **fields) -> User:
        return await self._add(User(**fields))

    async def list_users(self) -> List[User]:
        return await self._all(select(User).order_by(User.created_at.desc(), User.id.desc()))

    async def update_user(self, user_id: int, **fields) -> Optional[User]:
        user = await self.get_user(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        await self.session.flush()
        return user

    async def set_user_admin(self, user_id: int, is_admin: bool) -> Optional[User]:
        return await self.update_user(user_id, is_admin=is_admin)

    async def mark_user_verified(self, user: User, channel: str) -> User:
        user.mark_verified(channel)
        await self.session.flush()
        return user

    # --- Shipments ---

    async def create_shipment(self, **fields) -> Shipment:
        return await self._add(Shipment(**fields))

    async def get_shipment(self, shipment_id: int) -> Optional[Shipment]:
        return await self.session.get(Shipment, shipment_id)

    @staticmethod
    def shipment_lookup(tracking_id: str, for_update: bool = False):
        """SELECT for one shipment; ``for_update`` adds a row lock (a no-op on SQLite)."""
        query = select(Shipment).filter(Shipment.tracking_id == tracking_id)
        if for_update:
            query = query.with_for_update()
        return query

    async def get_shipment_by_tracking_id(self, tracking_id: str,
                                          for_update: bool = False) -> Optional[Shipment]:
        return await self._first(self.shipment_lookup(tracking_id, for_update))

    async def tracking_id_exists(self, tracking_id: str) -> bool:
        found = await self._first(select(Shipment.id).filter(Shipment.tracking_id == tracking_id))
        return found is not None

    async def list_shipments_by_owner(self, user_id: int) -> List[Shipment]:
        query = (
            select(Shipment)
            .filter(Shipment.created_by_id == user_id)
            .order_by(Shipment.created_at.desc(), Shipment.id.desc())
        )
        return await self._all(query)

    async def list_shipments(self) -> List[Shipment]:
        return await self._all(select(Shipment).order_by(Shipment.created_at.desc(), Shipment.id.desc()))

    async def update_shipment_status(self, tracking_id: str, status: str) -> Optional[Shipment]:
        shipment = await self.get_shipment_by_tracking_id(tracking_id)
        if shipment is None:
            return None
        shipment.status = status
        await self.session.flush()
        return shipment

    async def mark_shipment_code_used(self, shipment: Shipment) -> Shipment:
        shipment.verification_code_used = True
        await self.session.flush()
        return shipment

    async def delete_shipment(self, shipment_id: int) -> bool:
        """Delete child events first, then the shipment row."""
        shipment = await self.get_shipment(shipment_id)
        if shipment is None:
            return False
        await self.session.execute(
            delete(ShipmentEvent).where(ShipmentEvent.shipment_id == shipment_id)
        )
        await self.session.delete(shipment)
        await self.session.flush()
        return True

    # --- Shipment events ---

    async def create_shipment_event(self, **fields) -> ShipmentEvent:
        return await self._add(ShipmentEvent(**fields))

    async def list_shipment_events(self, shipment_id: int, newest_first: bool = True) -> List[ShipmentEvent]:
        query = select(ShipmentEvent).filter(ShipmentEvent.shipment_id == shipment_id)
        if newest_first:
            query = query.order_by(ShipmentEvent.timestamp.desc(), ShipmentEvent.id.desc())
        else:
            query = query.order_by(ShipmentEvent.timestamp.asc(), ShipmentEvent.id.asc())
        return await self._all(query)

    # --- Verification codes ---

    async def create_verification_code(self, record: VerificationCode) -> VerificationCode:
        return await self._add(record)

    async def find_valid_verification_code(self, user_id: int, code: str, channel: str,
                                           now: datetime = None) -> Optional[VerificationCode]:
        """Newest unused, unexpired code matching user, value and channel."""
        now = now or utcnow()
        query = (
            select(VerificationCode)
            .filter(and_(
                VerificationCode.user_id == user_id,
                VerificationCode.code == code,
                VerificationCode.type == channel,
                VerificationCode.is_used == False,  # noqa: E712
                VerificationCode.expires_at > now,
            ))
            .order_by(VerificationCode.created_at.desc(), VerificationCode.id.desc())
        )
        return await self._first(query)

    async def mark_verification_code_used(self, record: VerificationCode) -> VerificationCode:
        record.is_used = True
        await self.session.flush()
        return record

    # --- Subscriptions ---

    async def create_subscription(self, **fields) -> Subscription:
        return await self._add(Subscription(**fields))

    # --- Shipping service catalog ---

    async def list_services(self) -> List[ShippingService]:
        return await self._all(select(ShippingService).order_by(ShippingService.price.asc(), ShippingService.id.asc()))

    async def get_service(self, service_id: int) -> Optional[ShippingService]:
        return await self.session.get(ShippingService, service_id)

    async def get_service_by_name(self, name: str) -> Optional[ShippingService]:
        return await self._first(select(ShippingService).filter(ShippingService.name == name))

    async def create_service(self, **fields) -> ShippingService:
        return await self._add(ShippingService(**fields))
