"""
Shipment Service
================

CRITICAL SERVICE for the shipment lifecycle.

A shipment carries a mutable ``status`` plus an append-only list of
ShipmentEvents. The status always equals the status of the newest event, so
every write that touches one touches the other inside the same transaction.
"""

from typing import List, Optional, Tuple

from ..base import BaseService, transactional
from ..exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..auth.credentials import generate_tracking_id, generate_verification_code
from ...models import STATUS_CREATED, Shipment, ShipmentEvent, canonical_status
from ...schemas import ShipmentCreateSchema, ShipmentEventCreateSchema

CREATION_NOTE = 'Shipment created and ready for pickup'


class ShipmentService(BaseService):
    """CRITICAL SERVICE for Shipment management"""

    def __init__(self, storage, settings, notification_service=None):
        super().__init__(storage, settings, notification_service)
        self.tracking_prefix = settings.TRACKING_ID_PREFIX.upper()
        self.max_tracking_attempts = max(1, settings.TRACKING_ID_MAX_ATTEMPTS)

    @transactional
    async def create_shipment(self, data, owner_id: int,
                              as_admin: bool = False) -> Tuple[Shipment, Optional[str]]:
        """
        Create a shipment and its first "Created" event in one transaction.

        The admin path also mints a one-time verification code. It is returned
        here in plain text and nowhere else.
        """
        data = self._validate(ShipmentCreateSchema, data)

        if data.service_id is not None and await self.storage.get_service(data.service_id) is None:
            raise ValidationError(f"Unknown shipping service: {data.service_id}", field='serviceId')

        tracking_id = await self._generate_unique_tracking_id()
        verification_code = generate_verification_code() if as_admin else None

        shipment = await self.storage.create_shipment(
            tracking_id=tracking_id,
            sender_name=data.sender_name,
            recipient_name=data.recipient_name,
            origin=data.origin,
            destination=data.destination,
            weight_kg=data.weight_kg,
            status=STATUS_CREATED,
            service_id=data.service_id,
            verification_code=verification_code,
            verification_code_used=False,
            created_by_id=owner_id,
        )

        await self.storage.create_shipment_event(
            shipment_id=shipment.id,
            status=STATUS_CREATED,
            location=shipment.origin,
            note=CREATION_NOTE,
        )

        self.logger.info(f"Shipment {tracking_id} created by user {owner_id}"
                         f"{' (admin, with verification code)' if as_admin else ''}")
        return shipment, verification_code

    async def get_by_tracking_id(self, tracking_id: str, for_update: bool = False) -> Shipment:
        shipment = await self.storage.get_shipment_by_tracking_id(
            self._clean_tracking_id(tracking_id), for_update=for_update
        )
        if shipment is None:
            raise NotFoundError('Shipment', tracking_id)
        return shipment

    async def track(self, tracking_id: str) -> Tuple[Shipment, List[ShipmentEvent]]:
        """Public lookup: shipment plus its history, newest event first."""
        shipment = await self.get_by_tracking_id(tracking_id)
        events = await self.get_events(shipment.id)
        return shipment, events

    async def list_by_owner(self, user_id: int) -> List[Shipment]:
        return await self.storage.list_shipments_by_owner(user_id)

    async def get_events(self, shipment_id: int) -> List[ShipmentEvent]:
        return await self.storage.list_shipment_events(shipment_id, newest_first=True)

    @transactional
    async def append_event(self, tracking_id: str, status: str = None, location: str = None,
                           note: str = None, actor=None) -> Tuple[Shipment, ShipmentEvent]:
        """
        Record a new status event and sync the shipment status to it.

        ``actor`` is the requesting identity (id, is_admin). When given, only the
        shipment owner or an admin may append.
        """
        data = self._validate(ShipmentEventCreateSchema,
                              {'status': status, 'location': location, 'note': note})

        # locked until commit so status stays in step with the newest event
        shipment = await self.get_by_tracking_id(tracking_id, for_update=True)
        if actor is not None and not actor.is_admin and shipment.created_by_id != actor.id:
            raise AuthorizationError("Only the shipment owner or an admin can add events")

        new_status = canonical_status(data.status)
        event = await self.storage.create_shipment_event(
            shipment_id=shipment.id,
            status=new_status,
            location=data.location,
            note=data.note,
        )
        shipment = await self.storage.update_shipment_status(shipment.tracking_id, new_status)

        self.logger.info(f"Shipment {shipment.tracking_id} -> {new_status} at {data.location}")
        return shipment, event

    @transactional
    async def consume_verification_code(self, tracking_id: str, code: Optional[str]) -> Shipment:
        """
        One-time use of the admin-minted shipment code.

        Exact, case-sensitive match with no trimming. A code that was already
        consumed is rejected, even when the right value is submitted again.
        """
        if code is None or not str(code).strip():
            raise ValidationError("Verification code is required", field='code')

        shipment = await self.get_by_tracking_id(tracking_id, for_update=True)

        if not shipment.verification_code or shipment.verification_code != code:
            raise ValidationError("Invalid verification code", field='code')
        if shipment.verification_code_used:
            raise ValidationError("Verification code has already been used", field='code')

        shipment = await self.storage.mark_shipment_code_used(shipment)
        self.logger.info(f"Verification code consumed for shipment {shipment.tracking_id}")
        return shipment

    async def _generate_unique_tracking_id(self) -> str:
        """Random tracking id, retried against existing rows a bounded number of times."""
        for _ in range(self.max_tracking_attempts):
            candidate = generate_tracking_id(self.tracking_prefix)
            if not await self.storage.tracking_id_exists(candidate):
                return candidate
            self.logger.warning(f"Tracking id collision on {candidate}, retrying")
        raise ConflictError("Could not allocate a unique tracking id", 'Shipment')

    @staticmethod
    def _clean_tracking_id(tracking_id: str) -> str:
        return (tracking_id or '').strip().upper()
