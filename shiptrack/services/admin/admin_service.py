"""
Admin Service
=============

System-wide user and shipment management. Callers must already have passed
the admin gate.
"""

from typing import List, Optional, Tuple

from ..base import BaseService, transactional
from ..exceptions import NotFoundError, ValidationError
from ...models import Shipment, User


class AdminService(BaseService):
    """Service for admin operations"""

    def __init__(self, storage, settings=None, shipment_service=None):
        super().__init__(storage, settings)
        self.shipment_service = shipment_service

    async def list_users(self) -> List[User]:
        return await self.storage.list_users()

    async def list_shipments(self) -> List[Shipment]:
        return await self.storage.list_shipments()

    @transactional
    async def set_user_admin(self, user_id: int, is_admin: bool,
                             acting_user_id: Optional[int] = None) -> User:
        """Grant or revoke admin rights. Admins cannot change their own flag."""
        if acting_user_id is not None and acting_user_id == user_id:
            raise ValidationError("You cannot change your own admin status", field='isAdmin')

        user = await self.storage.set_user_admin(user_id, bool(is_admin))
        if user is None:
            raise NotFoundError('User', user_id)

        self.logger.info(f"User {user_id} admin={user.is_admin} (by user {acting_user_id})")
        return user

    @transactional
    async def delete_shipment(self, shipment_id: int) -> bool:
        """Delete a shipment and all of its events. False when it did not exist."""
        deleted = await self.storage.delete_shipment(shipment_id)
        if deleted:
            self.logger.info(f"Shipment {shipment_id} deleted")
        return deleted

    async def create_shipment(self, data, owner_id: int) -> Tuple[Shipment, Optional[str]]:
        """Admin shipment creation: same as the user path plus a verification code."""
        return await self.shipment_service.create_shipment(data, owner_id, as_admin=True)
