"""
Subscription Service
====================

SMS opt-in for tracking updates. The row is write-once; sending the
confirmation is left to the notification service.
"""

from ..base import BaseService, transactional
from ...models import Subscription
from ...schemas import SubscriptionCreateSchema


class SubscriptionService(BaseService):
    """Service for tracking-update subscriptions"""

    @transactional
    async def subscribe(self, data) -> Subscription:
        data = self._validate(SubscriptionCreateSchema, data)

        subscription = await self.storage.create_subscription(
            tracking_number=data.tracking_number.upper(),
            phone_number=data.phone_number,
        )
        self.logger.info(f"Subscription created for {subscription.tracking_number}")

        await self._send_notification(
            'SUBSCRIPTION_CONFIRMED',
            [subscription.phone_number],
            {'tracking_number': subscription.tracking_number},
            channel='sms'
        )
        return subscription
