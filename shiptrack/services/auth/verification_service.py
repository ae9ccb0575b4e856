"""
Verification Code Service
=========================

User-level one-time codes proving control of an email address or phone
number. Each request mints a fresh row; rows are never reused.
"""

from datetime import timedelta

from ..base import BaseService, transactional
from ..exceptions import NotFoundError, ValidationError
from .credentials import generate_verification_code
from ...models import VERIFICATION_CHANNELS, User, VerificationCode

VERIFICATION_TEMPLATES = {
    'email': 'VERIFICATION_CODE_EMAIL',
    'phone': 'VERIFICATION_CODE_SMS',
}


class VerificationService(BaseService):
    """Service for user verification codes"""

    def __init__(self, storage, settings, notification_service=None):
        super().__init__(storage, settings, notification_service=notification_service)
        self.expire_minutes = settings.VERIFICATION_CODE_EXPIRE_MINUTES

    @transactional
    async def generate_code(self, user_id: int, channel: str = 'email') -> VerificationCode:
        """Create a code valid for VERIFICATION_CODE_EXPIRE_MINUTES and dispatch it."""
        user = await self._get_user(user_id)
        self._check_channel(channel)

        recipient = user.email if channel == 'email' else user.phone
        if not recipient:
            raise ValidationError("No phone number on file", field='type')

        record = await self.storage.create_verification_code(
            VerificationCode.issue(user.id, generate_verification_code(), channel,
                                   timedelta(minutes=self.expire_minutes))
        )

        await self._dispatch(recipient, record.code, channel)
        return record

    @transactional
    async def verify_code(self, user_id: int, code: str, channel: str = 'email') -> User:
        """Consume a matching unused, unexpired code and flip the user's flag."""
        if not code or not code.strip():
            raise ValidationError("Verification code is required", field='code')
        self._check_channel(channel)
        user = await self._get_user(user_id)

        record = await self.storage.find_valid_verification_code(user.id, code.strip(), channel)
        if record is None:
            raise ValidationError("Invalid or expired verification code", field='code')

        await self.storage.mark_verification_code_used(record)
        await self.storage.mark_user_verified(user, channel)
        self.logger.info(f"User {user.id} verified {channel}")
        return user

    async def _get_user(self, user_id: int) -> User:
        user = await self.storage.get_user(user_id)
        if user is None:
            raise NotFoundError('User', user_id)
        return user

    @staticmethod
    def _check_channel(channel: str):
        if channel not in VERIFICATION_CHANNELS:
            raise ValidationError(f"Unsupported verification type: {channel}", field='type')

    async def _dispatch(self, recipient: str, code: str, channel: str):
        await self._send_notification(
            VERIFICATION_TEMPLATES[channel],
            [recipient],
            {'code': code, 'expires_in_minutes': self.expire_minutes},
            channel='email' if channel == 'email' else 'sms'
        )
