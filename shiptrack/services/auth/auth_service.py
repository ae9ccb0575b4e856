"""
Authentication Service
======================

Registration, login and token-to-user resolution.
"""

import asyncio
from datetime import timedelta
from typing import Optional, Tuple

from ..base import BaseService, transactional
from ..exceptions import AuthenticationError, NotFoundError, ValidationError
from .credentials import hash_password, issue_token, verify_password, verify_token
from ...models import User
from ...schemas import LoginSchema, RegisterSchema


class AuthService(BaseService):
    """Service for authentication"""

    def __init__(self, storage, settings, notification_service=None):
        super().__init__(storage, settings, notification_service=notification_service)
        self.secret_key = settings.SECRET_KEY
        self.algorithm = settings.ALGORITHM
        self.token_expiry = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
        self.bcrypt_rounds = settings.BCRYPT_ROUNDS

    @transactional
    async def register(self, data) -> Tuple[str, User]:
        """Create a user and sign them in. Duplicate emails are rejected."""
        data = self._validate(RegisterSchema, data)

        if await self.storage.get_user_by_email(data.email):
            raise ValidationError("Email already registered", field='email')

        # bcrypt is slow on purpose; keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, data.password, self.bcrypt_rounds)
        user = await self.storage.create_user(
            name=data.name,
            email=data.email,
            phone=data.phone,
            password_hash=password_hash,
            email_verified=False,
            phone_verified=False,
            is_admin=False,
        )
        self.logger.info(f"Registered user {user.id} <{user.email}>")
        return self.issue_token(user.id), user

    async def login(self, data) -> Tuple[str, User]:
        """
        Verify credentials and issue a token.

        Wrong email and wrong password look the same to the caller and are
        reported as a ValidationError (HTTP 400), not a 401.
        """
        data = self._validate(LoginSchema, data)

        user = await self.storage.get_user_by_email(data.email)
        if user is None:
            raise ValidationError("Invalid email or password")

        matches = await asyncio.to_thread(verify_password, data.password, user.password_hash)
        if not matches:
            self.logger.info(f"Failed login for user {user.id}")
            raise ValidationError("Invalid email or password")

        return self.issue_token(user.id), user

    def issue_token(self, user_id: int) -> str:
        return issue_token(user_id, self.secret_key, self.token_expiry, self.algorithm)

    async def resolve_token(self, token: Optional[str]) -> User:
        """Token -> User, or AuthenticationError. Used by the authorization gate."""
        check = verify_token(token, self.secret_key, self.algorithm)
        if not check.valid:
            raise AuthenticationError("Invalid or expired token")

        user = await self.storage.get_user(check.user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return user

    async def get_profile(self, user_id: int) -> User:
        user = await self.storage.get_user(user_id)
        if user is None:
            raise NotFoundError('User', user_id)
        return user

