from datetime import timedelta

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from .base import BaseModel, utcnow

VERIFICATION_CHANNELS = ('email', 'phone')


class User(BaseModel):
    """Registered account. Admin rights are a plain flag."""
    __tablename__ = 'users'

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(20))
    password_hash = Column(String(255), nullable=False)

    # Verification flags, flipped by VerificationService
    email_verified = Column(Boolean, default=False, nullable=False)
    phone_verified = Column(Boolean, default=False, nullable=False)

    is_admin = Column(Boolean, default=False, nullable=False)

    def mark_verified(self, channel: str):
        if channel == 'email':
            self.email_verified = True
        elif channel == 'phone':
            self.phone_verified = True
        else:
            raise ValueError(f"Unknown verification channel: {channel}")

    def __repr__(self):
        return f"<User {self.email}>"


class VerificationCode(BaseModel):
    """One-time code proving control of an email address or phone number."""
    __tablename__ = 'verification_codes'

    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    code = Column(String(6), nullable=False)
    type = Column(String(10), nullable=False)  # email, phone
    is_used = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    @classmethod
    def issue(cls, user_id: int, code: str, channel: str, ttl: timedelta) -> 'VerificationCode':
        return cls(user_id=user_id, code=code, type=channel, is_used=False,
                   expires_at=utcnow() + ttl)

    def is_valid(self, now=None) -> bool:
        now = now or utcnow()
        return not self.is_used and self.expires_at > now
