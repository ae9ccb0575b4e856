"""
Credential & Token Service
==========================

Password hashing, signed session tokens and random code generation.
Pure functions; callers pass the secret and lifetimes from Settings.
"""

import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

import bcrypt
import jwt

CODE_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_ID_LENGTH = 8
VERIFICATION_CODE_LENGTH = 6


class TokenCheck(NamedTuple):
    """Outcome of verify_token: either a user id or the reason it was rejected."""
    user_id: Optional[int]
    error: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.error is None and self.user_id is not None


def hash_password(password: str, rounds: int = 10) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison done by bcrypt; malformed hashes simply don't match."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def issue_token(user_id: int, secret_key: str, expires_in: timedelta = timedelta(days=7),
                algorithm: str = 'HS256') -> str:
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user_id),
        'iat': now,
        'exp': now + expires_in,
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def verify_token(token: str, secret_key: str, algorithm: str = 'HS256') -> TokenCheck:
    """Check signature and expiry. Never raises for bad tokens."""
    if not token:
        return TokenCheck(None, 'Missing token')
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        return TokenCheck(None, 'Token has expired')
    except jwt.InvalidTokenError:
        return TokenCheck(None, 'Invalid token')

    try:
        return TokenCheck(int(payload['sub']))
    except (KeyError, TypeError, ValueError):
        return TokenCheck(None, 'Invalid token payload')


def _random_code(length: int) -> str:
    return ''.join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def generate_tracking_id(prefix: str = 'FDX') -> str:
    """Prefix plus 8 random uppercase alphanumerics, e.g. FDX7K2M9QAZ."""
    return f"{prefix}{_random_code(TRACKING_ID_LENGTH)}"


def generate_verification_code() -> str:
    return _random_code(VERIFICATION_CODE_LENGTH)
