"""
Auth Domain Services
====================

Credentials, authentication and user verification codes
"""

from .auth_service import AuthService
from .verification_service import VerificationService

__all__ = [
    'AuthService',
    'VerificationService'
]
