"""
Integration Services
====================

Outbound notifications (email/SMS), logged only.
"""

from .notification_service import NotificationService

__all__ = ['NotificationService']
