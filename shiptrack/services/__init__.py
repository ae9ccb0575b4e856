"""
ShipTrack Services Module
=========================

Complete services layer for the ShipTrack application.
Uses a dependency injection registry: one Storage (one session) per request,
shared by every service built for that request.
"""

from .base import BaseService, transactional
from .exceptions import *  # noqa: F401,F403

# Auth Domain
from .auth import AuthService, VerificationService

# Shipping Domain
from .shipping import ShipmentService, CatalogService, SubscriptionService

# Admin Domain
from .admin import AdminService

# Integration Domain
from .integration import NotificationService

from ..storage import Storage

__all__ = [
    # Base Classes
    'BaseService', 'transactional',

    # Auth Domain
    'AuthService', 'VerificationService',

    # Shipping Domain
    'ShipmentService', 'CatalogService', 'SubscriptionService',

    # Admin Domain
    'AdminService',

    # Integration Domain
    'NotificationService',

    # Registry
    'ServiceRegistry', 'create_service_registry',
]


class ServiceRegistry:
    """
    Service Registry for dependency injection
    Builds every service around the same Storage instance
    """

    def __init__(self, storage: Storage, settings):
        self.storage = storage
        self.settings = settings
        self._services = {}

        self._init_core_services()
        self._init_domain_services()

    def _init_core_services(self):
        """Services other services depend on"""
        self._services['notification'] = NotificationService(
            storage=self.storage,
            settings=self.settings
        )

    def _init_domain_services(self):
        """Domain services with their dependencies"""

        # Auth Domain
        self._services['auth'] = AuthService(
            storage=self.storage,
            settings=self.settings,
            notification_service=self._services['notification']
        )

        self._services['verification'] = VerificationService(
            storage=self.storage,
            settings=self.settings,
            notification_service=self._services['notification']
        )

        # Shipping Domain
        self._services['shipment'] = ShipmentService(
            storage=self.storage,
            settings=self.settings,
            notification_service=self._services['notification']
        )

        self._services['catalog'] = CatalogService(
            storage=self.storage,
            settings=self.settings
        )

        self._services['subscription'] = SubscriptionService(
            storage=self.storage,
            settings=self.settings,
            notification_service=self._services['notification']
        )

        # Admin Domain
        self._services['admin'] = AdminService(
            storage=self.storage,
            settings=self.settings,
            shipment_service=self._services['shipment']
        )

    # Convenience accessors
    @property
    def auth_service(self) -> AuthService:
        return self._services['auth']

    @property
    def verification_service(self) -> VerificationService:
        return self._services['verification']

    @property
    def shipment_service(self) -> ShipmentService:
        return self._services['shipment']

    @property
    def catalog_service(self) -> CatalogService:
        return self._services['catalog']

    @property
    def subscription_service(self) -> SubscriptionService:
        return self._services['subscription']

    @property
    def admin_service(self) -> AdminService:
        return self._services['admin']

    @property
    def notification_service(self) -> NotificationService:
        return self._services['notification']


def create_service_registry(storage: Storage, settings) -> ServiceRegistry:
    """Factory function for building a ServiceRegistry"""
    return ServiceRegistry(storage, settings)
