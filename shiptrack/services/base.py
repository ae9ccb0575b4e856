"""
Base Service Classes
====================

Base classes and utilities for all services
"""

from abc import ABC
from functools import wraps
import logging

from pydantic import BaseModel as PydanticModel, ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from .exceptions import ConflictError, ValidationError
from ..schemas import first_error

logger = logging.getLogger(__name__)


def transactional(func):
    """Decorator: run the method as one unit of work on self.storage (commit or roll back)."""
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            async with self.storage.transaction():
                return await func(self, *args, **kwargs)
        except IntegrityError as e:
            logger.error(f"Transaction failed in {func.__name__}: {e.orig}")
            raise ConflictError("The record conflicts with an existing one") from e
        except Exception as e:
            logger.error(f"Transaction failed in {func.__name__}: {str(e)}")
            raise
    return wrapper


class BaseService(ABC):
    """Base service class with common functionality"""

    def __init__(self, storage, settings=None, notification_service=None):
        self.storage = storage
        self.settings = settings
        self.notification_service = notification_service
        self.logger = logging.getLogger(self.__class__.__name__)

    def _validate(self, schema_class, data):
        """Accept a schema instance or a raw dict; raise our ValidationError on bad input."""
        if isinstance(data, schema_class):
            return data
        if isinstance(data, PydanticModel):
            data = data.model_dump()
        try:
            return schema_class.model_validate(data)
        except PydanticValidationError as e:
            message, field = first_error(e.errors())
            raise ValidationError(message, field=field)

    async def _send_notification(self, notification_type: str, recipients, context, channel: str = 'email'):
        """Hand a message to the notification service; delivery problems never fail the caller."""
        if self.notification_service:
            try:
                await self.notification_service.send_notification(
                    notification_type=notification_type,
                    recipients=recipients,
                    context=context,
                    channel=channel
                )
            except Exception as e:
                self.logger.warning(f"Failed to send notification: {str(e)}")
