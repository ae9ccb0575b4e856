"""
API Dependencies
================

FastAPI dependencies: per-request storage and service registry, plus the
authorization gate (plain bearer auth and admin auth).
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .database import get_db_session
from .services import ServiceRegistry, create_service_registry
from .services.exceptions import AuthenticationError, AuthorizationError
from .storage import Storage

# auto_error=False so a missing header reaches our own 401 message
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity attached to an authenticated request"""
    id: int
    name: str
    email: str
    is_admin: bool = False


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_storage(db_session: AsyncSession = Depends(get_db_session)) -> Storage:
    return Storage(db_session)


async def get_service_registry(
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings)
) -> ServiceRegistry:
    """Service registry sharing this request's storage"""
    return create_service_registry(storage, settings)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    services: ServiceRegistry = Depends(get_service_registry)
) -> CurrentUser:
    """Resolve 'Authorization: Bearer <token>' to a user or reject with 401"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing or invalid authorization header")

    user = await services.auth_service.resolve_token(credentials.credentials)

    current_user = CurrentUser(
        id=user.id,
        name=user.name,
        email=user.email,
        is_admin=bool(user.is_admin)
    )
    request.state.user = current_user
    return current_user


async def get_current_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Same as get_current_user, plus 403 for non-admins"""
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user
