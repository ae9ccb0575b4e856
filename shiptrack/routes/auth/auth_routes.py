"""
Authentication Routes
=====================

Register, login and the current user's profile. Logout is client-side:
the client discards its token.
"""

from fastapi import APIRouter, Depends, status

from ...dependencies import CurrentUser, get_current_user, get_service_registry
from ...responses import APIResponse
from ...schemas import LoginSchema, RegisterSchema, UserSchema
from ...services import ServiceRegistry

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Create an account")
async def register(
    register_data: RegisterSchema,
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Register a new user and return a session token.

    **Parameters:**
    - name, email, password (min 6 characters), phone (optional)

    **Returns:**
    - token: JWT bearer token
    - user: user profile
    """
    token, user = await services.auth_service.register(register_data)
    return APIResponse.success(token=token, user=UserSchema.serialize(user))


@router.post("/login", summary="Sign in")
async def login(
    login_data: LoginSchema,
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Verify credentials and return a session token.
    Wrong email or password answers 400.
    """
    token, user = await services.auth_service.login(login_data)
    return APIResponse.success(token=token, user=UserSchema.serialize(user))


@router.get("/me", summary="Current user profile")
async def get_current_user_profile(
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceRegistry = Depends(get_service_registry)
):
    user = await services.auth_service.get_profile(current_user.id)
    return APIResponse.success(user=UserSchema.serialize(user))
