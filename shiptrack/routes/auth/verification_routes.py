"""
Verification Routes
===================

User-level email/phone verification codes.
"""

from fastapi import APIRouter, Depends

from ...dependencies import CurrentUser, get_current_user, get_service_registry
from ...responses import APIResponse
from ...schemas import UserSchema, VerificationGenerateSchema, VerificationVerifySchema
from ...services import ServiceRegistry

router = APIRouter()


@router.post("/generate", summary="Send a verification code")
async def generate_code(
    payload: VerificationGenerateSchema,
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Mint a 6-character code for the caller's email or phone.
    The code is delivered out of band and never returned here.
    """
    await services.verification_service.generate_code(current_user.id, payload.type)
    return APIResponse.success(message=f"Verification code sent to your {payload.type}")


@router.post("/verify", summary="Confirm a verification code")
async def verify_code(
    payload: VerificationVerifySchema,
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceRegistry = Depends(get_service_registry)
):
    user = await services.verification_service.verify_code(current_user.id, payload.code, payload.type)
    label = 'Email' if payload.type == 'email' else 'Phone'
    return APIResponse.success(
        message=f"{label} verified successfully",
        user=UserSchema.serialize(user)
    )
