"""
Admin Routes
============

System-wide management. Every route requires an admin bearer token.
"""

from fastapi import APIRouter, Depends, status

from ...dependencies import CurrentUser, get_current_admin, get_service_registry
from ...responses import APIResponse
from ...schemas import AdminUserUpdateSchema, ShipmentCreateSchema, ShipmentSchema, UserSchema
from ...services import ServiceRegistry
from ...services.exceptions import NotFoundError

admin_router = APIRouter(dependencies=[Depends(get_current_admin)])


@admin_router.get("/users", summary="List all users")
async def list_users(services: ServiceRegistry = Depends(get_service_registry)):
    users = await services.admin_service.list_users()
    return APIResponse.success(users=[UserSchema.serialize(u) for u in users])


@admin_router.patch("/users/{user_id}", summary="Grant or revoke admin rights")
async def update_user_admin(
    user_id: int,
    payload: AdminUserUpdateSchema,
    current_admin: CurrentUser = Depends(get_current_admin),
    services: ServiceRegistry = Depends(get_service_registry)
):
    user = await services.admin_service.set_user_admin(
        user_id, payload.is_admin, acting_user_id=current_admin.id
    )
    return APIResponse.success(user=UserSchema.serialize(user))


@admin_router.get("/shipments", summary="List all shipments")
async def list_shipments(services: ServiceRegistry = Depends(get_service_registry)):
    shipments = await services.admin_service.list_shipments()
    return APIResponse.success(shipments=[ShipmentSchema.serialize(s) for s in shipments])


@admin_router.post(
    "/shipments",
    status_code=status.HTTP_201_CREATED,
    summary="Create a shipment with a verification code"
)
async def create_shipment(
    shipment_data: ShipmentCreateSchema,
    current_admin: CurrentUser = Depends(get_current_admin),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Same as POST /api/shipments, plus a one-time verification code.
    This response is the only place the code is ever shown.
    """
    shipment, code = await services.admin_service.create_shipment(shipment_data, current_admin.id)
    return APIResponse.success(
        shipment=ShipmentSchema.serialize(shipment),
        verificationCode=code
    )


@admin_router.delete("/shipments/{shipment_id}", summary="Delete a shipment and its events")
async def delete_shipment(
    shipment_id: int,
    services: ServiceRegistry = Depends(get_service_registry)
):
    deleted = await services.admin_service.delete_shipment(shipment_id)
    if not deleted:
        raise NotFoundError('Shipment', shipment_id)
    return APIResponse.success(success=True)
