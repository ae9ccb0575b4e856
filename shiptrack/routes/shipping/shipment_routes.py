"""
Shipment Routes
===============

Owner dashboard (bearer auth) and public tracking by tracking id.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from ...dependencies import CurrentUser, get_current_user, get_service_registry
from ...responses import APIResponse
from ...schemas import (
    ShipmentCreateSchema, ShipmentEventCreateSchema, ShipmentEventSchema,
    ShipmentSchema, ShipmentVerifySchema
)
from ...services import ServiceRegistry

shipment_router = APIRouter()


@shipment_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create a new shipment"
)
async def create_shipment(
    shipment_data: ShipmentCreateSchema,
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Create a shipment owned by the caller, together with its first
    "Created" event at the origin.
    """
    shipment, _ = await services.shipment_service.create_shipment(shipment_data, current_user.id)
    return APIResponse.success(shipment=ShipmentSchema.serialize(shipment))


@shipment_router.get("", summary="List the caller's shipments")
async def list_my_shipments(
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """Newest first."""
    shipments = await services.shipment_service.list_by_owner(current_user.id)
    return APIResponse.success(shipments=[ShipmentSchema.serialize(s) for s in shipments])


@shipment_router.get("/track/{tracking_id}", summary="Public tracking lookup")
async def track_shipment(
    tracking_id: str,
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    No authentication. Returns the shipment and its events, newest first.
    """
    shipment, events = await services.shipment_service.track(tracking_id)
    return APIResponse.success(
        shipment=ShipmentSchema.serialize(shipment),
        events=[ShipmentEventSchema.serialize(e) for e in events]
    )


@shipment_router.post("/{tracking_id}/verify", summary="Consume a shipment verification code")
async def verify_shipment(
    tracking_id: str,
    payload: Optional[ShipmentVerifySchema] = None,
    services: ServiceRegistry = Depends(get_service_registry)
):
    code = payload.code if payload else None
    shipment = await services.shipment_service.consume_verification_code(tracking_id, code)
    return APIResponse.success(
        message="Shipment verified successfully",
        shipment=ShipmentSchema.serialize(shipment)
    )


@shipment_router.post(
    "/{tracking_id}/event",
    status_code=status.HTTP_201_CREATED,
    summary="Add a tracking event"
)
async def add_shipment_event(
    tracking_id: str,
    event_data: ShipmentEventCreateSchema,
    current_user: CurrentUser = Depends(get_current_user),
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Append a status event and move the shipment to that status.
    Allowed for the shipment owner and for admins.
    """
    shipment, event = await services.shipment_service.append_event(
        tracking_id,
        status=event_data.status,
        location=event_data.location,
        note=event_data.note,
        actor=current_user
    )
    return APIResponse.success(
        shipment=ShipmentSchema.serialize(shipment),
        event=ShipmentEventSchema.serialize(event)
    )
