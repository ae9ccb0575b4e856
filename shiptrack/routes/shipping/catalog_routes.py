from fastapi import APIRouter, Depends

from ...dependencies import get_service_registry
from ...responses import APIResponse
from ...schemas import ShippingServiceSchema
from ...services import ServiceRegistry

catalog_router = APIRouter()


@catalog_router.get("", summary="List shipping services")
async def list_services(services: ServiceRegistry = Depends(get_service_registry)):
    catalog = await services.catalog_service.list_services()
    return APIResponse.success(services=[ShippingServiceSchema.serialize(s) for s in catalog])
