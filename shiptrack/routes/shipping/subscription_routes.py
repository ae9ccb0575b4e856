from fastapi import APIRouter, Depends, status

from ...dependencies import get_service_registry
from ...schemas import SubscriptionCreateSchema, SubscriptionSchema
from ...services import ServiceRegistry

subscription_router = APIRouter()


@subscription_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Subscribe a phone number to tracking updates"
)
async def create_subscription(
    subscription_data: SubscriptionCreateSchema,
    services: ServiceRegistry = Depends(get_service_registry)
):
    """
    Older endpoint: answers with the bare subscription and reports
    validation problems as message/field.
    """
    subscription = await services.subscription_service.subscribe(subscription_data)
    return SubscriptionSchema.serialize(subscription)
