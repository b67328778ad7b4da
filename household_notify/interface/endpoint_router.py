"""Device registration endpoints: clients register and remove their push tokens."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from household_notify.domain.endpoint import Endpoint, EndpointPlatform
from household_notify.interface.protocols import EndpointStore


router = APIRouter(prefix="/users", tags=["endpoints"])
logger = logging.getLogger(__name__)


class EndpointRegistration(BaseModel):
    """Body of a token registration request."""

    token: str = Field(..., min_length=1, description="FCM registration token")
    platform: EndpointPlatform | None = Field(default=None, description="android, ios or web")


def get_endpoint_store(request: Request) -> EndpointStore:
    return request.app.state.endpoint_store


@router.post("/{user_id}/endpoints", status_code=201)
async def register_endpoint(
    user_id: str,
    registration: EndpointRegistration,
    store: Annotated[EndpointStore, Depends(get_endpoint_store)],
) -> Endpoint:
    """Register a device token for a user. Re-registering the same token is a no-op."""
    return await store.register_endpoint(
        user_id=user_id,
        token=registration.token,
        platform=registration.platform.value if registration.platform else None,
    )


@router.get("/{user_id}/endpoints")
async def list_endpoints(
    user_id: str,
    store: Annotated[EndpointStore, Depends(get_endpoint_store)],
) -> list[Endpoint]:
    """List a user's registered device tokens."""
    return await store.list_endpoints(user_id)


@router.delete("/{user_id}/endpoints/{token}", status_code=204)
async def deregister_endpoint(
    user_id: str,
    token: str,
    store: Annotated[EndpointStore, Depends(get_endpoint_store)],
) -> None:
    """Remove a device token, e.g. on sign-out."""
    removed = await store.deregister_endpoint(user_id=user_id, token=token)
    if not removed:
        raise HTTPException(status_code=404, detail="Endpoint not registered for this user")
