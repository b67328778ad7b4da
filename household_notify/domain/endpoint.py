"""Push endpoint and delivery outcome models."""

from enum import StrEnum

from pydantic import BaseModel, Field

from household_notify.core.errors import is_permanently_invalid


class EndpointPlatform(StrEnum):
    """Device platform an endpoint token was issued for."""

    ANDROID = "android"
    IOS = "ios"
    WEB = "web"


class Endpoint(BaseModel):
    """A registered push token owned by one user."""

    id: str = Field(..., description="Endpoint record ID")
    user_id: str = Field(..., description="Owning user ID")
    token: str = Field(..., description="Opaque FCM registration token")
    platform: EndpointPlatform | None = Field(default=None, description="Device platform, if reported")
    created: str | None = Field(default=None, description="Registration timestamp (ISO format)")


class DeliveryOutcome(BaseModel):
    """Result of delivering one notification to one token."""

    success: bool = Field(..., description="Whether the transport accepted the message")
    error_code: str | None = Field(default=None, description="messaging/* error code on failure")
    message_id: str | None = Field(default=None, description="Transport message ID on success")

    @property
    def is_permanently_invalid(self) -> bool:
        return is_permanently_invalid(success=self.success, error_code=self.error_code)
