"""User profile domain model."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserProfile(BaseModel):
    """Public profile fields used to address a user in notifications."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Unique user ID")
    name: str | None = Field(default=None, description="Full name")
    display_name: str | None = Field(default=None, description="Name chosen for display in the app")
    username: str | None = Field(default=None, description="Login handle")
