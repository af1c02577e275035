"""Per-request context models."""

from pydantic import BaseModel, ConfigDict, Field


class Principal(BaseModel):
    """Reference to the authenticated user behind a request."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(default=..., min_length=1, description="Authenticated user identifier")


class RequestContext(BaseModel):
    """Values resolved once per inbound request and threaded through each call.

    Built by the HTTP boundary after locale negotiation and principal
    resolution. Frozen so a handler cannot leak changes into another request.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "locale": "fr",
                "principal": {"user_id": "42"},
                "timezone": "Europe/Paris",
            }
        },
    )

    locale: str = Field(default=..., description="Negotiated locale tag from the supported set")
    principal: Principal | None = Field(default=None, description="Authenticated user, if any")
    timezone: str | None = Field(
        default=None, description="Validated IANA zone id from the user's configuration"
    )
