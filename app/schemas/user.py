"""User schemas."""

from uuid import UUID

from pydantic import BaseModel

from app.schemas.common import BaseSchema


class UserResponse(BaseSchema):
    """User response schema."""

    id: UUID
    username: str


class LoginRequest(BaseModel):
    """Login request. Presence of username is checked by the endpoint."""

    username: str | None = None
