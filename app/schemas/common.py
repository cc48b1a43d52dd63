"""Common schemas and utilities."""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing endpoint."""

    error: str


class StatusResponse(BaseModel):
    """Simple status response."""

    status: str
