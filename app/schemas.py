"""Pydantic request/response schemas."""

from pydantic import BaseModel


class SaveRequest(BaseModel):
    """Request body for POST /api/save. Presence of downloadUrl is checked by the route."""

    downloadUrl: str | None = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
