from typing import Any

from pydantic import BaseModel, Field


class IngestEventRequest(BaseModel):
    type: str = Field(min_length=1, max_length=255, description="Event type label")
    payload: Any = Field(description="Arbitrary JSON value stored as-is")


class IngestEventResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
