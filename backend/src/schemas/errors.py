"""Error response schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    code: str = Field(..., description="Stable error code, e.g. VALIDATION_ERROR")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""

    error: ErrorDetail
    request_id: Optional[str] = Field(None, description="Request correlation id")
    timestamp: datetime
