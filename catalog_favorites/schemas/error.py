"""Error response schema shared by every exception handler."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error body: a single human-readable message."""

    error: str = Field(..., description="Human-readable error message")

    model_config = {
        "json_schema_extra": {
            "example": {"error": "Product not found"},
        }
    }
