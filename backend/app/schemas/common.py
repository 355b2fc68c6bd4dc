"""
Common Schemas Module
=====================

Response envelopes shared by every router.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ActionResponse(BaseModel):
    """Acknowledgement of a state-changing operation."""

    success: bool = Field(
        default=True,
        description="Whether the operation succeeded"
    )
    message: str = Field(
        ...,
        description="Human-readable summary"
    )


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    message: str = Field(
        ...,
        description="Error message"
    )
    details: Optional[dict] = Field(
        default=None,
        description="Additional error details"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "User creation failed",
                "details": {"error": "(1396, \"Operation CREATE USER failed for 'bob'@'localhost'\")"}
            }
        }
    )
