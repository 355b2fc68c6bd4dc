"""
User Schemas Module
===================

Pydantic models for MySQL account requests and responses.

Benefits:
- Request validation
- Response serialization
- OpenAPI documentation
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import ActionResponse


# ==========================
# Request Schemas
# ==========================

class UserCreate(BaseModel):
    """Schema for creating a MySQL account with a role."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="MySQL account name"
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Account password"
    )
    role: str = Field(
        ...,
        min_length=1,
        description="Name of a built-in or custom role"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "bob",
                "password": "S3cure!pass",
                "role": "analyst"
            }
        }
    )


class RoleAssignRequest(BaseModel):
    """Schema for assigning a role to an existing account."""

    role: str = Field(
        ...,
        min_length=1,
        description="Role name"
    )


# ==========================
# Response Schemas
# ==========================

class DatabaseUserResponse(BaseModel):
    """A MySQL account with its grants and resolved role."""

    username: str
    host: str
    privileges: list[str] = Field(
        default_factory=list,
        description="Grant strings as reported by SHOW GRANTS"
    )
    role: str = Field(
        ...,
        description="Assigned or inferred role label"
    )
    error: Optional[str] = Field(
        default=None,
        description="Set when the grants of this account could not be read"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "bob",
                "host": "localhost",
                "privileges": [
                    "GRANT SELECT, SHOW VIEW ON *.* TO `bob`@`localhost`"
                ],
                "role": "analyst"
            }
        }
    )


class RoleAssignResponse(ActionResponse):
    """Schema for role assignment response."""

    user: str
    role: str
