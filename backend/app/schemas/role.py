"""
Role Schemas Module
===================

Pydantic models for custom role definitions.

The JSON field names are camelCase (roleName, createdAt); aliases map
them onto snake_case attributes.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from app.models.role_enum import ROLE_NAME_MAX_LENGTH
from app.schemas.common import ActionResponse


class RoleCreate(BaseModel):
    """Schema for defining a custom role."""

    role_name: str = Field(
        ...,
        alias="roleName",
        min_length=1,
        max_length=ROLE_NAME_MAX_LENGTH,
        description="Role name"
    )
    privileges: list[str] = Field(
        ...,
        min_length=1,
        description="Privilege names; unsupported entries are dropped"
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional description"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "roleName": "auditor",
                "privileges": ["SELECT", "SHOW VIEW", "TRIGGER"],
                "description": "Read access plus trigger inspection"
            }
        }
    )


class RoleDefinitionResponse(BaseModel):
    """A role as stored in the registry."""

    name: str
    privileges: list[str]
    description: str = ""
    created_at: datetime = Field(..., serialization_alias="createdAt")


class RoleCreateResponse(ActionResponse):
    """Schema for role creation response."""

    role: RoleDefinitionResponse


class RoleResponse(BaseModel):
    """Entry of the custom role listing."""

    name: str
    privileges: list[str]
    description: str
