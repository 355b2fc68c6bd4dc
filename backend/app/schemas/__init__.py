"""
Schemas Package Initialization
==============================

Exports all Pydantic schemas for the application.

Usage:
    from app.schemas import UserCreate, GrantRequest, RoleCreate
"""

from app.schemas.common import ActionResponse, ErrorResponse
from app.schemas.grant import GrantRequest
from app.schemas.role import (
    RoleCreate,
    RoleCreateResponse,
    RoleDefinitionResponse,
    RoleResponse,
)
from app.schemas.user import (
    DatabaseUserResponse,
    RoleAssignRequest,
    RoleAssignResponse,
    UserCreate,
)

__all__ = [
    "ActionResponse",
    "ErrorResponse",
    "GrantRequest",
    "RoleCreate",
    "RoleCreateResponse",
    "RoleDefinitionResponse",
    "RoleResponse",
    "DatabaseUserResponse",
    "RoleAssignRequest",
    "RoleAssignResponse",
    "UserCreate",
]
