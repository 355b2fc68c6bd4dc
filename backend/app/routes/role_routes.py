"""
Role Routes Module
==================

Endpoints for custom role definitions.

Custom roles are kept in process memory only; they become inference
targets as soon as they are created.
"""

from fastapi import APIRouter, Depends

from app.core.dependencies.services import get_role_registry
from app.core.exceptions import InvalidPrivilegesError
from app.schemas import ErrorResponse, RoleCreate, RoleCreateResponse, RoleResponse
from app.services.privileges import sanitize_privileges
from app.services.role_registry import RoleRegistry

router = APIRouter(
    prefix="/roles",
    tags=["Roles"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
    },
)


@router.post(
    "",
    response_model=RoleCreateResponse,
    summary="Create Role",
    description="Define or overwrite a custom role.",
)
def create_role(
    payload: RoleCreate,
    registry: RoleRegistry = Depends(get_role_registry),
) -> dict:
    """
    Define a custom role from the supported subset of the given privileges.

    Args:
        payload: roleName, privileges and optional description

    Returns:
        Success message and the stored role
    """
    privileges = sanitize_privileges(payload.privileges)
    if not privileges:
        raise InvalidPrivilegesError("No valid privileges provided")

    role = registry.define_role(payload.role_name, privileges, payload.description)

    return {
        "success": True,
        "message": f"Role '{role.name}' created with {len(role.privileges)} privileges",
        "role": {
            "name": role.name,
            "privileges": list(role.privileges),
            "description": role.description,
            "created_at": role.created_at,
        },
    }


@router.get(
    "",
    response_model=list[RoleResponse],
    summary="List Custom Roles",
    description="List custom roles; built-in roles are not included.",
)
def list_roles(registry: RoleRegistry = Depends(get_role_registry)) -> list[dict]:
    return [
        {
            "name": role.name,
            "privileges": list(role.privileges),
            "description": role.display_description,
        }
        for role in registry.list_custom_roles()
    ]
