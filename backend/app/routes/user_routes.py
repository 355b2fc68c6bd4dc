"""
User Routes Module
==================

Endpoints for MySQL account management.

Features:
- List accounts with their grants and resolved role
- Create an account with a role
- Delete an account
- Assign a role to an existing account

Each endpoint issues single statements against the server; there is
no rollback across statements.
"""

from fastapi import APIRouter, Depends, Request

from app.core.config import settings
from app.core.dependencies.services import (
    get_account_service,
    get_inference_engine,
    get_role_registry,
)
from app.core.exceptions import DatabaseError, InvalidRoleError, UserNotFoundError
from app.core.logging import get_logger
from app.schemas import (
    ActionResponse,
    DatabaseUserResponse,
    ErrorResponse,
    RoleAssignRequest,
    RoleAssignResponse,
    UserCreate,
)
from app.services.mysql_accounts import MySQLAccountService
from app.services.role_inference import RoleInferenceEngine
from app.services.role_registry import RoleRegistry

# Initialize logger
logger = get_logger(__name__)


# =====================================
# Router Setup
# =====================================

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Database error"},
    },
)


@router.get(
    "",
    response_model=list[DatabaseUserResponse],
    response_model_exclude_none=True,
    summary="List Users",
    description="List MySQL accounts (system accounts excluded) with grants and role.",
)
def list_users(
    service: MySQLAccountService = Depends(get_account_service),
    engine: RoleInferenceEngine = Depends(get_inference_engine),
) -> list[dict]:
    """
    List accounts with their resolved role.

    A failure to read one account's grants does not fail the listing;
    that entry carries the error and the role ``unknown``.

    Returns:
        One entry per account
    """
    users = []
    for account in service.list_accounts():
        try:
            grants = service.show_grants(account.username, account.host)
            role = engine.resolve_role(account.username, grants)
        except DatabaseError as exc:
            users.append({
                "username": account.username,
                "host": account.host,
                "privileges": [],
                "role": "unknown",
                "error": exc.details.get("error", exc.message),
            })
            continue

        users.append({
            "username": account.username,
            "host": account.host,
            "privileges": grants,
            "role": role,
        })

    return users


@router.post(
    "",
    response_model=ActionResponse,
    summary="Create User",
    description="Create a MySQL account and grant it the privileges of a role.",
)
def create_user(
    payload: UserCreate,
    service: MySQLAccountService = Depends(get_account_service),
    registry: RoleRegistry = Depends(get_role_registry),
) -> dict:
    """
    Create an account on the default host and grant the role's privileges
    on all databases.

    If the grant fails after the account was created, the account stays
    in place without privileges and no role is recorded.

    Args:
        payload: username, password and role

    Returns:
        Success message
    """
    role = registry.get_role(payload.role)
    if role is None:
        raise InvalidRoleError(payload.role)

    host = settings.DEFAULT_USER_HOST
    service.create_user(payload.username, payload.password, host)

    try:
        service.grant(role.privileges, payload.username, host, dbname="*")
    except DatabaseError:
        logger.error(
            "user_created_without_privileges",
            username=payload.username,
            host=host,
            role=role.name,
        )
        raise

    registry.assign_role(payload.username, role.name)

    return {
        "success": True,
        "message": f"User '{payload.username}'@'{host}' created with role '{role.name}'",
    }


@router.delete(
    "/{username}",
    response_model=ActionResponse,
    summary="Delete User",
    description="Drop a MySQL account and forget its role assignment.",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
def delete_user(
    username: str,
    service: MySQLAccountService = Depends(get_account_service),
    registry: RoleRegistry = Depends(get_role_registry),
) -> dict:
    """
    Drop the account under the host recorded in mysql.user.

    Args:
        username: Account name

    Returns:
        Success message
    """
    host = service.find_host(username)
    if host is None:
        raise UserNotFoundError(identifier=username)

    service.drop_user(username, host)
    registry.clear_assignment(username)

    return {
        "success": True,
        "message": f"User '{username}'@'{host}' deleted successfully",
    }


@router.post(
    "/{username}/role",
    response_model=RoleAssignResponse,
    summary="Assign Role",
    description="Record an explicit role for an existing account.",
    responses={404: {"model": ErrorResponse, "description": "User not found"}},
)
def assign_role(
    username: str,
    payload: RoleAssignRequest,
    request: Request,
    service: MySQLAccountService = Depends(get_account_service),
    registry: RoleRegistry = Depends(get_role_registry),
) -> dict:
    """
    Assign a role label to an account.

    Only the label is stored; the account's grants are left untouched.

    Args:
        username: Account name
        payload: Role to assign

    Returns:
        Confirmation with user and role
    """
    if not registry.has_role(payload.role):
        raise InvalidRoleError(payload.role)

    if service.find_host(username) is None:
        raise UserNotFoundError(identifier=username)

    registry.assign_role(username, payload.role)

    logger.info(
        "role_assignment_requested",
        username=username,
        role=payload.role,
        ip_address=request.client.host if request.client else "unknown",
    )

    return {
        "success": True,
        "message": f"Role '{payload.role}' assigned to user '{username}'",
        "user": username,
        "role": payload.role,
    }
