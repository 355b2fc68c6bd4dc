"""
Debug Routes Module
===================

Diagnostics for role detection. Mounted only when DEBUG is enabled.
"""

from fastapi import APIRouter, Depends

from app.core.dependencies.services import (
    get_account_service,
    get_inference_engine,
    get_role_registry,
)
from app.core.exceptions import DatabaseError
from app.services.mysql_accounts import MySQLAccountService
from app.services.role_inference import RoleInferenceEngine
from app.services.role_registry import RoleRegistry

router = APIRouter(prefix="/debug", tags=["Debug"])


@router.get("/users", summary="Raw Account List")
def debug_users(service: MySQLAccountService = Depends(get_account_service)) -> list[dict]:
    """Accounts from mysql.user, including those with an empty host."""
    return [
        {"User": account.username, "Host": account.host}
        for account in service.list_all_accounts()
    ]


@router.get("/roles", summary="Role Detection Details")
def debug_roles(
    service: MySQLAccountService = Depends(get_account_service),
    engine: RoleInferenceEngine = Depends(get_inference_engine),
    registry: RoleRegistry = Depends(get_role_registry),
) -> dict:
    available_roles = [role.name for role in registry.list_roles()]
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
            "storedRole": registry.get_assignment(account.username),
            "availableRoles": available_roles,
        })

    return {
        "users": users,
        "customRoles": [
            {"name": role.name, "privileges": list(role.privileges)}
            for role in registry.list_custom_roles()
        ],
    }
