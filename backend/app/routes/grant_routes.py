"""
Grant Routes Module
===================

Ad-hoc privilege grants on a single database.
"""

from fastapi import APIRouter, Depends

from app.core.dependencies.services import get_account_service
from app.core.exceptions import InvalidPrivilegesError
from app.schemas import ActionResponse, ErrorResponse, GrantRequest
from app.services.mysql_accounts import MySQLAccountService
from app.services.privileges import sanitize_privileges

router = APIRouter(
    tags=["Grants"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Database error"},
    },
)


@router.post(
    "/grant",
    response_model=ActionResponse,
    summary="Grant Privileges",
    description="Grant a comma-separated privilege list on a database to an account.",
)
def grant_privileges(
    payload: GrantRequest,
    service: MySQLAccountService = Depends(get_account_service),
) -> dict:
    privileges = sanitize_privileges(payload.privilege)
    if not privileges:
        raise InvalidPrivilegesError()

    granted = service.grant(privileges, payload.username, payload.host, dbname=payload.dbname)

    return {
        "success": True,
        "message": (
            f"Granted {', '.join(granted)} on {payload.dbname} "
            f"to {payload.username}@{payload.host}"
        ),
    }
