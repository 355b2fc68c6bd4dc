"""
Service Dependencies Module
===========================

FastAPI dependencies that hand routes their collaborators:
- The process-wide role registry
- The role inference engine built on it
- A MySQL account service bound to the request's session

Tests replace any of these through ``app.dependency_overrides``.

Usage:
    @router.get("/roles")
    def list_roles(registry: RoleRegistry = Depends(get_role_registry)):
        ...
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging import get_logger
from app.db.session import SessionLocal, get_db
from app.services.assignment_store import (
    AssignmentStore,
    InMemoryAssignmentStore,
    SqlAssignmentStore,
)
from app.services.mysql_accounts import MySQLAccountService
from app.services.role_inference import RoleInferenceEngine
from app.services.role_registry import RoleRegistry

# Initialize logger
logger = get_logger(__name__)


def build_assignment_store(backend: str) -> AssignmentStore:
    """
    Create the override store for the configured backend.

    Args:
        backend: "memory" or "database"

    Raises:
        ValueError: For any other backend name
    """
    if backend == "memory":
        return InMemoryAssignmentStore()
    if backend == "database":
        return SqlAssignmentStore(SessionLocal)
    raise ValueError(f"Unknown role assignment backend: {backend!r}")


@lru_cache
def get_role_registry() -> RoleRegistry:
    """Process-wide registry; custom roles live as long as the process."""
    logger.info("role_registry_initialized", backend=settings.ROLE_ASSIGNMENT_BACKEND)
    return RoleRegistry(build_assignment_store(settings.ROLE_ASSIGNMENT_BACKEND))


def get_inference_engine(
    registry: RoleRegistry = Depends(get_role_registry),
) -> RoleInferenceEngine:
    return RoleInferenceEngine(registry)


def get_account_service(db: Session = Depends(get_db)) -> MySQLAccountService:
    return MySQLAccountService(db)
