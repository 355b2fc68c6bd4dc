"""
Role Assignment Stores
======================

Repository interface for the username -> role overrides, with an
in-memory backend (default, lost on restart) and a SQL backend that
keeps overrides in the ``role_assignments`` table.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import DatabaseError
from app.core.logging import get_logger
from app.models.role_assignment import RoleAssignment

logger = get_logger(__name__)


class AssignmentStore(ABC):
    """Key-value store of explicit role assignments."""

    @abstractmethod
    def get(self, username: str) -> Optional[str]:
        """Return the assigned role, or None."""

    @abstractmethod
    def set(self, username: str, role: str) -> None:
        """Record an assignment, replacing any previous one."""

    @abstractmethod
    def delete(self, username: str) -> None:
        """Remove an assignment; no-op when absent."""

    @abstractmethod
    def all(self) -> dict[str, str]:
        """Snapshot of every assignment."""


class InMemoryAssignmentStore(AssignmentStore):
    """
    Process-local store.

    Not guarded by a lock: concurrent writers may overwrite each other,
    which at worst leaves a stale label.
    """

    def __init__(self) -> None:
        self._assignments: dict[str, str] = {}

    def get(self, username: str) -> Optional[str]:
        return self._assignments.get(username)

    def set(self, username: str, role: str) -> None:
        self._assignments[username] = role

    def delete(self, username: str) -> None:
        self._assignments.pop(username, None)

    def all(self) -> dict[str, str]:
        return dict(self._assignments)


class SqlAssignmentStore(AssignmentStore):
    """
    Store backed by the ``role_assignments`` table.

    Each call opens its own short-lived session from ``session_factory``
    so the store can be shared across requests.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, username: str) -> Optional[str]:
        try:
            with self._session_factory() as session:
                row = session.get(RoleAssignment, username)
                return row.role if row else None
        except SQLAlchemyError as exc:
            raise self._wrap("Role assignment lookup failed", exc) from exc

    def set(self, username: str, role: str) -> None:
        try:
            with self._session_factory() as session:
                row = session.get(RoleAssignment, username)
                if row is None:
                    session.add(RoleAssignment(username=username, role=role))
                else:
                    row.role = role
                session.commit()
        except SQLAlchemyError as exc:
            raise self._wrap("Role assignment failed", exc) from exc

    def delete(self, username: str) -> None:
        try:
            with self._session_factory() as session:
                session.execute(delete(RoleAssignment).where(RoleAssignment.username == username))
                session.commit()
        except SQLAlchemyError as exc:
            raise self._wrap("Role assignment removal failed", exc) from exc

    def all(self) -> dict[str, str]:
        try:
            with self._session_factory() as session:
                rows = session.execute(select(RoleAssignment.username, RoleAssignment.role)).all()
                return {username: role for username, role in rows}
        except SQLAlchemyError as exc:
            raise self._wrap("Role assignment listing failed", exc) from exc

    @staticmethod
    def _wrap(message: str, exc: SQLAlchemyError) -> DatabaseError:
        logger.error("assignment_store_error", message=message, error=str(exc))
        return DatabaseError(message, error=str(getattr(exc, "orig", None) or exc))
