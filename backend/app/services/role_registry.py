"""
Role Registry
=============

Holds the canonical role -> privilege table and the per-user overrides.

Built-in roles are seeded at construction and cannot be redefined.
Custom roles live only in process memory and become inference targets
as soon as they are defined.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from itertools import count
from typing import Iterable, Optional, Union

from app.core.exceptions import RoleNotFoundError, ValidationError
from app.core.logging import get_logger
from app.models.role_enum import (
    BUILTIN_ROLE_PRIVILEGES,
    BUILTIN_ROLES,
    ROLE_NAME_MAX_LENGTH,
    VALID_PRIVILEGES,
)
from app.services.assignment_store import AssignmentStore, InMemoryAssignmentStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class RoleDefinition:
    """A named, non-empty bundle of privilege tokens."""

    name: str
    privileges: tuple[str, ...]
    description: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    builtin: bool = False

    @property
    def privilege_set(self) -> frozenset[str]:
        return frozenset(self.privileges)

    @property
    def display_description(self) -> str:
        return self.description or f"Custom role with {len(self.privileges)} privileges"


class RoleRegistry:
    """
    Role table plus explicit user -> role assignments.

    Usage:
        registry = RoleRegistry()
        registry.define_role("auditor", ["SELECT", "SHOW VIEW", "TRIGGER"])
        registry.assign_role("carol", "auditor")
    """

    def __init__(self, store: Optional[AssignmentStore] = None):
        self._store = store or InMemoryAssignmentStore()
        self._roles: dict[str, RoleDefinition] = {}
        # Definition sequence per role; higher means more recently defined.
        self._sequence = count()
        self._defined_at: dict[str, int] = {}

        for role, privileges in BUILTIN_ROLE_PRIVILEGES.items():
            self._insert(
                RoleDefinition(
                    name=role.value,
                    privileges=tuple(p.value for p in privileges),
                    builtin=True,
                )
            )

    @property
    def store(self) -> AssignmentStore:
        return self._store

    # --------------------------
    # Role definitions
    # --------------------------

    def define_role(
        self,
        name: str,
        privileges: Union[Iterable[str], str],
        description: Optional[str] = None,
    ) -> RoleDefinition:
        """
        Insert or overwrite a custom role.

        Args:
            name: Role name
            privileges: Privilege tokens, all from the supported vocabulary
            description: Optional free-text description

        Returns:
            The stored RoleDefinition

        Raises:
            ValidationError: Empty or over-long name, empty privilege list, a token
                outside the vocabulary, or a built-in role name
        """
        if not name or not name.strip():
            raise ValidationError("Role name is required")
        if len(name) > ROLE_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Role name exceeds {ROLE_NAME_MAX_LENGTH} characters",
                details={"max_length": ROLE_NAME_MAX_LENGTH},
            )
        if name in BUILTIN_ROLES:
            raise ValidationError(
                "Built-in roles cannot be redefined",
                details={"role": name},
            )

        tokens = [privileges] if isinstance(privileges, str) else list(privileges)
        if not tokens:
            raise ValidationError("A role requires at least one privilege")
        invalid = [t for t in tokens if t not in VALID_PRIVILEGES]
        if invalid:
            raise ValidationError(
                "Unsupported privileges in role definition",
                details={"invalid": invalid},
            )

        role = RoleDefinition(
            name=name,
            privileges=tuple(dict.fromkeys(tokens)),
            description=description or "",
        )
        self._insert(role)
        logger.info("role_defined", role=name, privileges=list(role.privileges))
        return role

    def get_role(self, name: str) -> Optional[RoleDefinition]:
        return self._roles.get(name)

    def has_role(self, name: str) -> bool:
        return name in self._roles

    def list_roles(self) -> list[RoleDefinition]:
        """All roles, built-ins first, then custom roles in definition order."""
        return sorted(self._roles.values(), key=lambda r: self._defined_at[r.name])

    def list_custom_roles(self) -> list[RoleDefinition]:
        return [r for r in self.list_roles() if not r.builtin]

    def custom_roles_newest_first(self) -> list[RoleDefinition]:
        """Custom roles ordered for inference matching."""
        return list(reversed(self.list_custom_roles()))

    def _insert(self, role: RoleDefinition) -> None:
        self._roles[role.name] = role
        self._defined_at[role.name] = next(self._sequence)

    # --------------------------
    # Assignments
    # --------------------------

    def assign_role(self, username: str, role_name: str) -> None:
        """
        Record an explicit role for a user, replacing any previous one.

        Raises:
            RoleNotFoundError: If the role is not defined
        """
        if role_name not in self._roles:
            raise RoleNotFoundError(identifier=role_name)
        self._store.set(username, role_name)
        logger.info("role_assigned", username=username, role=role_name)

    def get_assignment(self, username: str) -> Optional[str]:
        return self._store.get(username)

    def clear_assignment(self, username: str) -> None:
        """Remove the override for a user. Safe to call when none exists."""
        self._store.delete(username)
        logger.debug("role_assignment_cleared", username=username)
