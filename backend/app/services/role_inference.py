"""
Role Inference Engine
=====================

Maps the grant strings reported by MySQL for a user back to a role label.

Resolution order:
1. Explicit override recorded in the registry
2. Exact privilege-set match against a custom role (newest definition
   first); a match is remembered as an override
3. Substring cascade over the raw grant text for the built-in labels

Steps 2 and 3 deliberately use different representations. Custom roles
are matched on the parsed token set, so an extra privilege defeats the
match; built-ins are matched on lowercased text, so unrelated grants do
not.
"""

from typing import Iterable, Sequence

from app.core.logging import get_logger
from app.models.role_enum import Role
from app.services.privileges import extract_privileges
from app.services.role_registry import RoleRegistry

logger = get_logger(__name__)


def _has_any(text: str, *needles: str) -> bool:
    return any(needle in text for needle in needles)


def infer_builtin_role(grants: Iterable[str]) -> str:
    """
    Classify raw grant text into a built-in label.

    The rules form a priority list: the first one that matches wins.

    Args:
        grants: Grant strings as reported by SHOW GRANTS

    Returns:
        One of database_admin, backup, developer, analyst, read_only, unknown
    """
    joined = ",".join(g for g in grants if isinstance(g, str)).lower()

    if "all privileges" in joined:
        return Role.DATABASE_ADMIN.value
    if "lock tables" in joined and "trigger" in joined and "event" in joined:
        return Role.BACKUP.value
    if "insert" in joined and "update" in joined and "create" in joined:
        return Role.DEVELOPER.value
    if "select" in joined and "show view" in joined and not _has_any(joined, "insert", "update", "create"):
        return Role.ANALYST.value
    if "select" in joined and not _has_any(joined, "insert", "update", "create", "drop"):
        return Role.READ_ONLY.value
    return Role.UNKNOWN.value


class RoleInferenceEngine:
    """
    Best-fit role resolution for MySQL accounts.

    Usage:
        engine = RoleInferenceEngine(registry)
        role = engine.resolve_role("bob", ["GRANT SELECT, SHOW VIEW ON *.* TO `bob`@`localhost`"])
    """

    def __init__(self, registry: RoleRegistry):
        self.registry = registry

    def resolve_role(self, username: str, grants: Sequence[str]) -> str:
        override = self.registry.get_assignment(username)
        if override:
            return override

        privileges = extract_privileges(grants)
        if privileges:
            for role in self.registry.custom_roles_newest_first():
                if role.privilege_set == privileges:
                    self.registry.assign_role(username, role.name)
                    logger.debug("role_inferred_custom", username=username, role=role.name)
                    return role.name

        role_name = infer_builtin_role(grants)
        logger.debug("role_inferred_builtin", username=username, role=role_name)
        return role_name
