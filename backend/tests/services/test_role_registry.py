"""
Role Registry Unit Tests
========================

Tests for:
- Built-in role seeding
- define_role validation and overwrite semantics
- assign_role / clear_assignment / get_assignment
- Custom role listings and ordering
"""

import pytest

from app.core.exceptions import NotFoundError, RoleNotFoundError, ValidationError
from app.models.role_enum import BUILTIN_ROLES, ROLE_NAME_MAX_LENGTH
from app.services.role_registry import RoleRegistry


pytestmark = pytest.mark.unit


class TestBuiltinRoles:
    """Tests for the seeded built-in roles."""

    def test_builtins_are_present(self, registry: RoleRegistry):
        for name in ("database_admin", "developer", "analyst", "backup"):
            assert registry.has_role(name)

    def test_builtin_privileges(self, registry: RoleRegistry):
        # Act
        backup = registry.get_role("backup")

        # Assert
        assert backup.builtin is True
        assert backup.privilege_set == {"SELECT", "LOCK TABLES", "SHOW VIEW", "EVENT", "TRIGGER"}

    def test_inferred_only_labels_are_not_roles(self, registry: RoleRegistry):
        assert not registry.has_role("read_only")
        assert not registry.has_role("unknown")

    def test_builtins_not_listed_as_custom(self, registry: RoleRegistry):
        assert registry.list_custom_roles() == []

    def test_builtin_cannot_be_redefined(self, registry: RoleRegistry):
        # Act / Assert
        with pytest.raises(ValidationError):
            registry.define_role("analyst", ["SELECT"])

        assert registry.get_role("analyst").privilege_set == {"SELECT", "SHOW VIEW"}


class TestDefineRole:
    """Tests for define_role."""

    def test_define_custom_role(self, registry: RoleRegistry):
        # Act
        role = registry.define_role("auditor", ["SELECT", "TRIGGER"], "Audit access")

        # Assert
        assert role.name == "auditor"
        assert role.privileges == ("SELECT", "TRIGGER")
        assert role.description == "Audit access"
        assert role.builtin is False
        assert registry.get_role("auditor") == role

    def test_empty_privileges_rejected(self, registry: RoleRegistry):
        with pytest.raises(ValidationError):
            registry.define_role("empty", [])

        assert not registry.has_role("empty")

    def test_unknown_privilege_rejected(self, registry: RoleRegistry):
        # Act
        with pytest.raises(ValidationError) as exc_info:
            registry.define_role("weird", ["SELECT", "SUPER"])

        # Assert
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"invalid": ["SUPER"]}
        assert not registry.has_role("weird")

    def test_blank_name_rejected(self, registry: RoleRegistry):
        with pytest.raises(ValidationError):
            registry.define_role("  ", ["SELECT"])

    def test_name_fits_assignment_column(self, registry: RoleRegistry):
        # Act
        registry.define_role("r" * ROLE_NAME_MAX_LENGTH, ["SELECT"])

        # Assert
        assert registry.has_role("r" * ROLE_NAME_MAX_LENGTH)

    def test_over_long_name_rejected(self, registry: RoleRegistry):
        # Act
        with pytest.raises(ValidationError) as exc_info:
            registry.define_role("r" * (ROLE_NAME_MAX_LENGTH + 1), ["SELECT"])

        # Assert
        assert exc_info.value.details == {"max_length": ROLE_NAME_MAX_LENGTH}
        assert registry.list_custom_roles() == []

    def test_redefine_overwrites(self, registry: RoleRegistry):
        # Arrange
        registry.define_role("reporting", ["SELECT"])

        # Act
        registry.define_role("reporting", ["SELECT", "SHOW VIEW", "EVENT"])

        # Assert
        assert registry.get_role("reporting").privilege_set == {"SELECT", "SHOW VIEW", "EVENT"}
        assert [r.name for r in registry.list_custom_roles()] == ["reporting"]

    def test_duplicate_tokens_collapsed(self, registry: RoleRegistry):
        role = registry.define_role("dup", ["SELECT", "SELECT", "INDEX"])

        assert role.privileges == ("SELECT", "INDEX")

    def test_display_description_default(self, registry: RoleRegistry):
        role = registry.define_role("ops", ["INDEX", "ALTER"])

        assert role.display_description == "Custom role with 2 privileges"


class TestRoleListing:
    """Tests for list_roles and custom role ordering."""

    def test_list_roles_builtins_first(self, registry: RoleRegistry):
        # Arrange
        registry.define_role("zeta", ["SELECT"])

        # Act
        names = [r.name for r in registry.list_roles()]

        # Assert
        assert set(names[:4]) == BUILTIN_ROLES
        assert names[4:] == ["zeta"]

    def test_newest_first_follows_redefinition(self, registry: RoleRegistry):
        # Arrange
        registry.define_role("first", ["SELECT"])
        registry.define_role("second", ["SELECT"])
        registry.define_role("first", ["SELECT"])

        # Act
        names = [r.name for r in registry.custom_roles_newest_first()]

        # Assert
        assert names == ["first", "second"]


class TestAssignments:
    """Tests for explicit role assignments."""

    def test_assign_and_get(self, registry: RoleRegistry):
        # Act
        registry.assign_role("alice", "developer")

        # Assert
        assert registry.get_assignment("alice") == "developer"

    def test_assign_replaces_previous(self, registry: RoleRegistry):
        # Arrange
        registry.assign_role("alice", "developer")

        # Act
        registry.assign_role("alice", "analyst")

        # Assert
        assert registry.get_assignment("alice") == "analyst"

    def test_assign_unknown_role(self, registry: RoleRegistry):
        # Act / Assert
        with pytest.raises(RoleNotFoundError) as exc_info:
            registry.assign_role("alice", "wizard")

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.status_code == 404
        assert registry.get_assignment("alice") is None

    def test_assign_custom_role(self, registry: RoleRegistry):
        # Arrange
        registry.define_role("auditor", ["SELECT", "TRIGGER"])

        # Act
        registry.assign_role("carol", "auditor")

        # Assert
        assert registry.get_assignment("carol") == "auditor"

    def test_clear_assignment(self, registry: RoleRegistry):
        # Arrange
        registry.assign_role("alice", "backup")

        # Act
        registry.clear_assignment("alice")

        # Assert
        assert registry.get_assignment("alice") is None

    def test_clear_assignment_is_idempotent(self, registry: RoleRegistry):
        registry.clear_assignment("nobody")
        registry.clear_assignment("nobody")

        assert registry.get_assignment("nobody") is None
