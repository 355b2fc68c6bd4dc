"""
Role Inference Unit Tests
=========================

Tests for:
- Override precedence
- Exact-set matching against custom roles and its tie-break
- The built-in substring cascade
"""

import pytest

from app.services.role_inference import RoleInferenceEngine, infer_builtin_role
from app.services.role_registry import RoleRegistry


pytestmark = pytest.mark.unit


def grants_for(*privileges: str, user: str = "bob", target: str = "*.*") -> list[str]:
    """SHOW GRANTS output for an account holding the given privileges."""
    return [
        f"GRANT USAGE ON *.* TO `{user}`@`localhost`",
        f"GRANT {', '.join(privileges)} ON {target} TO `{user}`@`localhost`",
    ]


class TestBuiltinCascade:
    """Tests for infer_builtin_role."""

    def test_all_privileges_is_database_admin(self):
        assert infer_builtin_role(grants_for("ALL PRIVILEGES")) == "database_admin"

    def test_backup(self):
        grants = grants_for("SELECT", "LOCK TABLES", "SHOW VIEW", "EVENT", "TRIGGER")

        assert infer_builtin_role(grants) == "backup"

    def test_developer(self):
        assert infer_builtin_role(grants_for("SELECT", "INSERT", "UPDATE", "CREATE")) == "developer"

    def test_analyst(self):
        assert infer_builtin_role(grants_for("SELECT", "SHOW VIEW")) == "analyst"

    def test_read_only(self):
        assert infer_builtin_role(grants_for("SELECT")) == "read_only"

    def test_drop_alone_is_unknown(self):
        assert infer_builtin_role(grants_for("DROP")) == "unknown"

    def test_select_with_drop_is_unknown(self):
        assert infer_builtin_role(grants_for("SELECT", "DROP")) == "unknown"

    def test_no_grants_is_unknown(self):
        assert infer_builtin_role([]) == "unknown"

    def test_order_matters_admin_before_backup(self):
        # Arrange
        grants = grants_for("ALL PRIVILEGES") + grants_for("LOCK TABLES", "TRIGGER", "EVENT", target="`x`.*")

        # Act / Assert
        assert infer_builtin_role(grants) == "database_admin"

    def test_developer_superset_still_developer(self):
        # Extra privileges do not defeat substring matching
        grants = grants_for("SELECT", "INSERT", "UPDATE", "CREATE", "DELETE", "INDEX")

        assert infer_builtin_role(grants) == "developer"

    def test_grants_split_across_databases(self):
        # Arrange
        grants = grants_for("SELECT", target="`shop`.*") + grants_for("SHOW VIEW", target="`crm`.*")

        # Act / Assert
        assert infer_builtin_role(grants) == "analyst"


class TestResolveRole:
    """Tests for RoleInferenceEngine.resolve_role."""

    def test_override_wins(self, registry: RoleRegistry, inference_engine: RoleInferenceEngine):
        # Arrange
        registry.assign_role("bob", "developer")

        # Act
        role = inference_engine.resolve_role("bob", grants_for("ALL PRIVILEGES"))

        # Assert
        assert role == "developer"

    def test_override_wins_without_grants(self, registry: RoleRegistry, inference_engine: RoleInferenceEngine):
        registry.assign_role("bob", "backup")

        assert inference_engine.resolve_role("bob", []) == "backup"

    def test_analyst_without_override(self, inference_engine: RoleInferenceEngine):
        assert inference_engine.resolve_role("bob", grants_for("SELECT", "SHOW VIEW")) == "analyst"

    def test_builtin_inference_does_not_record_override(
        self, registry: RoleRegistry, inference_engine: RoleInferenceEngine
    ):
        # Act
        inference_engine.resolve_role("bob", grants_for("SELECT"))

        # Assert
        assert registry.get_assignment("bob") is None

    def test_custom_role_exact_match(self, registry: RoleRegistry, inference_engine: RoleInferenceEngine):
        # Arrange
        registry.define_role("auditor", ["SELECT", "SHOW VIEW", "TRIGGER"])

        # Act
        role = inference_engine.resolve_role("bob", grants_for("TRIGGER", "SELECT", "SHOW VIEW"))

        # Assert
        assert role == "auditor"
        assert registry.get_assignment("bob") == "auditor"

    def test_custom_role_match_shadows_builtin(self, registry: RoleRegistry, inference_engine: RoleInferenceEngine):
        # Arrange: same privileges as the built-in analyst role
        registry.define_role("viewer", ["SELECT", "SHOW VIEW"])

        # Act / Assert
        assert inference_engine.resolve_role("bob", grants_for("SELECT", "SHOW VIEW")) == "viewer"

    def test_extra_privilege_defeats_custom_match(
        self, registry: RoleRegistry, inference_engine: RoleInferenceEngine
    ):
        # Arrange
        registry.define_role("auditor", ["SELECT", "SHOW VIEW", "TRIGGER"])

        # Act
        role = inference_engine.resolve_role("bob", grants_for("SELECT", "SHOW VIEW", "TRIGGER", "INDEX"))

        # Assert
        assert role == "analyst"
        assert registry.get_assignment("bob") is None

    def test_custom_match_spans_multiple_grants(
        self, registry: RoleRegistry, inference_engine: RoleInferenceEngine
    ):
        # Arrange
        registry.define_role("indexer", ["INDEX", "ALTER"])
        grants = grants_for("INDEX", target="`shop`.*") + grants_for("ALTER", target="`crm`.*")

        # Act / Assert
        assert inference_engine.resolve_role("bob", grants) == "indexer"

    def test_newest_custom_role_wins_tie(self, registry: RoleRegistry, inference_engine: RoleInferenceEngine):
        # Arrange
        registry.define_role("older", ["INDEX", "ALTER"])
        registry.define_role("newer", ["ALTER", "INDEX"])

        # Act / Assert
        assert inference_engine.resolve_role("bob", grants_for("INDEX", "ALTER")) == "newer"

    def test_recorded_match_is_sticky(self, registry: RoleRegistry, inference_engine: RoleInferenceEngine):
        # Arrange
        registry.define_role("indexer", ["INDEX", "ALTER"])
        inference_engine.resolve_role("bob", grants_for("INDEX", "ALTER"))

        # Act: grants change, the recorded override still applies
        role = inference_engine.resolve_role("bob", grants_for("ALL PRIVILEGES"))

        # Assert
        assert role == "indexer"

    def test_custom_role_defined_later_becomes_target(
        self, registry: RoleRegistry, inference_engine: RoleInferenceEngine
    ):
        # Arrange
        grants = grants_for("DROP")
        assert inference_engine.resolve_role("bob", grants) == "unknown"

        # Act
        registry.define_role("dropper", ["DROP"])

        # Assert
        assert inference_engine.resolve_role("bob", grants) == "dropper"

    def test_malformed_grants_fall_through(self, inference_engine: RoleInferenceEngine):
        assert inference_engine.resolve_role("bob", ["not a grant", "", "GRANT ON"]) == "unknown"
