"""
Unit tests for the role registry.
"""

import pytest

from acl.roles.registry import RoleRegistry
from shared.errors import DuplicateRoleError, UnknownRoleError, UnknownParentError


class TestRoleRegistry:
    """Test cases for RoleRegistry."""

    @pytest.fixture
    def registry(self):
        """Create RoleRegistry instance."""
        return RoleRegistry()

    def test_basic_inheritance(self, registry):
        """Test single-parent inheritance chain."""
        registry.add("guest").add("member", "guest").add("editor", "member")

        assert registry.get_parents("guest") == []
        assert registry.get_parents("member") == ["guest"]
        assert registry.get_parents("editor") == ["member"]

        assert registry.inherits("member", "guest", True) is True
        assert registry.inherits("editor", "member", True) is True
        assert registry.inherits("editor", "guest") is True
        assert registry.inherits("editor", "guest", True) is False

        assert registry.inherits("guest", "member") is False
        assert registry.inherits("member", "editor") is False
        assert registry.inherits("guest", "editor") is False

    def test_multiple_inheritance(self, registry):
        """Test multiple parents given as a list."""
        registry.add("parent1").add("parent2").add("child", ["parent1", "parent2"])

        assert registry.get_parents("child") == ["parent1", "parent2"]
        assert registry.inherits("child", "parent1") is True
        assert registry.inherits("child", "parent2") is True

    def test_remove_parent_keeps_child(self, registry):
        """Test removing a parent unlinks it without removing children."""
        registry.add("parent1").add("parent2").add("child", ["parent1", "parent2"])

        registry.remove("parent2")

        assert registry.has("child") is True
        assert registry.get_parents("child") == ["parent1"]
        assert registry.inherits("child", "parent1") is True

    def test_remove_child_unlinks_from_parent(self, registry):
        """Test removing a child lets the parent be removed cleanly."""
        registry.add("parent").add("child", "parent")

        registry.remove("child")
        registry.remove("parent")

        assert registry.list_ids() == []

    def test_duplicate_role(self, registry):
        """Test the same role cannot be registered twice."""
        registry.add("tst")

        with pytest.raises(DuplicateRoleError) as exc_info:
            registry.add("tst")

        assert exc_info.value.code == "DUPLICATE_ENTITY"
        assert exc_info.value.details["id"] == "tst"

    def test_unknown_parent(self, registry):
        """Test a missing parent is rejected without registering the role."""
        registry.add("known")

        with pytest.raises(UnknownParentError):
            registry.add("child", ["known", "missing"])

        assert registry.has("child") is False
        assert registry.list_ids() == ["known"]

    def test_unknown_role_lookups(self, registry):
        """Test lookups on missing roles raise."""
        registry.add("known")

        with pytest.raises(UnknownRoleError):
            registry.get("missing")
        with pytest.raises(UnknownRoleError):
            registry.get_parents("missing")
        with pytest.raises(UnknownRoleError):
            registry.inherits("known", "missing")
        with pytest.raises(UnknownRoleError):
            registry.remove("missing")

    def test_has_unhashable(self, registry):
        """Test has() tolerates unhashable values."""
        assert registry.has(["a"]) is False

    def test_inherits_diamond(self, registry):
        """Test ancestry through a shared grandparent."""
        registry.add("root").add("left", "root").add("right", "root").add("leaf", ["left", "right"])

        assert registry.inherits("leaf", "root") is True
        assert registry.inherits("leaf", "root", True) is False

    def test_list_ids_insertion_order(self, registry):
        """Test identifiers are listed in insertion order."""
        registry.add("b").add("a").add("c", ["a", "b"])

        assert registry.list_ids() == ["b", "a", "c"]
        assert len(registry) == 3

    def test_remove_all(self, registry):
        """Test clearing the registry."""
        registry.add("a").add("b", "a")

        registry.remove_all()

        assert registry.list_ids() == []
        assert registry.has("a") is False
