"""
Unit tests for the resource tree.
"""

import pytest

from acl.resources.tree import ResourceTree, resource_id_of
from shared.errors import DuplicateResourceError, UnknownResourceError, UnknownParentError


class Page:
    """Resource reference used in tests."""

    def __init__(self, resource_id):
        self.resource_id = resource_id

    def get_resource_id(self):
        return self.resource_id


class TestResourceTree:
    """Test cases for ResourceTree."""

    @pytest.fixture
    def tree(self):
        """Create a city > building > room tree."""
        return ResourceTree().add("city").add("building", "city").add("room", "building")

    def test_inherits(self, tree):
        """Test ancestry along the parent chain."""
        assert tree.inherits("building", "city", True) is True
        assert tree.inherits("room", "building", True) is True
        assert tree.inherits("room", "city") is True
        assert tree.inherits("room", "city", True) is False
        assert tree.inherits("city", "building") is False
        assert tree.inherits("building", "room") is False
        assert tree.inherits("city", "room") is False

    def test_remove_cascades(self, tree):
        """Test removing a resource removes its subtree."""
        removed = tree.remove("building")

        assert removed == ["building", "room"]
        assert tree.has("room") is False
        assert tree.has("building") is False
        assert tree.get_children("city") == []

    def test_get_descendants_deepest_first(self, tree):
        """Test descendant listing order."""
        tree.add("hall", "building").add("lobby", "city")

        assert tree.get_descendants("city") == ["room", "hall", "building", "lobby"]

    def test_duplicate_resource(self, tree):
        """Test the same resource cannot be added twice."""
        with pytest.raises(DuplicateResourceError):
            tree.add("city")

    def test_unknown_parent(self, tree):
        """Test a missing parent is rejected."""
        with pytest.raises(UnknownParentError) as exc_info:
            tree.add("street", "country")

        assert exc_info.value.details["parent_kind"] == "resource"
        assert tree.has("street") is False

    def test_self_parent_rejected(self, tree):
        """Test a resource cannot be its own parent."""
        with pytest.raises(UnknownParentError):
            tree.add("loop", "loop")

    def test_unknown_resource(self, tree):
        """Test lookups on missing resources raise."""
        with pytest.raises(UnknownResourceError):
            tree.get("missing")
        with pytest.raises(UnknownResourceError):
            tree.remove("missing")
        with pytest.raises(UnknownResourceError):
            tree.inherits("room", "missing")

    def test_get_parent(self, tree):
        """Test parent lookup."""
        assert tree.get_parent("room") == "building"
        assert tree.get_parent("city") is None

    def test_remove_all(self, tree):
        """Test clearing the tree returns every removed id."""
        assert tree.remove_all() == ["city", "building", "room"]
        assert len(tree) == 0

    def test_resource_id_of(self):
        """Test resolving references and plain identifiers."""
        assert resource_id_of(Page("wiki")) == "wiki"
        assert resource_id_of("wiki") == "wiki"
        assert resource_id_of(None) is None
